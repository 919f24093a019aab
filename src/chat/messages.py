"""User-visible text. Everything the bot says in a room is built here."""

from src.core.models import Player

DENY_CHALLENGE = "❌"
ACCEPT_CHALLENGE = "✅"

# Keycap emojis 1️⃣ - 9️⃣. Only the first seven select a column.
NUMBER_EMOTES: tuple[str, ...] = tuple(f"{digit}️⃣" for digit in "123456789")
COLUMN_EMOTES = NUMBER_EMOTES[:7]

UNKNOWN_COMMAND_REACTION = "❓"


def column_for(emoji: str) -> int | None:
    """Column selected by a keycap reaction, None for any other emoji."""
    if emoji in COLUMN_EMOTES:
        return COLUMN_EMOTES.index(emoji)
    return None


# --- Admission ---
def room_occupied(challenger: Player) -> str:
    return f"{challenger.mention} There is already a game in this channel."


def invalid_target() -> str:
    return "That user could not be found or was not specified."


# --- Negotiation ---
def challenge_issued(challenger: Player, opponent: Player, timeout: float) -> str:
    return (
        f"{opponent.mention} has been challenged to a game by {challenger.mention}!\n\n"
        f"This invite will expire in {timeout:g} seconds."
    )


def challenge_accepted(challenger: Player, opponent: Player) -> str:
    return f"{challenger.mention}'s challenge was accepted by {opponent.mention}!"


def challenge_declined(challenger: Player, opponent: Player) -> str:
    return f"{challenger.mention}'s challenge was declined by {opponent.mention}"


def challenge_cancelled(challenger: Player, opponent: Player) -> str:
    return f"{challenger.mention} has cancelled their challenge against {opponent.mention}"


def challenge_timed_out(challenger: Player, opponent: Player) -> str:
    return f"*{challenger.mention}'s challenge to {opponent.mention} has timed out.*"


def challenge_terminated(challenger: Player, opponent: Player) -> str:
    return f"*{challenger.mention}'s challenge to {opponent.mention} was withdrawn by a moderator.*"


# --- Game over ---
def game_won(board_content: str, winner: Player) -> str:
    return f"{board_content}\n**Game over! {winner.mention} wins!**"


def game_drawn(board_content: str) -> str:
    return f"{board_content}\n**Game over! Draw!**"


def game_forfeited(board_content: str, player: Player) -> str:
    return f"{board_content}\n**Game over! {player.mention} forfeits. (timed out)**"


def game_terminated(board_content: str) -> str:
    return f"{board_content}\n**Game over! The game was ended by a moderator.**"
