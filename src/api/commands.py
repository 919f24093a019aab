"""Turning inbound chat messages into commands."""

from src.core.exceptions import (
    BotAuthorError,
    InvalidCommandError,
    InvalidTargetUserError,
    NoPrefixError,
)
from src.core.models import Challenge, ChatMessage, Command

DEFAULT_PREFIX = "c4!"


def parse_command(message: ChatMessage, prefix: str = DEFAULT_PREFIX) -> Command:
    """
    Parse a chat message into a Command.

    ----
    Raises (all subclasses of ParseCommandError):
    * NoPrefixError: not meant for the bot at all
    * BotAuthorError: bots can't play
    * InvalidTargetUserError: `challenge` without anyone mentioned
    * InvalidCommandError: anything else after the prefix
    """
    if not message.content.startswith(prefix):
        raise NoPrefixError(message.content)
    if message.author.bot:
        raise BotAuthorError(message.author.id)

    words = message.content[len(prefix) :].split()
    command_name = words[0] if words else ""

    if command_name == "challenge":
        if not message.mentions:
            raise InvalidTargetUserError(message.content)
        return Challenge(
            room=message.room,
            challenger=message.author,
            opponent=message.mentions[0],
        )

    raise InvalidCommandError(command_name)
