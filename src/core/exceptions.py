"""Custom exceptions. Every exception raised on purpose inside the project derives from GameError."""


class GameError(Exception):
    """Top-level exception of the project."""


# --- Board / rules ---
class InvalidColumnError(GameError):
    """Column index outside of the board. Callers must only pass 0-6, so this signals a bug."""


# --- Session coordination ---
class RegistryError(GameError):
    """The session registry is in a state that a session cannot have produced by itself."""


class NotificationError(GameError):
    """A message could not be delivered to (or edited in) a room."""


# --- Inbound commands ---
class ParseCommandError(GameError):
    """A chat message could not be turned into a command."""


class NoPrefixError(ParseCommandError):
    """The message does not start with the command prefix."""


class BotAuthorError(ParseCommandError):
    """The message was written by a bot."""


class InvalidTargetUserError(ParseCommandError):
    """The target of the command was not specified or could not be found."""


class InvalidCommandError(ParseCommandError):
    """The command does not exist or is malformed."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: {name!r}")
        self.name = name


# --- API ---
class InvalidRequestError(GameError, ValueError):
    """Request body failed validation."""
