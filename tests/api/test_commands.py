"""Unit tests for src/api/commands.py"""

import pytest

from src.api.commands import parse_command
from src.core.exceptions import (
    BotAuthorError,
    InvalidCommandError,
    InvalidTargetUserError,
    NoPrefixError,
    ParseCommandError,
)
from src.core.models import Challenge, ChatMessage, Player

ALICE = Player(id="1", name="alice")
BOB = Player(id="2", name="bob")
CAROL = Player(id="3", name="carol")


def message(content: str, author: Player = ALICE, mentions=(BOB,)) -> ChatMessage:
    return ChatMessage(room="r", author=author, content=content, mentions=tuple(mentions))


def test_challenge_first_mention_is_the_opponent() -> None:
    command = parse_command(message("c4!challenge <@2> <@3>", mentions=(BOB, CAROL)))
    assert command == Challenge(room="r", challenger=ALICE, opponent=BOB)


def test_extra_whitespace_is_fine() -> None:
    command = parse_command(message("c4!   challenge    <@2>"))
    assert isinstance(command, Challenge)


@pytest.mark.parametrize("content", ["hello", "C4!challenge", " c4!challenge", ""])
def test_without_prefix(content: str) -> None:
    with pytest.raises(NoPrefixError):
        parse_command(message(content))


def test_bots_are_ignored() -> None:
    robot = Player(id="9", bot=True)
    with pytest.raises(BotAuthorError):
        parse_command(message("c4!challenge <@2>", author=robot))


def test_challenge_without_target() -> None:
    with pytest.raises(InvalidTargetUserError):
        parse_command(message("c4!challenge", mentions=()))


@pytest.mark.parametrize(
    "content, name",
    [
        ("c4!resign", "resign"),
        ("c4!", ""),
        ("c4!challengeme <@2>", "challengeme"),
    ],
)
def test_unknown_command(content: str, name: str) -> None:
    with pytest.raises(InvalidCommandError) as exc_info:
        parse_command(message(content))
    assert exc_info.value.name == name


def test_custom_prefix() -> None:
    command = parse_command(message("!c4 challenge"), prefix="!c4 ")
    assert command.opponent == BOB


def test_all_parse_errors_share_a_base() -> None:
    with pytest.raises(ParseCommandError):
        parse_command(message("nope"))
