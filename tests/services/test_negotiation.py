"""Unit tests for src/services/negotiation.py"""

import asyncio

import pytest

from src.chat.messages import ACCEPT_CHALLENGE, COLUMN_EMOTES, DENY_CHALLENGE
from src.core.models import Player, Signal
from src.core.shared_types import NegotiationOutcome
from src.services.negotiation import ChallengeNegotiation


def run_negotiation(
    registry, notifier, room, challenger, opponent, signals, timeout=2.0, force_end=False
) -> NegotiationOutcome:
    """Queue the signals up front, then run the negotiation to completion."""

    async def scenario() -> NegotiationOutcome:
        handle = registry.try_reserve(room)
        assert handle is not None
        for signal in signals:
            handle.deliver(signal)
        if force_end:
            handle.force_end()
        negotiation = ChallengeNegotiation(
            handle, registry, notifier, challenger, opponent, timeout=timeout
        )
        return await negotiation.run()

    return asyncio.run(scenario())


def test_invitation_is_posted_with_reactions(
    registry, feed, room, challenger, opponent
) -> None:
    run_negotiation(
        registry, feed, room, challenger, opponent, [Signal(opponent, ACCEPT_CHALLENGE)]
    )
    [message] = feed.messages(room)
    assert message.reactions == [DENY_CHALLENGE, ACCEPT_CHALLENGE]


def test_accepted_keeps_the_room_reserved(
    registry, feed, room, challenger, opponent
) -> None:
    outcome = run_negotiation(
        registry, feed, room, challenger, opponent, [Signal(opponent, ACCEPT_CHALLENGE)]
    )
    assert outcome == NegotiationOutcome.ACCEPTED
    assert room in registry
    assert registry.releases.get(room, 0) == 0
    [message] = feed.messages(room)
    assert message.content == "<@100>'s challenge was accepted by <@200>!"


def test_opponent_declines(registry, feed, room, challenger, opponent) -> None:
    outcome = run_negotiation(
        registry, feed, room, challenger, opponent, [Signal(opponent, DENY_CHALLENGE)]
    )
    assert outcome == NegotiationOutcome.DECLINED
    assert room not in registry
    assert registry.releases[room] == 1
    [message] = feed.messages(room)
    assert message.content == "<@100>'s challenge was declined by <@200>"


def test_challenger_cancels(registry, feed, room, challenger, opponent) -> None:
    outcome = run_negotiation(
        registry, feed, room, challenger, opponent, [Signal(challenger, DENY_CHALLENGE)]
    )
    assert outcome == NegotiationOutcome.CANCELLED
    assert room not in registry
    [message] = feed.messages(room)
    assert message.content == "<@100> has cancelled their challenge against <@200>"


def test_timeout(registry, feed, room, challenger, opponent) -> None:
    outcome = run_negotiation(
        registry, feed, room, challenger, opponent, [], timeout=0.05
    )
    assert outcome == NegotiationOutcome.TIMED_OUT
    assert room not in registry
    assert registry.releases[room] == 1
    [message] = feed.messages(room)
    assert message.content == "*<@100>'s challenge to <@200> has timed out.*"


def test_invitation_mentions_the_window(
    registry, feed, room, challenger, opponent
) -> None:
    async def scenario() -> None:
        handle = registry.try_reserve(room)
        negotiation = ChallengeNegotiation(
            handle, registry, feed, challenger, opponent, timeout=60
        )
        task = asyncio.create_task(negotiation.run())
        message = await feed.wait_for_text(room, "challenged")
        assert message.content == (
            "<@200> has been challenged to a game by <@100>!\n\n"
            "This invite will expire in 60 seconds."
        )
        handle.deliver(Signal(opponent, DENY_CHALLENGE))
        assert await task == NegotiationOutcome.DECLINED

    asyncio.run(scenario())


@pytest.mark.parametrize(
    "who, emoji",
    [
        ("stranger", ACCEPT_CHALLENGE),  # not a participant
        ("stranger", DENY_CHALLENGE),
        ("challenger", ACCEPT_CHALLENGE),  # only the opponent can accept
        ("opponent", COLUMN_EMOTES[0]),  # not a negotiation reaction
        ("opponent", "👍"),
    ],
)
def test_irrelevant_signals_are_ignored(
    registry, feed, room, challenger, opponent, stranger, who, emoji
) -> None:
    players = {"stranger": stranger, "challenger": challenger, "opponent": opponent}
    outcome = run_negotiation(
        registry,
        feed,
        room,
        challenger,
        opponent,
        [Signal(players[who], emoji)],
        timeout=0.05,
    )
    assert outcome == NegotiationOutcome.TIMED_OUT


def test_first_relevant_signal_decides(
    registry, feed, room, challenger, opponent, stranger
) -> None:
    outcome = run_negotiation(
        registry,
        feed,
        room,
        challenger,
        opponent,
        [
            Signal(stranger, DENY_CHALLENGE),
            Signal(opponent, ACCEPT_CHALLENGE),
            Signal(opponent, DENY_CHALLENGE),
        ],
    )
    assert outcome == NegotiationOutcome.ACCEPTED


def test_ignored_signals_do_not_extend_the_window(
    registry, feed, room, challenger, opponent, stranger
) -> None:
    """A stream of irrelevant reactions must not keep the challenge alive past its deadline."""

    async def scenario() -> tuple[NegotiationOutcome, float]:
        handle = registry.try_reserve(room)
        negotiation = ChallengeNegotiation(
            handle, registry, feed, challenger, opponent, timeout=0.2
        )
        loop = asyncio.get_running_loop()
        started = loop.time()
        task = asyncio.create_task(negotiation.run())
        while not task.done():
            handle.deliver(Signal(stranger, ACCEPT_CHALLENGE))
            await asyncio.sleep(0.02)
        return await task, loop.time() - started

    outcome, elapsed = asyncio.run(scenario())
    assert outcome == NegotiationOutcome.TIMED_OUT
    assert elapsed < 1.0


def test_moderator_ends_negotiation(registry, feed, room, challenger, opponent) -> None:
    outcome = run_negotiation(
        registry, feed, room, challenger, opponent, [], force_end=True
    )
    assert outcome == NegotiationOutcome.TERMINATED
    assert room not in registry
    [message] = feed.messages(room)
    assert "withdrawn by a moderator" in message.content


def test_self_challenge_deny_counts_as_cancel(registry, feed, room, challenger) -> None:
    outcome = run_negotiation(
        registry, feed, room, challenger, challenger, [Signal(challenger, DENY_CHALLENGE)]
    )
    assert outcome == NegotiationOutcome.CANCELLED


def test_delivery_failure_does_not_leak_the_room(
    registry, broken_notifier, room, challenger, opponent
) -> None:
    outcome = run_negotiation(
        registry, broken_notifier, room, challenger, opponent, [], timeout=0.05
    )
    assert outcome == NegotiationOutcome.TIMED_OUT
    assert room not in registry
    assert broken_notifier.attempts == 2


def test_player_equality_is_by_id(registry, feed, room, challenger, opponent) -> None:
    """The platform may send a fresh Player object with a different display name."""
    renamed = Player(id=opponent.id, name="bobby")
    outcome = run_negotiation(
        registry, feed, room, challenger, opponent, [Signal(renamed, ACCEPT_CHALLENGE)]
    )
    assert outcome == NegotiationOutcome.ACCEPTED
