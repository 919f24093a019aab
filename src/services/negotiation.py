"""Challenge negotiation: the opponent has a limited window to accept, and either side may back out."""

import logging

from src.chat import messages
from src.chat.notifier import Announcer, Notifier
from src.core.models import Player, Signal
from src.core.shared_types import NegotiationOutcome
from src.services.registry import SessionHandle, SessionRegistry
from src.services.waiting import wait_for_signal

logger = logging.getLogger(__name__)


class ChallengeNegotiation:
    """Posts the invitation, then waits for a decision on it."""

    def __init__(
        self,
        handle: SessionHandle,
        registry: SessionRegistry,
        notifier: Notifier,
        challenger: Player,
        opponent: Player,
        timeout: float = 60.0,
    ) -> None:
        self.handle = handle
        self.registry = registry
        self.challenger = challenger
        self.opponent = opponent
        self.timeout = timeout
        self.invitation = Announcer(
            notifier,
            handle.room,
            reactions=(messages.DENY_CHALLENGE, messages.ACCEPT_CHALLENGE),
        )

    def interpret(self, signal: Signal) -> NegotiationOutcome | None:
        """Meaning of a reaction on the invitation. Anyone but the two participants is ignored."""
        if signal.emoji == messages.DENY_CHALLENGE:
            # checked first, so challenging yourself and denying counts as cancelling
            if signal.player.id == self.challenger.id:
                return NegotiationOutcome.CANCELLED
            if signal.player.id == self.opponent.id:
                return NegotiationOutcome.DECLINED
        elif (
            signal.emoji == messages.ACCEPT_CHALLENGE
            and signal.player.id == self.opponent.id
        ):
            return NegotiationOutcome.ACCEPTED
        return None

    async def run(self) -> NegotiationOutcome:
        """
        Returns how the challenge ended.

        ---
        The room stays reserved when the challenge is accepted (the game takes it over).
        For every other outcome the room is released before returning.
        """
        await self.invitation.announce(
            messages.challenge_issued(self.challenger, self.opponent, self.timeout)
        )

        result = await wait_for_signal(self.handle, self.interpret, self.timeout)
        if result.cancelled:
            outcome = NegotiationOutcome.TERMINATED
        elif result.timed_out:
            outcome = NegotiationOutcome.TIMED_OUT
        else:
            outcome = result.value

        logger.info(
            "Challenge from %s to %s in room %s: %s",
            self.challenger.id,
            self.opponent.id,
            self.handle.room,
            outcome,
        )
        await self.invitation.announce(self._result_message(outcome))

        if outcome != NegotiationOutcome.ACCEPTED:
            self.registry.release(self.handle.room, self.handle)
        return outcome

    def _result_message(self, outcome: NegotiationOutcome) -> str:
        templates = {
            NegotiationOutcome.ACCEPTED: messages.challenge_accepted,
            NegotiationOutcome.DECLINED: messages.challenge_declined,
            NegotiationOutcome.CANCELLED: messages.challenge_cancelled,
            NegotiationOutcome.TIMED_OUT: messages.challenge_timed_out,
            NegotiationOutcome.TERMINATED: messages.challenge_terminated,
        }
        return templates[outcome](self.challenger, self.opponent)
