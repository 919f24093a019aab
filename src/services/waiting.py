"""
Waiting on a session's event sources: whichever of cancellation, a matching signal, or the timeout comes first.

Waiters that lose the race are cancelled. A cancelled `Queue.get` never consumes an item,
so nothing is carried over into the next wait except signals that were not looked at yet.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from src.core.models import Signal
from src.core.shared_types import GameAction
from src.services.registry import SessionHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Returns the meaning of a signal, or None if the signal must be ignored
SignalFilter = Callable[[Signal], T | None]


@dataclass
class WaitResult(Generic[T]):
    action: GameAction | None = None
    signal: Signal | None = None
    value: T | None = None

    @property
    def cancelled(self) -> bool:
        return self.action is not None

    @property
    def timed_out(self) -> bool:
        return self.action is None and self.signal is None


async def _first_match(
    signals: asyncio.Queue[Signal], accept: SignalFilter[T]
) -> tuple[Signal, T]:
    while True:
        signal = await signals.get()
        value = accept(signal)
        if value is not None:
            return signal, value
        logger.debug("Ignoring %s from %s", signal.emoji, signal.player.id)


async def wait_for_signal(
    handle: SessionHandle, accept: SignalFilter[T], timeout: float
) -> WaitResult[T]:
    """
    Wait at most `timeout` seconds for the first signal `accept` recognises.

    ----
    The deadline does not move when ignored signals arrive.
    If cancellation and a signal are both ready, cancellation wins.
    """
    cancel_get = asyncio.ensure_future(handle.cancel.get())
    signal_get = asyncio.ensure_future(_first_match(handle.signals, accept))
    try:
        done, _ = await asyncio.wait(
            {cancel_get, signal_get},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        for waiter in (cancel_get, signal_get):
            if not waiter.done():
                waiter.cancel()

    if cancel_get in done:
        return WaitResult(action=cancel_get.result())
    if signal_get in done:
        signal, value = signal_get.result()
        return WaitResult(signal=signal, value=value)
    return WaitResult()


def drain(queue: asyncio.Queue[Signal]) -> int:
    """Drop everything waiting in a queue. Returns the number of dropped items."""
    dropped = 0
    while not queue.empty():
        queue.get_nowait()
        dropped += 1
    return dropped
