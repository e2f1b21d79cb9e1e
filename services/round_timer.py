# services/round_timer.py
"""
Countdown that walks a debate through its rounds.

Each round is started by hand. When the countdown reaches zero the timer
stops and moves on to the next round with a fresh duration; after the last
round it opens voting instead. Nothing is persisted: a new timer always
starts at the first round.
"""
import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from models.debate_models import DEFAULT_ROUNDS, ROUND_DURATION_SECS

logger = logging.getLogger(__name__)


class RoundTimer:
    def __init__(
        self,
        duration: int = ROUND_DURATION_SECS,
        rounds: Sequence[str] = tuple(DEFAULT_ROUNDS),
        *,
        on_round_change: Optional[Callable[[str], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        if not rounds:
            raise ValueError("rounds must not be empty")
        self.duration = duration
        self.rounds = tuple(rounds)
        self.on_round_change = on_round_change
        self.on_complete = on_complete

        self.current_round = self.rounds[0]
        self.time_left = duration
        self.is_active = False
        self.show_voting = False
        self.history: List[str] = [self.current_round]

    def start(self):
        self.time_left = self.duration
        self.is_active = True

    def pause(self):
        self.is_active = False

    def resume(self):
        if self.time_left > 0:
            self.is_active = True

    def toggle(self):
        if self.is_active:
            self.pause()
        else:
            self.start()

    def tick(self, seconds: int = 1):
        if not self.is_active:
            return
        self.time_left = max(0, self.time_left - seconds)
        if self.time_left == 0:
            self.is_active = False
            self.expire()

    def expire(self):
        """End the current round now."""
        if self.show_voting:
            return
        idx = self.rounds.index(self.current_round)
        if idx < len(self.rounds) - 1:
            self.current_round = self.rounds[idx + 1]
            self.time_left = self.duration
            self.history.append(self.current_round)
            logger.info("Round advanced to %s", self.current_round)
            if self.on_round_change:
                self.on_round_change(self.current_round)
        else:
            self.show_voting = True
            logger.info("Final round over; voting open")
            if self.on_complete:
                self.on_complete()

    async def run(self, interval: float = 1.0):
        """Tick once per `interval` seconds until paused or expired."""
        while self.is_active:
            await asyncio.sleep(interval)
            self.tick()


def format_time(seconds: int) -> str:
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins}:{secs:02d}"
