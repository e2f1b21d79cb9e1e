# services/debate_view.py
"""
Debate room view-model: what a single viewer can do in one room.

Wraps a `DebateRoomState` with the viewer's chosen side, the round timer and
AI turn-taking. Action failures have already been notified by the state
layer; here they are only logged so one failed click never takes the view
down.
"""
import logging
from typing import Dict, List, Optional

from core.errors import DebateError
from models import DebateMessage, DebateVote
from services.debate_room import DebateRoomState
from services.round_timer import RoundTimer, format_time

logger = logging.getLogger(__name__)

OPPOSITE = {"pro": "con", "con": "pro"}


async def take_ai_turn(state: DebateRoomState, human_side: str, round_type: str) -> Optional[DebateMessage]:
    """
    In ai_vs_user rooms, answer a human argument with one AI rebuttal from
    the opposite side. Returns None when the room has no AI opponent seated.
    Raises AIResponseError/StoreError on failure.
    """
    room = state.current_room
    if room is None or room.mode != "ai_vs_user":
        return None
    ai_side = OPPOSITE[human_side]
    ai_participant = state.find_participant(ai_side, "ai")
    if ai_participant is None:
        logger.info("No AI participant on %s side of room %s; skipping AI turn", ai_side, room.id)
        return None
    reply = await state.generate_ai_response(ai_side, round_type)
    return state.send_message(reply, round_type, ai_participant.id)


class DebateRoomView:
    def __init__(self, state: DebateRoomState, room_id: str, *, timer: Optional[RoundTimer] = None):
        self.state = state
        self.room_id = room_id
        self.user_side: Optional[str] = None
        self.selected_vote: Optional[str] = None
        self.timer = timer or RoundTimer(on_complete=self.on_round_end)
        if timer is not None and timer.on_complete is None:
            timer.on_complete = self.on_round_end

    # --- loading ---
    def load(self):
        return self.state.fetch_debate_room(self.room_id)

    # --- derived ---
    @property
    def current_round(self) -> str:
        return self.timer.current_round

    @property
    def show_voting(self) -> bool:
        return self.timer.show_voting

    @property
    def time_display(self) -> str:
        return format_time(self.timer.time_left)

    @property
    def user_participant(self):
        if self.user_side is None:
            return None
        return self.state.find_participant(self.user_side, "user")

    @property
    def can_participate(self) -> bool:
        room = self.state.current_room
        return bool(self.user_participant and room is not None and room.status == "active")

    def messages_for_round(self, round_type: str, side: Optional[str] = None) -> List[DebateMessage]:
        out = []
        for m in self.state.messages:
            if m.round_type != round_type:
                continue
            if side is not None:
                speaker = self.state.participant(m.participant_id)
                if speaker is None or speaker.side != side:
                    continue
            out.append(m)
        return out

    def vote_results(self) -> Dict[str, int]:
        return self.state.vote_results()

    # --- actions ---
    def join(self, side: str):
        try:
            participant = self.state.join_debate_room(self.room_id, side)
        except DebateError:
            logger.warning("Failed to join debate %s as %s", self.room_id, side)
            return None
        self.user_side = side
        return participant

    def start_round(self):
        room = self.state.current_room
        if room is not None and room.status == "waiting":
            try:
                self.state.update_room_status("active")
            except DebateError:
                logger.warning("Could not mark room %s active", self.room_id)
        self.timer.start()

    def toggle_timer(self):
        if self.timer.is_active:
            self.timer.pause()
        else:
            self.start_round()

    def tick(self, seconds: int = 1):
        self.timer.tick(seconds)

    def on_round_end(self):
        self.state.notifier.notify("Debate Completed", "The debate has ended. Time to vote!")
        room = self.state.current_room
        if room is not None and room.status != "completed":
            try:
                self.state.update_room_status("completed")
            except DebateError:
                logger.warning("Could not mark room %s completed", self.room_id)

    async def send_argument(self, text: str) -> Optional[DebateMessage]:
        """Store the viewer's argument, then let the AI answer if it is seated."""
        text = (text or "").strip()
        if not text or self.user_side is None:
            return None
        participant = self.user_participant
        if participant is None:
            return None

        round_type = self.current_round
        try:
            message = self.state.send_message(text, round_type, participant.id)
        except DebateError:
            logger.warning("Failed to send message in room %s", self.room_id)
            return None

        try:
            await take_ai_turn(self.state, self.user_side, round_type)
        except DebateError:
            logger.warning("AI turn dropped in room %s (%s)", self.room_id, round_type)
            self.state.notifier.error("Failed to generate AI response.")
        return message

    def select_vote(self, side: str):
        self.selected_vote = side

    def vote(self) -> Optional[DebateVote]:
        if not self.selected_vote:
            return None
        try:
            return self.state.submit_vote(self.selected_vote)
        except DebateError:
            logger.warning("Failed to submit vote in room %s", self.room_id)
            return None
