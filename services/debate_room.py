# services/debate_room.py
"""
Debate room state.

`DebateRoomState` holds one room as the caller last saw it (room row,
participants, messages, votes) and mediates every write to the store. Each
operation is one insert/update or a full re-fetch; results are appended to
the local lists, nothing is retried and nothing is rolled back across calls.

Failures are reported the same way everywhere: log the exception, push a
destructive notification with a generic message, and re-raise. The one
exception is `fetch_debate_room`, which only notifies.

The caller's session, identity, notifier and AI engine arrive through a
`DebateContext` instead of globals.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

import schemas
from core.errors import (
    AIResponseError,
    NotAuthenticatedError,
    RoomNotLoadedError,
    StoreError,
)
from core.notifications import Notifier
from crud import debate as crud_debate
from models import DebateMessage, DebateParticipant, DebateRoom, DebateVote, User
from models.debate_models import DEFAULT_SETTINGS, default_structure
from services.debate_engine import DebateEngine

logger = logging.getLogger(__name__)

AVAILABLE_TOPICS = (
    "Artificial Intelligence should replace human teachers",
    "Social media does more harm than good",
    "Climate change is the most pressing issue of our time",
    "Universal Basic Income should be implemented globally",
    "Space exploration is a waste of resources",
    "Remote work is better than office work",
    "Cryptocurrency will replace traditional currency",
    "Nuclear energy is the solution to climate change",
)


@dataclass
class DebateContext:
    db: Session
    user: Optional[User] = None
    notifier: Notifier = field(default_factory=Notifier)
    engine: Optional[DebateEngine] = None


def get_available_topics() -> List[str]:
    return list(AVAILABLE_TOPICS)


def merge_settings(patch: Optional[schemas.RoomSettingsPatch]) -> Dict[str, bool]:
    """Defaults overlaid with whatever the caller set explicitly."""
    overrides = patch.model_dump(exclude_none=True) if patch else {}
    return {**DEFAULT_SETTINGS, **overrides}


class DebateRoomState:
    def __init__(self, ctx: DebateContext):
        self.ctx = ctx
        self.loading = False
        self.current_room: Optional[DebateRoom] = None
        self.participants: List[DebateParticipant] = []
        self.messages: List[DebateMessage] = []
        self.votes: List[DebateVote] = []

    @property
    def notifier(self) -> Notifier:
        return self.ctx.notifier

    # ------------------------------------------------------------------
    # guards
    # ------------------------------------------------------------------
    def _require_user(self) -> User:
        if self.ctx.user is None:
            raise NotAuthenticatedError()
        return self.ctx.user

    def _require_room(self) -> DebateRoom:
        if self.current_room is None:
            raise RoomNotLoadedError()
        return self.current_room

    def _store_failed(self, action: str, description: str) -> StoreError:
        """
        Log, roll back, notify; hand back the error for the caller to raise.
        The returned error carries only the generic description; the
        underlying exception is in the log and on `__cause__`.
        """
        logger.exception("Error %s", action)
        self.ctx.db.rollback()
        self.notifier.error(description)
        return StoreError(description)

    # ------------------------------------------------------------------
    # rooms
    # ------------------------------------------------------------------
    def create_debate_room(self, room: schemas.DebateRoomCreate) -> DebateRoom:
        self.loading = True
        try:
            user = self._require_user()
            structure = room.structure.model_dump() if room.structure else default_structure()
            row = crud_debate.create_room(
                self.ctx.db,
                creator_id=user.id,
                title=room.title,
                topic=room.topic,
                topic_source=room.topic_source,
                mode=room.mode,
                room_type=room.room_type,
                structure=structure,
                settings=merge_settings(room.settings),
            )
            self.current_room = row
            self.notifier.notify("Debate Room Created", "Your debate room has been created successfully.")
            return row
        except NotAuthenticatedError:
            logger.warning("Refusing to create a debate room without a user")
            self.notifier.error("Failed to create debate room.")
            raise
        except Exception as e:
            raise self._store_failed("creating debate room", "Failed to create debate room.") from e
        finally:
            self.loading = False

    def update_room_status(self, status: str) -> DebateRoom:
        room = self._require_room()
        try:
            return crud_debate.set_room_status(self.ctx.db, room, status)
        except Exception as e:
            raise self._store_failed("updating room status", "Failed to update debate room.") from e

    def list_public_rooms(
        self,
        *,
        search: Optional[str] = None,
        mode: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[DebateRoom]:
        """`"all"` (or None) disables the mode/status filter."""
        self.loading = True
        try:
            return crud_debate.list_rooms(
                self.ctx.db,
                room_type="public",
                search=search or None,
                mode=None if mode in (None, "all") else mode,
                status=None if status in (None, "all") else status,
            )
        except Exception as e:
            raise self._store_failed("fetching rooms", "Failed to load debate rooms.") from e
        finally:
            self.loading = False

    def fetch_debate_room(self, room_id: str) -> Optional[DebateRoom]:
        """
        Read room, participants, messages and votes one after another, then
        replace local state. Any failure leaves local state untouched.
        """
        self.loading = True
        db = self.ctx.db
        try:
            room = crud_debate.get_room(db, room_id)
            if room is None:
                raise StoreError(f"Debate room {room_id} not found")
            participants = crud_debate.get_participants(db, room_id)
            messages = crud_debate.get_messages(db, room_id)
            votes = crud_debate.get_votes(db, room_id)

            self.current_room = room
            self.participants = list(participants or [])
            self.messages = list(messages or [])
            self.votes = list(votes or [])
            return room
        except Exception:
            self._store_failed("fetching debate room", "Failed to load debate room.")
            return None
        finally:
            self.loading = False

    # ------------------------------------------------------------------
    # participants
    # ------------------------------------------------------------------
    def join_debate_room(self, room_id: str, side: str, bot_id: Optional[str] = None) -> DebateParticipant:
        self.loading = True
        try:
            user = self._require_user()
            participant = crud_debate.create_participant(
                self.ctx.db,
                room_id=room_id,
                user_id=user.id,
                participant_type="user",
                side=side,
                ai_bot_id=bot_id,
            )
            self.participants.append(participant)
            self.notifier.notify("Joined Debate", f"You joined as the {side} side.")
            return participant
        except NotAuthenticatedError:
            self.notifier.error("Failed to join debate room.")
            raise
        except Exception as e:
            raise self._store_failed("joining debate room", "Failed to join debate room.") from e
        finally:
            self.loading = False

    def add_ai_participant(self, room_id: str, side: str, bot_id: Optional[str] = None) -> DebateParticipant:
        try:
            participant = crud_debate.create_participant(
                self.ctx.db,
                room_id=room_id,
                participant_type="ai",
                side=side,
                ai_bot_id=bot_id,
            )
        except Exception as e:
            raise self._store_failed("adding AI participant", "Failed to add AI debater.") from e
        self.participants.append(participant)
        return participant

    def participant(self, participant_id: str) -> Optional[DebateParticipant]:
        return next((p for p in self.participants if p.id == participant_id), None)

    def find_participant(self, side: str, participant_type: str) -> Optional[DebateParticipant]:
        return next(
            (p for p in self.participants if p.side == side and p.participant_type == participant_type),
            None,
        )

    # ------------------------------------------------------------------
    # messages
    # ------------------------------------------------------------------
    def send_message(self, content: str, round_type: str, participant_id: str) -> DebateMessage:
        room = self._require_room()
        try:
            message = crud_debate.create_message(
                self.ctx.db,
                room_id=room.id,
                participant_id=participant_id,
                round_type=round_type,
                content=content,
            )
        except Exception as e:
            raise self._store_failed("sending message", "Failed to send message.") from e
        self.messages.append(message)
        return message

    def round_messages(self, round_type: str) -> List[Dict[str, Optional[str]]]:
        """This round's messages, each tagged with its speaker's side."""
        out = []
        for m in self.messages:
            if m.round_type != round_type:
                continue
            speaker = self.participant(m.participant_id)
            out.append({
                "content": m.content,
                "side": speaker.side if speaker else None,
                "round_type": m.round_type,
            })
        return out

    async def generate_ai_response(self, side: str, round_type: str) -> str:
        room = self._require_room()
        if self.ctx.engine is None:
            raise AIResponseError("No AI engine configured")
        try:
            text = await self.ctx.engine.generate_argument(
                side=side,
                round_type=round_type,
                topic=room.topic,
                previous_messages=self.round_messages(round_type),
            )
        except Exception as e:
            logger.exception("Error generating AI response")
            raise AIResponseError(str(e)) from e
        if not text:
            raise AIResponseError("AI returned an empty argument")
        return text

    # ------------------------------------------------------------------
    # votes
    # ------------------------------------------------------------------
    def submit_vote(self, side_voted: str, reasoning: Optional[str] = None) -> DebateVote:
        try:
            user = self._require_user()
            room = self._require_room()
            vote = crud_debate.create_vote(
                self.ctx.db,
                room_id=room.id,
                voter_id=user.id,
                voter_type="user",
                side_voted=side_voted,
                reasoning=reasoning,
            )
        except (NotAuthenticatedError, RoomNotLoadedError):
            self.notifier.error("Failed to submit vote.")
            raise
        except Exception as e:
            raise self._store_failed("submitting vote", "Failed to submit vote.") from e
        self.votes.append(vote)
        self.notifier.notify("Vote Submitted", "Your vote has been recorded.")
        return vote

    def vote_results(self) -> Dict[str, int]:
        return crud_debate.count_votes(self.votes)

    def get_available_topics(self) -> List[str]:
        return get_available_topics()
