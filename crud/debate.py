# CRUD OPS: debate rooms, participants, messages, votes
# One function per single-row write or single-table read. No coordination
# across calls: callers own sequencing and error reporting.

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from models import DebateRoom, DebateParticipant, DebateMessage, DebateVote


# --- Rooms ---
def create_room(db: Session, *, creator_id: int, **fields: Any) -> DebateRoom:
    room = DebateRoom(creator_id=creator_id, **fields)
    db.add(room)
    db.commit()
    db.refresh(room)
    return room

def get_room(db: Session, room_id: str) -> Optional[DebateRoom]:
    return db.query(DebateRoom).filter(DebateRoom.id == room_id).first()

def list_rooms(
    db: Session,
    *,
    room_type: Optional[str] = "public",
    search: Optional[str] = None,
    mode: Optional[str] = None,
    status: Optional[str] = None,
) -> List[DebateRoom]:
    """Newest first. `participants` and `votes` are eager-loaded for counts."""
    q = db.query(DebateRoom).options(
        selectinload(DebateRoom.participants),
        selectinload(DebateRoom.votes),
    )
    if room_type:
        q = q.filter(DebateRoom.room_type == room_type)
    if search:
        term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        like = f"%{term}%"
        q = q.filter(or_(
            DebateRoom.title.ilike(like, escape="\\"),
            DebateRoom.topic.ilike(like, escape="\\"),
        ))
    if mode:
        q = q.filter(DebateRoom.mode == mode)
    if status:
        q = q.filter(DebateRoom.status == status)
    return q.order_by(DebateRoom.created_at.desc()).all()

def set_room_status(db: Session, room: DebateRoom, status: str) -> DebateRoom:
    room.status = status
    if status == "active" and room.started_at is None:
        room.started_at = datetime.utcnow()
    elif status == "completed":
        room.ended_at = datetime.utcnow()
    db.commit()
    db.refresh(room)
    return room


# --- Participants ---
def create_participant(
    db: Session,
    *,
    room_id: str,
    side: str,
    participant_type: str = "user",
    user_id: Optional[int] = None,
    ai_bot_id: Optional[str] = None,
) -> DebateParticipant:
    participant = DebateParticipant(
        debate_room_id=room_id,
        user_id=user_id,
        participant_type=participant_type,
        side=side,
        ai_bot_id=ai_bot_id,
    )
    db.add(participant)
    db.commit()
    db.refresh(participant)
    return participant

def get_participants(db: Session, room_id: str) -> List[DebateParticipant]:
    return db.query(DebateParticipant).filter(DebateParticipant.debate_room_id == room_id).all()


# --- Messages ---
def create_message(
    db: Session,
    *,
    room_id: str,
    participant_id: str,
    round_type: str,
    content: str,
    message_type: str = "text",
) -> DebateMessage:
    message = DebateMessage(
        debate_room_id=room_id,
        participant_id=participant_id,
        round_type=round_type,
        content=content,
        message_type=message_type,
        timestamp=datetime.utcnow(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message

def get_messages(db: Session, room_id: str) -> List[DebateMessage]:
    return (
        db.query(DebateMessage)
        .filter(DebateMessage.debate_room_id == room_id)
        .order_by(DebateMessage.timestamp.asc())
        .all()
    )


# --- Votes ---
def create_vote(
    db: Session,
    *,
    room_id: str,
    side_voted: str,
    voter_id: Optional[int] = None,
    voter_type: str = "user",
    reasoning: Optional[str] = None,
) -> DebateVote:
    vote = DebateVote(
        debate_room_id=room_id,
        voter_id=voter_id,
        voter_type=voter_type,
        side_voted=side_voted,
        reasoning=reasoning,
    )
    db.add(vote)
    db.commit()
    db.refresh(vote)
    return vote

def get_votes(db: Session, room_id: str) -> List[DebateVote]:
    return db.query(DebateVote).filter(DebateVote.debate_room_id == room_id).all()

def count_votes(votes: List[DebateVote]) -> Dict[str, int]:
    tally = {"pro": 0, "con": 0, "tie": 0}
    for v in votes:
        if v.side_voted in tally:
            tally[v.side_voted] += 1
    return tally
