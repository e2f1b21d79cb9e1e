# debate_models.py
# This file defines the database structure for debate rooms.
# A room has many participants, messages and votes; each lives in its own
# table and is written one row at a time.

# --- Imports ---
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship

from core.database import Base

# --- Defaults ---
# Rounds run in this fixed order; voting opens after the last one.
DEFAULT_ROUNDS = ["opening", "rebuttal", "closing"]
ROUND_DURATION_SECS = 120

DEFAULT_STRUCTURE = {
    "rounds": DEFAULT_ROUNDS,
    "timer_per_round": True,
    "round_duration": ROUND_DURATION_SECS,
}

DEFAULT_SETTINGS = {
    "chat_enabled": True,
    "voice_enabled": False,
    "voting_enabled": True,
    "feedback_enabled": True,
}


def _uuid() -> str:
    return str(uuid.uuid4())


def default_structure():
    return {**DEFAULT_STRUCTURE, "rounds": list(DEFAULT_ROUNDS)}


def _default_settings():
    return dict(DEFAULT_SETTINGS)


# --- DebateRoom Model ---
# This class defines the `debate_rooms` table.
class DebateRoom(Base):
    __tablename__ = "debate_rooms"

    # String UUID primary key, generated on insert.
    id = Column(String(36), primary_key=True, default=_uuid)

    title = Column(String(200), nullable=False)
    topic = Column(Text, nullable=False)
    # trending | custom | user_input
    topic_source = Column(String(32), nullable=False, default="trending")
    # ai_vs_ai | ai_vs_user | user_vs_user
    mode = Column(String(32), nullable=False, default="ai_vs_user")
    # public | private
    room_type = Column(String(16), nullable=False, default="public")
    # waiting | active | completed
    status = Column(String(16), nullable=False, default="waiting")

    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # `structure` = {rounds, timer_per_round, round_duration}
    # `settings`  = {chat_enabled, voice_enabled, voting_enabled, feedback_enabled}
    structure = Column(JSON, nullable=False, default=default_structure)
    settings = Column(JSON, nullable=False, default=_default_settings)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    started_at = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True)

    # --- Relationships ---
    # Deleting a room deletes everything that belongs to it.
    participants = relationship("DebateParticipant", back_populates="room", cascade="all, delete-orphan")
    messages = relationship("DebateMessage", back_populates="room", cascade="all, delete-orphan")
    votes = relationship("DebateVote", back_populates="room", cascade="all, delete-orphan")


# --- DebateParticipant Model ---
# One occupant of one side. Nothing stops the same user joining twice.
class DebateParticipant(Base):
    __tablename__ = "debate_participants"

    id = Column(String(36), primary_key=True, default=_uuid)
    debate_room_id = Column(String(36), ForeignKey("debate_rooms.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    # ai | user
    participant_type = Column(String(8), nullable=False, default="user")
    # pro | con
    side = Column(String(8), nullable=False)
    # Marketplace bot backing an AI participant; opaque here.
    ai_bot_id = Column(String(64), nullable=True)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    room = relationship("DebateRoom", back_populates="participants")


# --- DebateMessage Model ---
# One argument from one participant in one round. Never edited.
class DebateMessage(Base):
    __tablename__ = "debate_messages"

    id = Column(String(36), primary_key=True, default=_uuid)
    debate_room_id = Column(String(36), ForeignKey("debate_rooms.id"), nullable=False, index=True)
    participant_id = Column(String(36), ForeignKey("debate_participants.id"), nullable=False)
    # opening | rebuttal | closing
    round_type = Column(String(16), nullable=False)
    content = Column(Text, nullable=False, default="")
    # text | audio
    message_type = Column(String(8), nullable=False, default="text")
    audio_url = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)
    duration_seconds = Column(Integer, nullable=True)

    room = relationship("DebateRoom", back_populates="messages")
    participant = relationship("DebateParticipant")


# --- DebateVote Model ---
# No (room, voter) uniqueness: every submission is its own row.
class DebateVote(Base):
    __tablename__ = "debate_votes"

    id = Column(String(36), primary_key=True, default=_uuid)
    debate_room_id = Column(String(36), ForeignKey("debate_rooms.id"), nullable=False, index=True)
    voter_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    # ai | user | viewer
    voter_type = Column(String(8), nullable=False, default="user")
    # pro | con | tie
    side_voted = Column(String(8), nullable=False)
    reasoning = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    room = relationship("DebateRoom", back_populates="votes")
