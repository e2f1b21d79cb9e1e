# schemas.py
# Pydantic request/response models for auth and debate rooms.
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

DebateMode = Literal["ai_vs_ai", "ai_vs_user", "user_vs_user"]
TopicSource = Literal["trending", "custom", "user_input"]
RoomType = Literal["public", "private"]
RoomStatus = Literal["waiting", "active", "completed"]
RoundType = Literal["opening", "rebuttal", "closing"]
Side = Literal["pro", "con"]
VoteChoice = Literal["pro", "con", "tie"]
ParticipantType = Literal["ai", "user"]
VoterType = Literal["ai", "user", "viewer"]

# -------------------------
# Auth / User
# -------------------------
class UserBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    username: str = Field(..., min_length=1)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class User(UserBase):
    id: int

# -------------------------
# Room structure / settings
# -------------------------
class RoomStructure(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    rounds: List[RoundType] = Field(default_factory=lambda: ["opening", "rebuttal", "closing"])
    timer_per_round: bool = True
    round_duration: int = Field(120, gt=0)

class RoomSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    chat_enabled: bool = True
    voice_enabled: bool = False
    voting_enabled: bool = True
    feedback_enabled: bool = True

class RoomSettingsPatch(BaseModel):
    """Partial settings; unset keys fall back to the defaults."""
    chat_enabled: Optional[bool] = None
    voice_enabled: Optional[bool] = None
    voting_enabled: Optional[bool] = None
    feedback_enabled: Optional[bool] = None

# -------------------------
# Requests
# -------------------------
class DebateRoomCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    topic: str = Field(..., min_length=1)
    topic_source: TopicSource = "trending"
    mode: DebateMode = "ai_vs_user"
    room_type: RoomType = "public"
    settings: Optional[RoomSettingsPatch] = None
    structure: Optional[RoomStructure] = None

    @field_validator("title", "topic")
    @classmethod
    def _trim(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class JoinRequest(BaseModel):
    side: Side
    bot_id: Optional[str] = None

class AIParticipantRequest(BaseModel):
    side: Side
    bot_id: Optional[str] = None

class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1)
    round_type: RoundType
    participant_id: str
    ai_reply: bool = Field(False, description="In ai_vs_user rooms, also store one AI rebuttal.")

    @field_validator("content")
    @classmethod
    def _trim_msg(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class VoteCreate(BaseModel):
    side_voted: VoteChoice
    reasoning: Optional[str] = None

class StatusUpdate(BaseModel):
    status: RoomStatus

# -------------------------
# AI response collaborator (camelCase wire format)
# -------------------------
class PreviousMessage(BaseModel):
    content: str
    side: Optional[Side] = None
    round_type: Optional[RoundType] = None

class DebateAIRequest(BaseModel):
    debateRoomId: Optional[str] = None
    side: Side
    roundType: RoundType
    topic: str = Field(..., min_length=1)
    previousMessages: List[PreviousMessage] = Field(default_factory=list)

class DebateAIResponse(BaseModel):
    response: str

# -------------------------
# ORM-backed responses
# -------------------------
class DebateParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    debate_room_id: str
    user_id: Optional[int] = None
    participant_type: ParticipantType
    side: Side
    ai_bot_id: Optional[str] = None
    joined_at: datetime

class DebateMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    debate_room_id: str
    participant_id: str
    round_type: RoundType
    content: str
    message_type: Literal["text", "audio"]
    audio_url: Optional[str] = None
    timestamp: datetime
    duration_seconds: Optional[int] = None

class DebateVoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    debate_room_id: str
    voter_id: Optional[int] = None
    voter_type: VoterType
    side_voted: VoteChoice
    reasoning: Optional[str] = None
    created_at: datetime

class DebateRoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    topic: str
    topic_source: TopicSource
    mode: DebateMode
    room_type: RoomType
    status: RoomStatus
    creator_id: int
    structure: RoomStructure
    settings: RoomSettings
    created_at: datetime
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

class DebateRoomSummary(DebateRoomResponse):
    participant_count: int = 0
    vote_count: int = 0

class DebateRoomDetail(BaseModel):
    room: DebateRoomResponse
    participants: List[DebateParticipantResponse] = Field(default_factory=list)
    messages: List[DebateMessageResponse] = Field(default_factory=list)
    votes: List[DebateVoteResponse] = Field(default_factory=list)

class MessageExchange(BaseModel):
    """A sent message plus the AI rebuttal it triggered, if any."""
    message: DebateMessageResponse
    ai_message: Optional[DebateMessageResponse] = None
    ai_error: Optional[str] = None

class VoteResults(BaseModel):
    pro: int = 0
    con: int = 0
    tie: int = 0
    total: int = 0

class TopicsResponse(BaseModel):
    topics: List[str]
