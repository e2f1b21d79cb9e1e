# ----------------------------------------------------------------------
# Debate room API router
# ----------------------------------------------------------------------
#   GET    /debate-rooms/topics
#   GET    /debate-rooms                      public listing + counts
#   POST   /debate-rooms                      create (auth)
#   GET    /debate-rooms/{id}                 room + participants + messages + votes
#   POST   /debate-rooms/{id}/join            join a side (auth)
#   POST   /debate-rooms/{id}/ai-participants seat an AI debater (auth)
#   POST   /debate-rooms/{id}/messages        send an argument (auth), optional AI rebuttal
#   POST   /debate-rooms/{id}/votes           vote (auth)
#   GET    /debate-rooms/{id}/results         pro/con/tie tallies
#   PATCH  /debate-rooms/{id}/status          waiting -> active -> completed (auth)
#   POST   /debate-ai-response                the argument generator itself

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

import schemas
from core.errors import (
    AIResponseError,
    DebateError,
    NotAuthenticatedError,
    RoomNotLoadedError,
)
from dependencies import get_current_user, get_debate_engine, get_debate_state
from models import User
from services.debate_engine import DebateEngine
from services.debate_room import DebateRoomState, get_available_topics
from services.debate_view import take_ai_turn

logger = logging.getLogger(__name__)

router = APIRouter()
ai_router = APIRouter()

AI_FAILED = "Failed to generate AI response."


def get_engine_provider() -> Callable[[], DebateEngine]:
    """Routes only build the OpenAI client when they actually call it."""
    return get_debate_engine


# ----------------------------------------------------------------------
# small helpers
# ----------------------------------------------------------------------
def _http_error(e: DebateError) -> HTTPException:
    if isinstance(e, NotAuthenticatedError):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, RoomNotLoadedError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, AIResponseError):
        return HTTPException(status_code=502, detail=AI_FAILED)
    # StoreError text is already the generic message the state layer notified
    return HTTPException(status_code=500, detail=str(e))

def _load_room(state: DebateRoomState, room_id: str):
    room = state.fetch_debate_room(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail="Debate room not found")
    return room

def _summary(room) -> schemas.DebateRoomSummary:
    base = schemas.DebateRoomResponse.model_validate(room).model_dump()
    return schemas.DebateRoomSummary(
        **base,
        participant_count=len(room.participants),
        vote_count=len(room.votes),
    )

def _detail(state: DebateRoomState) -> schemas.DebateRoomDetail:
    return schemas.DebateRoomDetail(
        room=schemas.DebateRoomResponse.model_validate(state.current_room),
        participants=[schemas.DebateParticipantResponse.model_validate(p) for p in state.participants],
        messages=[schemas.DebateMessageResponse.model_validate(m) for m in state.messages],
        votes=[schemas.DebateVoteResponse.model_validate(v) for v in state.votes],
    )

def _results(state: DebateRoomState) -> schemas.VoteResults:
    tally = state.vote_results()
    return schemas.VoteResults(**tally, total=sum(tally.values()))

# ----------------------------------------------------------------------
# listing / topics
# ----------------------------------------------------------------------
@router.get("/topics", response_model=schemas.TopicsResponse)
def list_topics():
    return {"topics": get_available_topics()}

@router.get("", response_model=List[schemas.DebateRoomSummary])
def list_rooms(
    search: Optional[str] = Query(None),
    mode: str = Query("all"),
    room_status: str = Query("all", alias="status"),
    state: DebateRoomState = Depends(get_debate_state),
):
    try:
        rooms = state.list_public_rooms(search=search, mode=mode, status=room_status)
    except DebateError as e:
        raise _http_error(e)
    return [_summary(r) for r in rooms]

# ----------------------------------------------------------------------
# rooms
# ----------------------------------------------------------------------
@router.post("", response_model=schemas.DebateRoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    req: schemas.DebateRoomCreate,
    user: User = Depends(get_current_user),
    state: DebateRoomState = Depends(get_debate_state),
):
    try:
        return state.create_debate_room(req)
    except DebateError as e:
        raise _http_error(e)

@router.get("/{room_id}", response_model=schemas.DebateRoomDetail)
def get_room(room_id: str, state: DebateRoomState = Depends(get_debate_state)):
    _load_room(state, room_id)
    return _detail(state)

@router.patch("/{room_id}/status", response_model=schemas.DebateRoomResponse)
def update_status(
    room_id: str,
    req: schemas.StatusUpdate,
    user: User = Depends(get_current_user),
    state: DebateRoomState = Depends(get_debate_state),
):
    _load_room(state, room_id)
    try:
        return state.update_room_status(req.status)
    except DebateError as e:
        raise _http_error(e)

# ----------------------------------------------------------------------
# participants
# ----------------------------------------------------------------------
@router.post(
    "/{room_id}/join",
    response_model=schemas.DebateParticipantResponse,
    status_code=status.HTTP_201_CREATED,
)
def join_room(
    room_id: str,
    req: schemas.JoinRequest,
    user: User = Depends(get_current_user),
    state: DebateRoomState = Depends(get_debate_state),
):
    _load_room(state, room_id)
    try:
        return state.join_debate_room(room_id, req.side, req.bot_id)
    except DebateError as e:
        raise _http_error(e)

@router.post(
    "/{room_id}/ai-participants",
    response_model=schemas.DebateParticipantResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_ai_participant(
    room_id: str,
    req: schemas.AIParticipantRequest,
    user: User = Depends(get_current_user),
    state: DebateRoomState = Depends(get_debate_state),
):
    _load_room(state, room_id)
    try:
        return state.add_ai_participant(room_id, req.side, req.bot_id)
    except DebateError as e:
        raise _http_error(e)

# ----------------------------------------------------------------------
# messages
# ----------------------------------------------------------------------
@router.post(
    "/{room_id}/messages",
    response_model=schemas.MessageExchange,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    room_id: str,
    req: schemas.MessageCreate,
    user: User = Depends(get_current_user),
    state: DebateRoomState = Depends(get_debate_state),
    engine_provider: Callable[[], DebateEngine] = Depends(get_engine_provider),
):
    """
    Store one argument. With `ai_reply` in an ai_vs_user room, the seated AI
    on the other side answers in the same round; if that fails the human
    message is kept and `ai_error` carries a generic message.

    Users may speak only for their own participant rows; AI rows are open to
    any signed-in caller.
    """
    _load_room(state, room_id)
    speaker = state.participant(req.participant_id)
    if speaker is None:
        raise HTTPException(status_code=404, detail="Participant not found in this room")
    if speaker.participant_type == "user" and speaker.user_id != user.id:
        raise HTTPException(status_code=403, detail="Cannot post as another participant")

    try:
        message = state.send_message(req.content, req.round_type, req.participant_id)
    except DebateError as e:
        raise _http_error(e)

    ai_message = None
    ai_error = None
    if req.ai_reply and state.current_room.mode == "ai_vs_user":
        try:
            state.ctx.engine = engine_provider()
            ai_message = await take_ai_turn(state, speaker.side, req.round_type)
        except (DebateError, ValueError) as e:
            logger.warning("AI turn dropped for room %s: %s", room_id, e)
            state.notifier.error(AI_FAILED)
            ai_error = AI_FAILED

    return schemas.MessageExchange(
        message=schemas.DebateMessageResponse.model_validate(message),
        ai_message=schemas.DebateMessageResponse.model_validate(ai_message) if ai_message else None,
        ai_error=ai_error,
    )

# ----------------------------------------------------------------------
# votes
# ----------------------------------------------------------------------
@router.post("/{room_id}/votes", response_model=schemas.DebateVoteResponse, status_code=status.HTTP_201_CREATED)
def submit_vote(
    room_id: str,
    req: schemas.VoteCreate,
    user: User = Depends(get_current_user),
    state: DebateRoomState = Depends(get_debate_state),
):
    _load_room(state, room_id)
    try:
        return state.submit_vote(req.side_voted, req.reasoning)
    except DebateError as e:
        raise _http_error(e)

@router.get("/{room_id}/results", response_model=schemas.VoteResults)
def vote_results(room_id: str, state: DebateRoomState = Depends(get_debate_state)):
    _load_room(state, room_id)
    return _results(state)

# ----------------------------------------------------------------------
# AI response collaborator
# ----------------------------------------------------------------------
@ai_router.post("/debate-ai-response", response_model=schemas.DebateAIResponse)
async def debate_ai_response(
    req: schemas.DebateAIRequest,
    engine_provider: Callable[[], DebateEngine] = Depends(get_engine_provider),
):
    try:
        engine = engine_provider()
        text = await engine.generate_argument(
            side=req.side,
            round_type=req.roundType,
            topic=req.topic,
            previous_messages=[m.model_dump() for m in req.previousMessages],
        )
        return {"response": text}
    except Exception as e:
        logger.exception("Error in debate AI response (room %s)", req.debateRoomId)
        raise HTTPException(status_code=500, detail=str(e))
