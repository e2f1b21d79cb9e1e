# This file contains shared dependencies used across different routers.

from functools import lru_cache
from typing import Optional

from fastapi import Cookie, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from core.notifications import Notifier
from crud import user as crud_user
from models import User
from services.debate_engine import DebateEngine
from services.debate_room import DebateContext, DebateRoomState
from utils.config import get_openai_async_client


def get_optional_user(session_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> Optional[User]:
    if not session_token:
        return None
    return crud_user.get_user_by_session_token(db, token=session_token)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


# The OpenAI client is built on first use so the app imports without a key.
@lru_cache(maxsize=1)
def get_debate_engine() -> DebateEngine:
    return DebateEngine(get_openai_async_client())


def get_debate_context(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
) -> DebateContext:
    # engine is resolved lazily by routes that need it
    return DebateContext(db=db, user=user, notifier=Notifier())


def get_debate_state(ctx: DebateContext = Depends(get_debate_context)) -> DebateRoomState:
    return DebateRoomState(ctx)
