from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from crud import user as crud_user
import schemas
from models import User
from core.database import get_db
from core.security import SESSION_COOKIE_NAME, SESSION_MAX_AGE, new_session_token, verify_password
from dependencies import get_current_user

router = APIRouter()


# ============================
# 👤 Register User
# ============================
@router.post("/users", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def register_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    if crud_user.get_user(db, user.username):
        raise HTTPException(status_code=400, detail="Username already registered")
    if crud_user.get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    return crud_user.create_user(db=db, user=user)


# ============================
# 🔐 Login (Set Cookie)
# ============================
@router.post("/login")
def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = crud_user.get_user(db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Incorrect username or password")

    session_token = new_session_token()
    crud_user.create_session_token(db, user_id=user.id, token=session_token)

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_token,
        httponly=True,
        max_age=SESSION_MAX_AGE,
        secure=False,  # Set to True in production with HTTPS
        samesite="Lax"
    )

    return {"message": "Login successful"}


# ============================
# 🚪 Logout (Clear Cookie)
# ============================
@router.post("/logout")
def logout(
    response: Response,
    session_token: str = Cookie(None),
    db: Session = Depends(get_db)
):
    if session_token:
        crud_user.delete_session_token(db, token=session_token)
        response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Logged out"}


# ============================
# 👀 Get Current User (/me)
# ============================
@router.get("/me", response_model=schemas.User)
def read_current_user(user: User = Depends(get_current_user)):
    return user
