# CRUD OPS: users + session tokens

from typing import Optional
from sqlalchemy.orm import Session # Import Session to enable type hinting for the database session.
import schemas # Import the schemas module to access Pydantic models.
from core.security import hash_password # Import the password hashing function.
from models import User, SessionToken

# Function to retrieve a user from the database by their username.
def get_user(db: Session, username: str) -> Optional[User]:
    # .first() returns the first result or None if not found.
    return db.query(User).filter(User.username == username).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

# Function to create a new user in the database.
# It takes the Pydantic schema 'UserCreate' as input for data validation.
def create_user(db: Session, user: schemas.UserCreate) -> User:
    # The plain-text password is hashed before being stored.
    db_user = User(username=user.username, email=user.email, hashed_password=hash_password(user.password))
    db.add(db_user)
    db.commit()
    db.refresh(db_user) # Refresh to pick up the auto-generated id.
    return db_user

def create_session_token(db: Session, user_id: int, token: str) -> SessionToken:
    db_token = SessionToken(user_id=user_id, token=token)
    db.add(db_token)
    db.commit()
    db.refresh(db_token)
    return db_token

def delete_session_token(db: Session, token: str):
    db.query(SessionToken).filter(SessionToken.token == token).delete()
    db.commit()

def get_user_by_session_token(db: Session, token: str) -> Optional[User]:
    session = db.query(SessionToken).filter(SessionToken.token == token).first()
    return session.user if session else None
