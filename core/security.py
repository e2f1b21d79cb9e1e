# PASSWORD HASHING + SESSION TOKENS

import secrets  # Cryptographically strong tokens for the session cookie.
from passlib.context import CryptContext  # Import CryptContext for password hashing.

# --- Session cookie ---
SESSION_COOKIE_NAME = "session_token"
SESSION_MAX_AGE = 3600 * 24 * 7  # 7 days

# --- Password Hashing ---
# Create a CryptContext instance, specifying bcrypt as the hashing scheme.
# 'deprecated="auto"' will automatically handle updating hashes if you change schemes in the future.
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Function to hash a plain-text password.
def hash_password(password: str) -> str:
    return pwd_context.hash(password)

# Function to verify a plain-text password against a hashed one.
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

# --- Session Token ---
# Opaque random token stored server-side in `session_tokens` and sent as a cookie.
def new_session_token() -> str:
    return secrets.token_urlsafe(32)
