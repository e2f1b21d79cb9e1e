"""
The models package contains all SQLAlchemy ORM models
for the Botora debate-room backend.

By importing key classes here, they can be easily accessed
from other parts of the application and are registered on Base.

For example:
from models import User, DebateRoom
"""

from .User import User, SessionToken
from .debate_models import DebateRoom, DebateParticipant, DebateMessage, DebateVote
