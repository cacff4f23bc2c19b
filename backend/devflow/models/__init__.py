"""
DevFlow Backend — ORM Models

Importing this package registers every table with `Base.metadata`, which
Alembic autogenerate and the test fixtures rely on.
"""

from devflow.models.common import TargetType, VoteType
from devflow.models.interaction import Collection, Interaction, Vote
from devflow.models.question import Answer, Question
from devflow.models.tag import Tag, TagQuestion
from devflow.models.user import Account, User

__all__ = [
    "Account",
    "Answer",
    "Collection",
    "Interaction",
    "Question",
    "Tag",
    "TagQuestion",
    "TargetType",
    "User",
    "Vote",
    "VoteType",
]
