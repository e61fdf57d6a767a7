"""
IdeaHub – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them through a single
``import ideahub.models``.
"""

from ideahub.models.user import Role, User                              # noqa: F401
from ideahub.models.idea import Category, Idea, IdeaStatus, Timeline   # noqa: F401
from ideahub.models.vote import Vote, VoteType                         # noqa: F401
