"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of articles, comments and reaction assignments

Design Decisions:
    - One file per aggregate for locality; reaction catalog and assignments share a file
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from articlehub.models.user import User  # noqa: F401
from articlehub.models.article import Article  # noqa: F401
from articlehub.models.comment import Comment  # noqa: F401
from articlehub.models.reaction import (  # noqa: F401
    ReactionKind, ArticleReaction, CommentReaction,
)
