"""
Like model: one row per (liked_by, target_kind, target_id).
The composite key is UNIQUE in the database; toggling relies on that constraint
instead of an exists-then-insert check.
"""
from enum import Enum

from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base


class LikeTarget(str, Enum):
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


class Like(BaseModel, Base):
    __tablename__ = "likes"

    liked_by_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Polymorphic target: no FK, the kind says which table target_id points into
    target_kind = Column(
        SAEnum(LikeTarget, name="like_target", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    target_id = Column(String(36), nullable=False)

    liked_by = relationship("User")

    __table_args__ = (
        UniqueConstraint("liked_by_id", "target_kind", "target_id", name="uq_likes_actor_target"),
        Index("ix_likes_target", "target_kind", "target_id"),
    )
