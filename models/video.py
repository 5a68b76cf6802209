from sqlalchemy import Column, String, Integer, Boolean, Float, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Video(BaseModel, Base):
    __tablename__ = "videos"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    video_file = Column(String(512), nullable=False)
    thumbnail = Column(String(512), nullable=True)
    duration = Column(Float, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    owner = relationship("User", back_populates="videos")
    comments = relationship("Comment", back_populates="video", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("views >= 0", name="ck_videos_views_nonnegative"),
    )
