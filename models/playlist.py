from sqlalchemy import Column, String, Text, ForeignKey, Table, DateTime
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, _utcnow

# Join rows go away with either side
playlist_videos = Table(
    "playlist_videos",
    Base.metadata,
    Column("playlist_id", String(36), ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True),
    Column("video_id", String(36), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True),
    Column("added_at", DateTime(timezone=True), nullable=False, default=_utcnow),
)


class Playlist(BaseModel, Base):
    __tablename__ = "playlists"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    owner = relationship("User", back_populates="playlists")
    videos = relationship(
        "Video",
        secondary=playlist_videos,
        order_by=playlist_videos.c.added_at,
    )
