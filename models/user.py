from models.base_model import Base, BaseModel
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship


class User(BaseModel, Base):
    __tablename__ = "users"

    # Stored lowercased; uniqueness enforced here
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(512), nullable=False)
    cover_image = Column(String(512), nullable=True)
    # The single refresh token currently allowed to mint new token pairs
    refresh_token = Column(String(1024), nullable=True)

    videos = relationship("Video", back_populates="owner")
    tweets = relationship("Tweet", back_populates="owner")
    playlists = relationship("Playlist", back_populates="owner")
