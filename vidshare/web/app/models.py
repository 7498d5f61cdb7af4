"""
SQLAlchemy 2.0 database models.
"""
import uuid
import enum
from datetime import datetime

from sqlalchemy import (
    Column, String, BigInteger, DateTime, Enum as SAEnum, ForeignKey, Text,
    Boolean, Integer, Uuid
)
import sqlalchemy as sa
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()

class ContentRating(str, enum.Enum):
    g = "G"
    pg = "PG"
    pg_13 = "PG-13"
    r = "R"
    nc_17 = "NC-17"

class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)
    display_label = Column(String(255), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

class Video(Base):
    __tablename__ = "videos"

    # Storage identity; the public identity is video_id.
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    video_id = Column(String(100), unique=True, nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, default="", nullable=False)
    thumbnail = Column(String(500), default="", nullable=False)
    url = Column(String(500), nullable=False)
    duration = Column(String(20), default="0:00", nullable=False)  # "MM:SS" or "H:MM:SS"

    category = Column(String(50), default="Uncategorized", nullable=False, index=True)
    year = Column(String(4), default=lambda: str(datetime.utcnow().year), nullable=False, index=True)
    rating = Column(
        SAEnum(ContentRating, values_callable=lambda e: [m.value for m in e], name="contentrating"),
        default=ContentRating.g,
        nullable=False,
    )
    upload_date = Column(String(10), default=lambda: datetime.utcnow().date().isoformat(), nullable=False)

    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)

    # Engagement counters
    view_count = Column(BigInteger, default=0, nullable=False)
    likes_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    owner = relationship("User")

    __table_args__ = (
        sa.CheckConstraint('view_count >= 0', name='ck_video_view_count_non_negative'),
        sa.CheckConstraint('likes_count >= 0', name='ck_video_likes_count_non_negative'),
    )

class VideoComment(Base):
    __tablename__ = "video_comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Application-level video id; no FK so the video can be removed ahead of its comments.
    video_id = Column(String(100), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Relationships
    user = relationship("User")

    __table_args__ = (
        sa.Index('ix_video_comments_video_created', 'video_id', 'created_at'),
    )

class VideoLike(Base):
    __tablename__ = "video_likes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    video_id = Column(String(100), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User")

    # One like per user per video
    __table_args__ = (
        sa.UniqueConstraint('user_id', 'video_id', name='uq_video_user_like'),
    )

class VideoPlaylist(Base):
    __tablename__ = "video_playlists"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    thumbnail = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    owner = relationship("User")
    items = relationship(
        "VideoPlaylistItem",
        back_populates="playlist",
        cascade="all, delete-orphan",
        order_by="VideoPlaylistItem.position",
    )

    __table_args__ = (
        sa.UniqueConstraint('owner_id', 'name', name='uq_playlist_owner_name'),
    )

class VideoPlaylistItem(Base):
    __tablename__ = "video_playlist_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    playlist_id = Column(Uuid, ForeignKey("video_playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(String(100), nullable=False)

    position = Column(Integer, nullable=False)
    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    playlist = relationship("VideoPlaylist", back_populates="items")

    # A video appears at most once per playlist
    __table_args__ = (
        sa.UniqueConstraint('playlist_id', 'video_id', name='uq_playlist_video'),
    )
