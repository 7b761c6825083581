import enum

from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Enum as SqlEnum, text
from sqlalchemy.orm import relationship

from comicshelf.database import Base, utcnow


class ReadingStatus(enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    READING = "READING"
    FINISHED = "FINISHED"


class LibraryEntry(Base):
    """One row per (user, comic); the composite primary key is the upsert target."""

    __tablename__ = "library_entries"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    comic_id = Column(
        Integer,
        ForeignKey("comics.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    is_favorited = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    status = Column(
        SqlEnum(ReadingStatus, name="reading_status"),
        nullable=False,
        default=ReadingStatus.NOT_STARTED,
        server_default=ReadingStatus.NOT_STARTED.name,
    )
    last_read_chapter_id = Column(
        Integer,
        ForeignKey("chapters.id", ondelete="SET NULL"),
        nullable=True,
    )
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    comic = relationship("Comic", back_populates="library_entries")
    last_read_chapter = relationship("Chapter")
