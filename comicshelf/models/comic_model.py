import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SqlEnum
from sqlalchemy.orm import relationship

from comicshelf.database import Base, utcnow


class ComicStatus(enum.Enum):
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"


class ComicVisibility(enum.Enum):
    PRIVATE = "PRIVATE"
    PUBLIC = "PUBLIC"


class Comic(Base):
    __tablename__ = "comics"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    cover_image = Column(String, nullable=True)
    status = Column(SqlEnum(ComicStatus, name="comic_status"), nullable=False, default=ComicStatus.ONGOING)
    visibility = Column(
        SqlEnum(ComicVisibility, name="comic_visibility"),
        nullable=False,
        default=ComicVisibility.PRIVATE,
    )
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User")

    # Write side of the many-to-many; `categories` below is the read side
    category_links = relationship(
        "ComicCategory",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    categories = relationship(
        "Category",
        secondary="comic_categories",
        viewonly=True,
        order_by="Category.name",
    )

    chapters = relationship(
        "Chapter",
        back_populates="comic",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Chapter.chapter_number",
    )
    reviews = relationship(
        "Review",
        back_populates="comic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    library_entries = relationship(
        "LibraryEntry",
        back_populates="comic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ComicCategory(Base):
    __tablename__ = "comic_categories"

    comic_id = Column(
        Integer,
        ForeignKey("comics.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    )

    category = relationship("Category")
