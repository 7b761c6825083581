from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from comicshelf.database import Base, utcnow


class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, index=True)
    comic_id = Column(
        Integer,
        ForeignKey("comics.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String, nullable=False)
    chapter_number = Column(Float, nullable=False)  # 3.5 style numbering is allowed
    pdf_url = Column(String(2048), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    comic = relationship("Comic", back_populates="chapters")
