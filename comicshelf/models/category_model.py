from sqlalchemy import Column, Index, Integer, String, func

from comicshelf.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)


# "Action" and "action" are the same category
Index("uq_categories_name_lower", func.lower(Category.name), unique=True)
