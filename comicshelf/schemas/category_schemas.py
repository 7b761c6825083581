from pydantic import Field

from comicshelf.schemas.base import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)


class CategoryOut(CamelModel):
    id: int
    name: str
