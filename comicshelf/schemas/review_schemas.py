from datetime import datetime

from pydantic import Field

from comicshelf.schemas.base import CamelModel
from comicshelf.schemas.user_schemas import UserSummary


class ReviewCreate(CamelModel):
    # 1-5 is what clients send; only presence is enforced
    rating: int
    comment: str = Field(min_length=1)


class ReviewOut(CamelModel):
    id: int
    comic_id: int
    user_id: int
    rating: int
    comment: str
    created_at: datetime
    updated_at: datetime
    user: UserSummary
