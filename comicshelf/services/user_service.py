from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.models.user_model import User


async def update_user(session: AsyncSession, user: User, changes: Dict[str, Any]) -> User:
    """Apply only the supplied profile fields (username, avatar).

    A null username is ignored; a null avatar clears it.
    """
    if changes.get("username") is not None:
        user.username = changes["username"]
    if "avatar" in changes:
        user.avatar = changes["avatar"]

    await session.commit()
    await session.refresh(user)
    return user
