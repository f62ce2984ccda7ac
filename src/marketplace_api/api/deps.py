"""FastAPI dependency injection providers.

These are used with Depends() in route handlers to inject database sessions,
the calling profile, and configuration.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002 - resolved at runtime by FastAPI

from marketplace_api.config import Settings, get_settings
from marketplace_api.domain.exceptions import UnauthenticatedError
from marketplace_api.infrastructure.database.engine import get_async_session
from marketplace_api.infrastructure.database.orm_models import Profile  # noqa: TC001
from marketplace_api.infrastructure.database.repositories import ProfileRepository
from marketplace_api.logging_config import bind_caller, get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger(__name__)

_PROFILE_ID = re.compile(r"[0-9]+")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for a request."""
    async for session in get_async_session():
        yield session


async def get_current_profile(
    profile_id: str | None = Header(default=None, convert_underscores=False),
    session: AsyncSession = Depends(get_db_session),
) -> Profile:
    """Resolve the caller from the `profile_id` header.

    The header is trusted as-is; an absent, malformed or unknown id is
    rejected with 401.
    """
    if profile_id is None or not _PROFILE_ID.fullmatch(profile_id.strip()):
        raise UnauthenticatedError()

    profile = await ProfileRepository(session).get_by_id(int(profile_id))
    if profile is None:
        logger.warning("auth.unknown_profile", profile_id=profile_id)
        raise UnauthenticatedError()

    bind_caller(profile.id)
    return profile


def get_app_settings() -> Settings:
    """Provide the application settings."""
    return get_settings()
