"""Database infrastructure: engine, ORM models, and repositories."""

from marketplace_api.infrastructure.database.engine import (
    build_engine,
    close_db,
    get_async_session,
    init_db,
)
from marketplace_api.infrastructure.database.orm_models import (
    Base,
    Contract,
    Job,
    Profile,
)
from marketplace_api.infrastructure.database.repositories import (
    ContractRepository,
    JobRepository,
    ProfileRepository,
)

__all__ = [
    "Base",
    "Contract",
    "Job",
    "Profile",
    "ContractRepository",
    "JobRepository",
    "ProfileRepository",
    "build_engine",
    "get_async_session",
    "init_db",
    "close_db",
]
