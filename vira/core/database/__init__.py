"""
Persistence layer for ViRA.

Structure:
- entities/: SQLModel table models, one module per business area
- repositories/: Async data access classes built on BaseRepository
- session.py: Global engine and session factory management
- utils.py: Engine/session helpers and table creation for tests
"""

from .base import EMBEDDING_DIMENSIONS, Base
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    utc_now,
)

__all__ = [
    "Base",
    "EMBEDDING_DIMENSIONS",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "utc_now",
]
