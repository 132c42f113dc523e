"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from splitledger.config import settings
from splitledger.domain.naming import CachedNameResolver, DisplayName
from splitledger.infrastructure.database.repositories import SplitRepository
from splitledger.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_split_repository(db: Session = Depends(get_db)) -> SplitRepository:
    """Provide split repository bound to the request's session"""
    return SplitRepository(db)


def get_display_name(
    request: Request,
    repo: SplitRepository = Depends(get_split_repository),
) -> DisplayName:
    """Provide a cached display-name lookup backed by the participant table"""
    return CachedNameResolver(
        repo.get_display_name,
        request.app.state.name_cache,
        ttl_seconds=settings.name_cache_ttl_seconds,
    )
