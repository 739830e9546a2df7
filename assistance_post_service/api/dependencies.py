"""
FastAPI dependencies
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from functools import partial
from typing import Optional

from ..infrastructure.database.connection import DatabaseConnection, get_db_connection
from ..infrastructure.database.repositories import PostgresUnitOfWork
from ..infrastructure.auth import decode_token
from ..application.services import PostService, UnitOfWorkFactory
from ..kafka_producer import KafkaProducerManager, get_kafka_producer


# Security scheme
security = HTTPBearer(auto_error=False)


async def get_unit_of_work_factory(
    db: DatabaseConnection = Depends(get_db_connection)
) -> UnitOfWorkFactory:
    """Get a factory opening one PostgreSQL unit of work per call"""
    return partial(PostgresUnitOfWork, db)


async def get_post_service(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    kafka_producer: KafkaProducerManager = Depends(get_kafka_producer)
) -> PostService:
    """Get post service dependency"""
    return PostService(uow_factory, kafka_producer)


async def get_current_member_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> int:
    """
    Resolve the authenticated member ID from the bearer token

    Raises:
        HTTPException: If the token is missing or invalid
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    member_id = payload.get("sub")
    try:
        return int(member_id)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )
