"""Database engine and session management"""

from typing import AsyncIterator

from sqlalchemy import Enum
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped database session"""
    async with SessionLocal() as session:
        yield session


def get_session_factory() -> async_sessionmaker:
    """Session factory for work that runs after the request transaction"""
    return SessionLocal


def EnumType(enum_cls):
    """Enum column stored as its string values"""
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=32,
    )
