from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Index, JSON, Text


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(
        index=True,
        unique=True,
        nullable=False,
        max_length=50,
        description="Unique username"
    )
    password: str = Field(
        nullable=False,
        max_length=255,
        description="Opaque credential, not verified by this service"
    )


class Itinerary(SQLModel, table=True):
    __tablename__ = "itineraries"

    __table_args__ = (
        Index('idx_itineraries_created_at', 'created_at'),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(
        default=None,
        foreign_key="users.id",
        nullable=True,
        index=True,
        description="Optional owner of this itinerary"
    )
    title: str = Field(sa_column=Column(Text, nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    location: str = Field(sa_column=Column(Text, nullable=False))
    activities: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Ordered activities, stored as returned to the client"
    )
    recommendations: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
