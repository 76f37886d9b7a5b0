"""
CRUD operations for itineraries and users
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hangout_planner.db.models import User, Itinerary, utcnow

logger = logging.getLogger(__name__)

# ===== USER CRUD OPERATIONS =====

async def create_user(session: AsyncSession, username: str, password: str) -> User:
    try:
        user = User(username=username, password=password)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        logger.info(f"Created user: {username}")
        return user
    except Exception as e:
        await session.rollback()
        logger.error(f"Error creating user: {e}")
        raise


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()

# ===== ITINERARY CRUD OPERATIONS =====

async def create_itinerary(
    session: AsyncSession,
    title: str,
    location: str,
    activities: List[Dict[str, Any]],
    recommendations: List[Dict[str, Any]],
    description: Optional[str] = None,
    user_id: Optional[int] = None,
) -> Itinerary:
    """Insert an itinerary row; the primary key sequence assigns its id"""
    try:
        itinerary = Itinerary(
            title=title,
            description=description,
            location=location,
            activities=activities,
            recommendations=recommendations,
            user_id=user_id,
            created_at=utcnow(),
        )
        session.add(itinerary)
        await session.commit()
        await session.refresh(itinerary)
        logger.info(f"Created itinerary {itinerary.id}: {title}")
        return itinerary
    except Exception as e:
        await session.rollback()
        logger.error(f"Error creating itinerary: {e}")
        raise


async def get_itinerary_by_id(session: AsyncSession, itinerary_id: int) -> Optional[Itinerary]:
    result = await session.execute(
        select(Itinerary).where(Itinerary.id == itinerary_id)
    )
    return result.scalar_one_or_none()


async def get_itineraries(session: AsyncSession, user_id: Optional[int] = None) -> List[Itinerary]:
    stmt = select(Itinerary).order_by(Itinerary.id)
    if user_id is not None:
        stmt = stmt.where(Itinerary.user_id == user_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())
