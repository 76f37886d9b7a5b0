from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from hangout_planner.api.schemas import (
    GenerateItineraryRequest,
    ItineraryBody,
    ItineraryRead,
    MessageResponse,
    SaveItineraryRequest,
    SaveItineraryResponse,
)
from hangout_planner.core.generator import ItineraryGenerator
from hangout_planner.core.settings import Settings
from hangout_planner.db.models import Itinerary
from hangout_planner.db.storage import ItineraryStorage

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["itineraries"])

limiter = Limiter(key_func=get_remote_address)

# Limits are looked up per request so the Settings given to create_app apply
_limit_settings = Settings()


def configure_limits(settings: Settings) -> None:
    global _limit_settings
    _limit_settings = settings


def generate_limit() -> str:
    return _limit_settings.RATE_LIMIT_GENERATE


def save_limit() -> str:
    return _limit_settings.RATE_LIMIT_SAVE


def read_limit() -> str:
    return _limit_settings.RATE_LIMIT_READ


def get_storage(request: Request) -> ItineraryStorage:
    return request.app.state.storage


def get_generator(request: Request) -> ItineraryGenerator:
    return request.app.state.generator


def to_body(record: Itinerary) -> ItineraryBody:
    return ItineraryBody(
        title=record.title,
        description=record.description,
        location=record.location,
        activities=record.activities or [],
        recommendations=record.recommendations or [],
    )


def to_read(record: Itinerary) -> ItineraryRead:
    return ItineraryRead(
        id=record.id,
        created_at=record.created_at,
        **to_body(record).model_dump(),
    )


def validate_itinerary_payload(itinerary: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Check the fields a saved itinerary needs; each failure names its field"""
    if not itinerary or not itinerary.get("title") or not itinerary.get("location"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid itinerary data: missing title or location"
        )
    if not isinstance(itinerary["title"], str) or not isinstance(itinerary["location"], str):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid itinerary data: title and location must be strings"
        )
    if not isinstance(itinerary.get("activities"), list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid itinerary data: activities must be an array"
        )
    if not isinstance(itinerary.get("recommendations"), list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid itinerary data: recommendations must be an array"
        )
    return {k: v for k, v in itinerary.items() if k != "id"}


@router.post("/generate-itinerary",
    responses={
        400: {"model": MessageResponse, "description": "Invalid preferences or location"},
        429: {"model": MessageResponse, "description": "Rate limit exceeded"},
        500: {"model": MessageResponse, "description": "Unexpected failure"},
    },
    summary="Generate a hangout itinerary",
    description="Generates an itinerary with the AI model, falling back to curated plans, and saves it"
)
@limiter.limit(generate_limit)
async def generate_itinerary(
    request: Request,
    payload: GenerateItineraryRequest,
    generator: ItineraryGenerator = Depends(get_generator),
):
    try:
        result = await generator.generate(payload)
    except Exception as e:
        logger.error("itinerary_generation_error", error=str(e), error_type=type(e).__name__, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate itinerary. Please try again."
        )
    return result.to_response()


@router.post("/save-itinerary",
    response_model=SaveItineraryResponse,
    responses={
        400: {"model": MessageResponse, "description": "Missing or malformed itinerary fields"},
        500: {"model": MessageResponse, "description": "Storage failure"},
    },
    summary="Save an itinerary",
)
@limiter.limit(save_limit)
async def save_itinerary(
    request: Request,
    payload: SaveItineraryRequest,
    storage: ItineraryStorage = Depends(get_storage),
):
    itinerary = validate_itinerary_payload(payload.itinerary)
    try:
        itinerary_id, record = await storage.save(itinerary, user_id=payload.userId)
    except Exception as e:
        logger.error("itinerary_save_failed", error=str(e), error_type=type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save itinerary. Please try again."
        )

    logger.info("itinerary_saved", itinerary_id=itinerary_id, user_id=payload.userId)
    return SaveItineraryResponse(
        id=itinerary_id,
        message="Itinerary saved successfully",
        itinerary=to_body(record),
    )


@router.get("/itinerary/{itinerary_id}",
    response_model=ItineraryRead,
    responses={
        400: {"model": MessageResponse, "description": "Identifier is not an integer"},
        404: {"model": MessageResponse, "description": "Itinerary not found"},
        500: {"model": MessageResponse, "description": "Storage failure"},
    },
)
@limiter.limit(read_limit)
async def read_itinerary(
    request: Request,
    itinerary_id: str,
    storage: ItineraryStorage = Depends(get_storage),
):
    try:
        parsed_id = int(itinerary_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid itinerary ID")

    try:
        record = await storage.get(parsed_id)
    except Exception as e:
        logger.error("itinerary_read_failed", itinerary_id=parsed_id, error=str(e), error_type=type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve itinerary. Please try again."
        )

    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found")
    return to_read(record)


@router.get("/itineraries",
    response_model=List[ItineraryRead],
    responses={500: {"model": MessageResponse, "description": "Storage failure"}},
)
@limiter.limit(read_limit)
async def list_itineraries(
    request: Request,
    userId: Optional[int] = Query(default=None, description="Only itineraries owned by this user"),
    storage: ItineraryStorage = Depends(get_storage),
):
    try:
        records = await storage.list_all(user_id=userId)
    except Exception as e:
        logger.error("itinerary_list_failed", error=str(e), error_type=type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve itineraries. Please try again."
        )
    return [to_read(record) for record in records]
