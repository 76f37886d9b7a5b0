"""
Itinerary generation: prompt the model, fall back to the catalog, enrich, persist.

The API handlers call ``ItineraryGenerator`` so prompt building, catalog
fallback and image enrichment live in one place.
"""

import asyncio
import json
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import structlog

from hangout_planner.api.schemas import GenerateItineraryRequest
from hangout_planner.core import catalog
from hangout_planner.core.images import HISTORICAL_LANDMARKS, image_for_activity_type, pick_image
from hangout_planner.core.prompts import build_itinerary_prompt
from hangout_planner.db.storage import ItineraryStorage

logger = structlog.get_logger(__name__)

RESPONSE_FIELDS = ("title", "description", "location", "activities", "recommendations")


class Provenance(str, Enum):
    AI = "ai"
    CATALOG = "catalog"


@dataclass
class GenerationResult:
    itinerary: Dict[str, Any]
    provenance: Provenance
    itinerary_id: Optional[int] = None

    def to_response(self) -> Dict[str, Any]:
        """Client-facing body; provenance is not exposed"""
        body: Dict[str, Any] = {}
        if self.itinerary_id is not None:
            body["id"] = self.itinerary_id
        for field in RESPONSE_FIELDS:
            body[field] = self.itinerary.get(field)
        for field in ("activities", "recommendations"):
            if not isinstance(body[field], list):
                body[field] = []
        return body


def parse_model_output(text: str) -> Dict[str, Any]:
    """Parse model text as a JSON object, tolerating markdown code fences"""
    cleaned = (text or "").strip().replace("```json", "").replace("```", "").strip()
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class ItineraryGenerator:
    """Coordinates one generation request from prompt to persisted itinerary"""

    def __init__(
        self,
        storage: ItineraryStorage,
        ai_client,
        ai_timeout_seconds: float = 20.0,
        rng: Optional[random.Random] = None,
    ):
        self.storage = storage
        self.ai_client = ai_client
        self.ai_timeout_seconds = ai_timeout_seconds
        self.rng = rng

    def build_prompt(self, request: GenerateItineraryRequest) -> str:
        prefs, loc = request.preferences, request.locationData
        return build_itinerary_prompt(
            location=loc.location,
            hangout_types=prefs.hangoutTypes,
            duration=prefs.duration,
            budget=prefs.budget,
            distance=loc.distance,
            transportation=loc.transportation,
        )

    async def request_ai_itinerary(self, prompt: str) -> Optional[Dict[str, Any]]:
        """
        Make exactly one model call. Any failure (exception, timeout, empty or
        unparseable text) is logged and reported as None.
        """
        try:
            text = await asyncio.wait_for(
                self.ai_client.generate(prompt), timeout=self.ai_timeout_seconds
            )
            return parse_model_output(text)
        except asyncio.TimeoutError:
            logger.warning("ai_generation_failed", reason="timeout", timeout_seconds=self.ai_timeout_seconds)
        except Exception as e:
            logger.warning("ai_generation_failed", reason=type(e).__name__, error=str(e))
        return None

    def enrich(self, itinerary: Dict[str, Any], requested_location: str) -> Dict[str, Any]:
        """Fill in missing images (and a missing location); leave everything else as-is"""
        activities = itinerary.get("activities")
        if isinstance(activities, list):
            for activity in activities:
                if isinstance(activity, dict) and not activity.get("image"):
                    activity["image"] = image_for_activity_type(activity.get("type") or "cafe", self.rng)

        recommendations = itinerary.get("recommendations")
        if isinstance(recommendations, list):
            for rec in recommendations:
                if isinstance(rec, dict) and not rec.get("image"):
                    rec["image"] = pick_image(HISTORICAL_LANDMARKS, self.rng)

        if not itinerary.get("location"):
            itinerary["location"] = requested_location
        return itinerary

    def fallback(self, request: GenerateItineraryRequest) -> Dict[str, Any]:
        prefs, loc = request.preferences, request.locationData
        itinerary = catalog.lookup(
            loc.location,
            duration=prefs.duration,
            budget=prefs.budget,
            hangout_types=prefs.hangoutTypes,
            rng=self.rng,
        )
        logger.info(
            "catalog_fallback_selected",
            requested_location=loc.location,
            catalog_entry=catalog.match_location(loc.location),
        )
        return itinerary

    async def persist(self, itinerary: Dict[str, Any]) -> Optional[int]:
        """Best-effort save; returns None when storage fails"""
        try:
            itinerary_id, _ = await self.storage.save(itinerary)
            return itinerary_id
        except Exception as e:
            logger.error(
                "itinerary_persist_failed",
                backend=self.storage.backend_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def generate(self, request: GenerateItineraryRequest) -> GenerationResult:
        location = request.locationData.location
        start = time.time()
        logger.info("itinerary_generation_started", location=location)

        itinerary = await self.request_ai_itinerary(self.build_prompt(request))
        if itinerary is not None:
            provenance = Provenance.AI
            itinerary = self.enrich(itinerary, location)
        else:
            provenance = Provenance.CATALOG
            itinerary = self.fallback(request)

        itinerary_id = await self.persist(itinerary)

        logger.info(
            "itinerary_generation_completed",
            location=location,
            provenance=provenance.value,
            itinerary_id=itinerary_id,
            duration_ms=round((time.time() - start) * 1000, 2),
        )
        return GenerationResult(itinerary=itinerary, provenance=provenance, itinerary_id=itinerary_id)
