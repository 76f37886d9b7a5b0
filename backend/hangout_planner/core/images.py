"""
Curated stock imagery for activities and recommendations
"""

import random
from typing import Any, Dict, List, Optional

_UNSPLASH = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&q=85&fm=jpg&crop=entropy&cs=srgb&w=640"

CAFE_ATMOSPHERE = "cafe atmosphere"
HISTORICAL_LANDMARKS = "historical landmarks"
RESTAURANT_DINING = "restaurant dining"
CITY_EXPLORATION = "city exploration"
PEOPLE_ENJOYING_OUTINGS = "people enjoying outings"

CATEGORY_IMAGES: Dict[str, List[str]] = {
    CAFE_ATMOSPHERE: [
        _UNSPLASH.format("1525610553991-2bede1a236e2"),
        _UNSPLASH.format("1521017432531-fbd92d768814"),
        _UNSPLASH.format("1495474472287-4d71bcdd2085"),
    ],
    HISTORICAL_LANDMARKS: [
        _UNSPLASH.format("1585135497273-1a86b09fe70e"),
        _UNSPLASH.format("1548013146-72479768bada"),
        _UNSPLASH.format("1524492412937-b28074a5d7da"),
    ],
    RESTAURANT_DINING: [
        _UNSPLASH.format("1517248135467-4c7edcad34c4"),
        _UNSPLASH.format("1550966871-3ed3cdb5ed0c"),
        _UNSPLASH.format("1424847651672-bf20a4b0982b"),
    ],
    CITY_EXPLORATION: [
        _UNSPLASH.format("1477959858617-67f85cf4f1df"),
        _UNSPLASH.format("1480714378408-67cf0d13bc1b"),
        _UNSPLASH.format("1519830105440-63603408ebe0"),
    ],
    PEOPLE_ENJOYING_OUTINGS: [
        _UNSPLASH.format("1516450360452-9312f5e86fc7"),
        _UNSPLASH.format("1471560090527-d1af5e4e6eb6"),
        _UNSPLASH.format("1536625737227-92a1fc042e7e"),
    ],
}

DEFAULT_CATEGORY = CAFE_ATMOSPHERE

# Activity "type" -> image category
ACTIVITY_TYPE_CATEGORIES: Dict[str, str] = {
    "exploring": CITY_EXPLORATION,
    "eating": RESTAURANT_DINING,
    "historical": HISTORICAL_LANDMARKS,
    "cafe": CAFE_ATMOSPHERE,
}


def pick_image(category: str, rng: Optional[random.Random] = None) -> str:
    """Pick a random image URL for a category, falling back to cafe imagery."""
    images = CATEGORY_IMAGES.get(category) or CATEGORY_IMAGES[DEFAULT_CATEGORY]
    return (rng or random).choice(images)


def category_for_activity_type(activity_type: Any) -> str:
    """Map an activity type to an image category; non-string types get the generic one."""
    key = activity_type.lower() if isinstance(activity_type, str) else ""
    return ACTIVITY_TYPE_CATEGORIES.get(key, PEOPLE_ENJOYING_OUTINGS)


def image_for_activity_type(activity_type: Any, rng: Optional[random.Random] = None) -> str:
    return pick_image(category_for_activity_type(activity_type), rng)
