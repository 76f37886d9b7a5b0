"""
Prompt template for itinerary generation
"""

from typing import Sequence

ITINERARY_PROMPT = """You are an expert travel planner with deep knowledge of Indian locations. You create detailed, realistic itineraries based on user preferences.

Generate a personalized hangout itinerary for {location}.

Preferences:
- Activities: {hangout_types}
- Duration: {duration}
- Budget: {budget}
- Maximum travel distance: {distance}
- Transportation: {transportation}

Please generate a complete itinerary with realistic locations, descriptions, and timeline.
The response must be valid JSON format only (no markdown, no code blocks) and include:
1. A "title" and "description" for the itinerary
2. The "location"
3. A list of 6 "activities" (2 morning, 2 afternoon, 2 evening) with:
   - "id": unique ID (string)
   - "time": e.g. "9:00 AM"
   - "title"
   - "description"
   - "location": street address and neighborhood
   - "price": price category, use "₹" for budget, "₹₹" for moderate, "₹₹₹" for expensive, or "Free"
   - "rating": e.g. "4.8 ★"
   - "type": one of "exploring", "eating", "historical", "cafe"
   - "timeOfDay": one of "morning", "afternoon", "evening"
4. Three "recommendations" for similar adventures, each with "id", "title", "description", "rating" and "duration".

Make activities specific to the location, realistic, and based on actual venues. Include exact addresses.
Format all times appropriately. Make sure descriptions are engaging and 1-2 sentences long.
Focus on authentic Indian experiences.

Return only valid JSON without any markdown formatting or code blocks."""


def build_itinerary_prompt(
    location: str,
    hangout_types: Sequence[str],
    duration: str,
    budget: str,
    distance: str,
    transportation: Sequence[str],
) -> str:
    return ITINERARY_PROMPT.format(
        location=location,
        hangout_types=", ".join(hangout_types),
        duration=duration,
        budget=budget,
        distance=distance,
        transportation=", ".join(transportation) or "Any",
    )
