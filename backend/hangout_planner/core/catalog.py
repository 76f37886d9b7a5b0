"""
Hand-authored fallback itineraries for known locations.

Used when the generative model is unavailable or returns unusable output.
Titles and descriptions are rendered per request; everything else is static.
"""

import random
from typing import Any, Dict, List, Optional, Sequence

from hangout_planner.core.images import (
    CAFE_ATMOSPHERE,
    CITY_EXPLORATION,
    HISTORICAL_LANDMARKS,
    PEOPLE_ENJOYING_OUTINGS,
    RESTAURANT_DINING,
    pick_image,
)

# Checked in this order, first substring match wins
LOCATION_PRIORITY = ("delhi", "noida", "jaipur", "mussoorie")
DEFAULT_LOCATION = "delhi"


def _activity(act_id, time, title, description, location, price, rating, time_of_day, act_type, category):
    return {
        "id": act_id,
        "time": time,
        "title": title,
        "description": description,
        "location": location,
        "price": price,
        "rating": rating,
        "timeOfDay": time_of_day,
        "type": act_type,
        "_category": category,
    }


def _recommendation(rec_id, title, description, rating, duration, category):
    return {
        "id": rec_id,
        "title": title,
        "description": description,
        "rating": rating,
        "duration": duration,
        "_category": category,
    }


CATALOG: Dict[str, Dict[str, Any]] = {
    "delhi": {
        "name": "Delhi",
        "title": "{duration} Adventure in Delhi",
        "description": "Enjoy a {budget} itinerary exploring the best of Delhi with a focus on {hangout_types}.",
        "activities": [
            _activity("act1", "9:00 AM", "Morning Chai at Connaught Place",
                      "Start your day with a traditional chai and breakfast at one of the iconic cafes in this colonial-era shopping district.",
                      "Connaught Place, New Delhi", "₹", "4.6 ★", "morning", "cafe", CAFE_ATMOSPHERE),
            _activity("act2", "11:00 AM", "Visit Humayun's Tomb",
                      "Explore this UNESCO World Heritage site with its stunning Mughal architecture and beautiful gardens.",
                      "Mathura Road, Nizamuddin, New Delhi", "₹₹", "4.8 ★", "morning", "historical", HISTORICAL_LANDMARKS),
            _activity("act3", "1:30 PM", "Lunch at Karim's",
                      "Enjoy authentic Mughlai cuisine at this legendary restaurant known for its kebabs and curries.",
                      "16, Gali Kababian, Jama Masjid, Old Delhi", "₹₹", "4.7 ★", "afternoon", "eating", RESTAURANT_DINING),
            _activity("act4", "3:30 PM", "Shop at Dilli Haat",
                      "Browse handcrafted items, textiles, and souvenirs from across India at this open-air market.",
                      "INA Market, New Delhi", "₹", "4.5 ★", "afternoon", "exploring", CITY_EXPLORATION),
            _activity("act5", "6:30 PM", "Sunset at India Gate",
                      "Watch the sunset and see the monument beautifully lit up as evening falls.",
                      "Rajpath, New Delhi", "Free", "4.9 ★", "evening", "historical", HISTORICAL_LANDMARKS),
            _activity("act6", "8:00 PM", "Dinner at Bukhara",
                      "Experience one of Delhi's finest dining venues known for its Northwest Frontier cuisine and tandoori dishes.",
                      "ITC Maurya, Diplomatic Enclave, Sardar Patel Marg", "₹₹₹", "4.8 ★", "evening", "eating", RESTAURANT_DINING),
        ],
        "recommendations": [
            _recommendation("rec1", "Historical Delhi Tour",
                            "A full-day tour covering Red Fort, Qutub Minar, and other historical monuments in Delhi.",
                            "4.7 ★", "Full day", HISTORICAL_LANDMARKS),
            _recommendation("rec2", "Food Walk in Old Delhi",
                            "Sample the best street food Delhi has to offer in the narrow lanes of Chandni Chowk.",
                            "4.9 ★", "3-4 hours", RESTAURANT_DINING),
            _recommendation("rec3", "Day Trip to Agra",
                            "Visit the magnificent Taj Mahal and Agra Fort on a day trip from Delhi.",
                            "4.8 ★", "Full day", HISTORICAL_LANDMARKS),
        ],
    },
    "noida": {
        "name": "Noida",
        "title": "{duration} Urban Experience in Noida",
        "description": "Discover the perfect blend of modernity and culture in Noida with this {budget} itinerary focused on {hangout_types}.",
        "activities": [
            _activity("act1", "9:30 AM", "Breakfast at Gardens Galleria Mall",
                      "Start your day with breakfast at one of the many cafes in this premium shopping destination.",
                      "Gardens Galleria Mall, Sector 38, Noida", "₹₹", "4.3 ★", "morning", "cafe", CAFE_ATMOSPHERE),
            _activity("act2", "11:30 AM", "Visit Okhla Bird Sanctuary",
                      "Explore this urban oasis which is home to over 300 bird species and provides a respite from the city's hustle.",
                      "Okhla Bird Sanctuary, Sector 95, Noida", "₹", "4.4 ★", "morning", "exploring", CITY_EXPLORATION),
            _activity("act3", "2:00 PM", "Lunch at Sector 18 Market",
                      "Enjoy a variety of cuisines at one of the many renowned restaurants in Noida's premier shopping district.",
                      "Sector 18 Market, Noida", "₹₹", "4.5 ★", "afternoon", "eating", RESTAURANT_DINING),
            _activity("act4", "4:00 PM", "Shopping at DLF Mall of India",
                      "Browse through one of India's largest shopping malls featuring international and domestic brands.",
                      "DLF Mall of India, Sector 18, Noida", "₹₹₹", "4.7 ★", "afternoon", "exploring", CITY_EXPLORATION),
            _activity("act5", "7:00 PM", "Evening Walk at Noida Golf Course",
                      "Enjoy the sunset views at the beautifully maintained Noida Golf Course.",
                      "Noida Golf Course, Sector 38, Noida", "Free", "4.6 ★", "evening", "exploring", CITY_EXPLORATION),
            _activity("act6", "8:30 PM", "Dinner at The Great India Place",
                      "Conclude your day with dinner at one of the popular restaurants in this vibrant mall.",
                      "The Great India Place, Sector 38A, Noida", "₹₹", "4.4 ★", "evening", "eating", RESTAURANT_DINING),
        ],
        "recommendations": [
            _recommendation("rec1", "Gaming Day at Worlds of Wonder",
                            "Enjoy a fun-filled day at this amusement park and water park complex.",
                            "4.5 ★", "Full day", PEOPLE_ENJOYING_OUTINGS),
            _recommendation("rec2", "Noida Art & Cultural Tour",
                            "Discover the growing art scene in Noida with visits to galleries and cultural centers.",
                            "4.3 ★", "Half day", HISTORICAL_LANDMARKS),
            _recommendation("rec3", "Wellness Day at Sector 104",
                            "Indulge in spa treatments and wellness activities in Noida's luxury spas.",
                            "4.7 ★", "Half day", CAFE_ATMOSPHERE),
        ],
    },
    "jaipur": {
        "name": "Jaipur",
        "title": "{duration} Royal Experience in Jaipur",
        "description": "Experience the Pink City's royal heritage and vibrant culture with this {budget} itinerary focused on {hangout_types}.",
        "activities": [
            _activity("act1", "8:30 AM", "Breakfast at Lakshmi Misthan Bhandar",
                      "Start your day with authentic Rajasthani breakfast at this iconic sweet shop and restaurant.",
                      "Johari Bazaar Road, Jaipur", "₹", "4.6 ★", "morning", "cafe", CAFE_ATMOSPHERE),
            _activity("act2", "10:00 AM", "Explore Amber Fort",
                      "Visit this magnificent fort complex with its stunning architecture, intricate carvings, and breathtaking views.",
                      "Amer, Jaipur", "₹₹", "4.9 ★", "morning", "historical", HISTORICAL_LANDMARKS),
            _activity("act3", "1:30 PM", "Lunch at Chokhi Dhani",
                      "Experience authentic Rajasthani cuisine in this village-themed restaurant.",
                      "Tonk Road, Jaipur", "₹₹", "4.7 ★", "afternoon", "eating", RESTAURANT_DINING),
            _activity("act4", "3:30 PM", "Shopping at Johari Bazaar",
                      "Browse through colorful textiles, jewelry, and handicrafts in this traditional market.",
                      "Johari Bazaar, Jaipur", "₹₹", "4.5 ★", "afternoon", "exploring", CITY_EXPLORATION),
            _activity("act5", "6:00 PM", "Sunset at Nahargarh Fort",
                      "Enjoy panoramic views of the Pink City as the sun sets behind the Aravalli hills.",
                      "Nahargarh Fort, Jaipur", "₹", "4.8 ★", "evening", "historical", HISTORICAL_LANDMARKS),
            _activity("act6", "8:30 PM", "Dinner at 1135 AD",
                      "Dine like royalty in this opulent restaurant located within Amber Fort.",
                      "Amber Fort, Jaipur", "₹₹₹", "4.8 ★", "evening", "eating", RESTAURANT_DINING),
        ],
        "recommendations": [
            _recommendation("rec1", "Elephant Safari at Amer",
                            "Experience a royal elephant ride at the iconic Amber Fort, just like the Maharajas once did.",
                            "4.6 ★", "Half day", HISTORICAL_LANDMARKS),
            _recommendation("rec2", "Hot Air Balloon Ride",
                            "Soar above the Pink City for a breathtaking aerial view of palaces and forts.",
                            "4.9 ★", "3 hours", CITY_EXPLORATION),
            _recommendation("rec3", "Block Printing Workshop",
                            "Learn the traditional art of Rajasthani block printing from local artisans.",
                            "4.7 ★", "Half day", PEOPLE_ENJOYING_OUTINGS),
        ],
    },
    "mussoorie": {
        "name": "Mussoorie",
        "title": "{duration} Mountain Retreat in Mussoorie",
        "description": "Escape to the Queen of Hills with this refreshing {budget} itinerary focused on {hangout_types}.",
        "activities": [
            _activity("act1", "8:00 AM", "Breakfast at Landour Bakehouse",
                      "Start your day with freshly baked treats and coffee at this charming bakery in Landour.",
                      "Landour, Mussoorie", "₹₹", "4.7 ★", "morning", "cafe", CAFE_ATMOSPHERE),
            _activity("act2", "10:00 AM", "Walk on Camel's Back Road",
                      "Enjoy a scenic stroll on this picturesque road with beautiful mountain views.",
                      "Camel's Back Road, Mussoorie", "Free", "4.5 ★", "morning", "exploring", CITY_EXPLORATION),
            _activity("act3", "1:00 PM", "Lunch at Café Ivy",
                      "Savor delicious food with panoramic views of the Doon Valley.",
                      "Mall Road, Mussoorie", "₹₹", "4.6 ★", "afternoon", "eating", RESTAURANT_DINING),
            _activity("act4", "3:00 PM", "Visit Company Garden",
                      "Explore this beautiful garden with a mini lake, fountain, and various flower species.",
                      "Company Garden, Mussoorie", "₹", "4.4 ★", "afternoon", "exploring", CITY_EXPLORATION),
            _activity("act5", "5:30 PM", "Sunset at Gun Hill",
                      "Take the cable car to Gun Hill for spectacular sunset views over the Himalayas.",
                      "Gun Hill, Mussoorie", "₹₹", "4.7 ★", "evening", "exploring", CITY_EXPLORATION),
            _activity("act6", "8:00 PM", "Dinner at Little Llama Café",
                      "End your day with delicious food at this cozy café known for its warm ambiance.",
                      "Mall Road, Mussoorie", "₹₹", "4.5 ★", "evening", "eating", RESTAURANT_DINING),
        ],
        "recommendations": [
            _recommendation("rec1", "Trek to Lal Tibba",
                            "Hike to the highest point in Mussoorie for unparalleled views of the Himalayan ranges.",
                            "4.8 ★", "Half day", CITY_EXPLORATION),
            _recommendation("rec2", "Literary Tour of Landour",
                            "Visit the homes and haunts of famous authors who made Mussoorie their home.",
                            "4.6 ★", "3-4 hours", HISTORICAL_LANDMARKS),
            _recommendation("rec3", "Day Trip to Kempty Falls",
                            "Enjoy a refreshing day at this beautiful waterfall just outside Mussoorie.",
                            "4.5 ★", "Half day", CITY_EXPLORATION),
        ],
    },
}


def known_locations() -> List[str]:
    return list(LOCATION_PRIORITY)


def match_location(location_text: Optional[str]) -> str:
    """Return the catalog key for a free-text location, defaulting to Delhi."""
    needle = (location_text or "").lower()
    for key in LOCATION_PRIORITY:
        if key in needle:
            return key
    return DEFAULT_LOCATION


def _render(items: Sequence[Dict[str, Any]], rng: Optional[random.Random]) -> List[Dict[str, Any]]:
    rendered = []
    for item in items:
        out = {k: v for k, v in item.items() if k != "_category"}
        out["image"] = pick_image(item["_category"], rng)
        rendered.append(out)
    return rendered


def lookup(
    location_text: str,
    duration: str,
    budget: str,
    hangout_types: Sequence[str],
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    Build a fallback itinerary for the best-matching known location.

    The result always has six activities and three recommendations. The
    reported location is the caller's own text, the venues come from the
    matched catalog entry.
    """
    entry = CATALOG[match_location(location_text)]
    fields = {
        "duration": duration,
        "budget": budget.lower(),
        "hangout_types": ", ".join(hangout_types).lower(),
    }
    return {
        "title": entry["title"].format(**fields),
        "description": entry["description"].format(**fields),
        "location": (location_text or "").strip() or entry["name"],
        "activities": _render(entry["activities"], rng),
        "recommendations": _render(entry["recommendations"], rng),
    }
