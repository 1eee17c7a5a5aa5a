"""Input validation for itinerary form submissions"""
import json
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..models.itinerary import Activity
from ..utils.exceptions import ItineraryError


class ValidationError(ItineraryError):
    """Custom validation error"""
    error_type = "ValidationError"


def validate_required_fields(title: Optional[str], destination: Optional[str]) -> None:
    """
    Validate the fields an itinerary cannot be stored without

    Args:
        title: Itinerary title
        destination: Trip destination

    Raises:
        ValidationError: If either field is missing or blank
    """
    missing = [
        name for name, value in (("title", title), ("destination", destination))
        if not value or not value.strip()
    ]
    if missing:
        raise ValidationError("Missing required fields", {"missing": missing})


def parse_activities(raw: Optional[str]) -> List[Activity]:
    """
    Parse the JSON-encoded activity list sent with a multipart form

    An empty value or the literal "undefined" (what browsers send for an
    unset field) means no activities.

    Args:
        raw: JSON array of {name, description, date} objects

    Returns:
        Activities in submitted order

    Raises:
        ValidationError: If the value is not a JSON array of activities
    """
    if not raw or raw == "undefined":
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError("Invalid activities format", {"error": str(e)})

    if not isinstance(data, list):
        raise ValidationError("Invalid activities format", {"error": "expected a JSON array"})

    try:
        return [Activity.model_validate(item) for item in data]
    except PydanticValidationError as e:
        raise ValidationError("Invalid activities format", {"errors": str(e)})


def parse_photo_urls(raw: Optional[str]) -> List[str]:
    """
    Parse the JSON-encoded list of already stored photo URLs kept on edit

    Raises:
        ValidationError: If the value is not a JSON array of strings
    """
    if not raw or raw == "undefined":
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError("Invalid photos format", {"error": str(e)})

    if not isinstance(data, list) or not all(isinstance(url, str) for url in data):
        raise ValidationError("Invalid photos format", {"error": "expected a JSON array of URLs"})

    return data
