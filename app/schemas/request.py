"""Request schemas for API endpoints"""
from pydantic import ConfigDict

from ..utils.itinerary_filter import FilterCriteria


class SearchRequest(FilterCriteria):
    """
    Request body for /api/search

    The owner comes from the session, never from the body. Every field is
    optional and empty strings are ignored.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "destination": "par",
                "activityName": "museum",
                "tripType": "Leisure",
                "favoriteOnly": True
            }
        }
    )
