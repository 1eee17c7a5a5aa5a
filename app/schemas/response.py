"""Response schemas for API endpoints"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.itinerary import Itinerary


class ItineraryListResponse(BaseModel):
    """Itineraries returned by list and search"""
    itineraries: List[Itinerary] = Field(..., description="Itineraries, newest first")
    count: int = Field(..., description="Number of itineraries returned")


class CreateItineraryResponse(BaseModel):
    """Success envelope for a created or updated itinerary"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    id: str = Field(..., description="Itinerary ID assigned by the store")
    photos: List[str] = Field(default_factory=list, description="Stored photo URLs in order")
    failed_uploads: List[str] = Field(
        default_factory=list,
        description="Files that could not be uploaded and were left out"
    )


class FavoriteResponse(BaseModel):
    """New favorite value after a toggle"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    itinerary_id: str
    favorite: bool


class ErrorResponse(BaseModel):
    """Error response"""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")
