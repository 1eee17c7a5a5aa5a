"""Itinerary database model"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Activity(BaseModel):
    """A single planned event inside an itinerary"""
    name: str = Field(default="", description="Activity name")
    description: str = Field(default="", description="Free-text description")
    date: str = Field(default="", description="Calendar date as entered (no timezone)")


class ItineraryPayload(BaseModel):
    """Mutable fields of an itinerary, as submitted by the form"""
    title: str
    destination: str
    trip_type: str = ""
    activities: List[Activity] = Field(default_factory=list)

    def to_row(self, photos: List[str]) -> Dict[str, Any]:
        """Columns written on create and on full replace"""
        return {
            'title': self.title,
            'destination': self.destination,
            'trip_type': self.trip_type,
            'activities': [activity.model_dump() for activity in self.activities],
            'photos': list(photos),
        }


class Itinerary(BaseModel):
    """Itinerary model matching Supabase itineraries table schema"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    owner_id: str = Field(..., description="Owning user, partition key for every query")
    title: str
    destination: str
    trip_type: str = ""
    activities: List[Activity] = Field(default_factory=list)
    photos: List[str] = Field(default_factory=list)
    favorite: Optional[bool] = None
    created_at: Optional[datetime] = None

    @property
    def is_favorite(self) -> bool:
        return self.favorite is True

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Itinerary":
        """Build from a row of the itineraries table"""
        return cls(
            id=str(row['id']),
            owner_id=row['user_id'],
            title=row['title'],
            destination=row['destination'],
            trip_type=row.get('trip_type') or "",
            activities=row.get('activities') or [],
            photos=row.get('photos') or [],
            favorite=row.get('favorite'),
            created_at=row.get('created_at'),
        )
