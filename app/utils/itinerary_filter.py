"""In-memory search over an owner's itineraries

The store cannot query inside the activities array, so every search fetches
the owner's full list and narrows it here. The dashboard browser and the
/api/search endpoint both go through `matches`.
"""
from typing import Iterable, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..models.itinerary import Itinerary


class FilterCriteria(BaseModel):
    """Optional predicates, combined with AND. Empty values are ignored."""
    model_config = ConfigDict(populate_by_name=True)

    destination: Optional[str] = Field(None, description="Case-insensitive substring of the destination")
    activity_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("activityName", "activity_name"),
        description="Case-insensitive substring of any activity name"
    )
    trip_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("tripType", "trip_type"),
        description="Exact trip type"
    )
    favorite_only: Optional[bool] = Field(
        False,
        validation_alias=AliasChoices("favoriteOnly", "favorite_only", "favorite"),
        description="Keep only itineraries marked favorite"
    )

    def is_empty(self) -> bool:
        return not (self.destination or self.activity_name or self.trip_type or self.favorite_only)


def matches(itinerary: Itinerary, criteria: FilterCriteria) -> bool:
    """Return True if the itinerary satisfies every criterion that is set"""
    if criteria.destination:
        if criteria.destination.lower() not in itinerary.destination.lower():
            return False

    if criteria.trip_type:
        if itinerary.trip_type != criteria.trip_type:
            return False

    if criteria.favorite_only and not itinerary.is_favorite:
        return False

    if criteria.activity_name:
        needle = criteria.activity_name.lower()
        if not any(needle in activity.name.lower() for activity in itinerary.activities):
            return False

    return True


def filter_itineraries(itineraries: Iterable[Itinerary], criteria: FilterCriteria) -> List[Itinerary]:
    """
    Narrow a list of itineraries to those matching all criteria

    Args:
        itineraries: Owner's itineraries in display order
        criteria: Predicates to apply; unset or empty ones are skipped

    Returns:
        Matching itineraries, relative order preserved
    """
    return [itinerary for itinerary in itineraries if matches(itinerary, criteria)]


class ItineraryBrowser:
    """
    Holds the list fetched for the current view and the filtered subset shown.

    Filtering never goes back to the store; `reset` restores the fetched list.
    """

    def __init__(self, itineraries: Optional[Iterable[Itinerary]] = None):
        self.itineraries: List[Itinerary] = []
        self.visible: List[Itinerary] = []
        self.criteria = FilterCriteria()
        self.load(itineraries or [])

    def load(self, itineraries: Iterable[Itinerary]) -> List[Itinerary]:
        """Replace the fetched list and re-apply the current criteria"""
        self.itineraries = list(itineraries)
        self.visible = filter_itineraries(self.itineraries, self.criteria)
        return self.visible

    def apply(self, criteria: FilterCriteria) -> List[Itinerary]:
        self.criteria = criteria
        self.visible = filter_itineraries(self.itineraries, criteria)
        return self.visible

    def reset(self) -> List[Itinerary]:
        self.criteria = FilterCriteria()
        self.visible = list(self.itineraries)
        return self.visible

    def remove(self, itinerary_id: str) -> None:
        """Drop a deleted itinerary from both lists"""
        self.itineraries = [it for it in self.itineraries if it.id != itinerary_id]
        self.visible = [it for it in self.visible if it.id != itinerary_id]

    def replace(self, itinerary: Itinerary) -> None:
        """Swap in an updated copy, keeping its position"""
        self.itineraries = [itinerary if it.id == itinerary.id else it for it in self.itineraries]
        self.visible = filter_itineraries(self.itineraries, self.criteria)
