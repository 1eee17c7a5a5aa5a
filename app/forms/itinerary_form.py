"""Create / edit form for an itinerary

Binds what the user entered to a validated payload, uploads any new photos
and hands the result to the repository.
"""
import logging
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, Field

from ..models.itinerary import Activity, ItineraryPayload
from ..models.user import OwnerSession
from ..tools.media_host import MediaUploader, PhotoFile, owner_folder, upload_photos
from ..utils import database
from ..utils.exceptions import NotFound
from ..validators.input_validator import (
    ValidationError,
    parse_activities,
    parse_photo_urls,
    validate_required_fields,
)

logger = logging.getLogger(__name__)

ActivityField = Literal["name", "description", "date"]
ACTIVITY_FIELDS = get_args(ActivityField)


class FormResult(BaseModel):
    """What a successful submit produced"""
    id: str
    photos: List[str] = Field(default_factory=list)
    failed_uploads: List[str] = Field(default_factory=list)


class ItineraryForm:
    """State of one create or edit form"""

    def __init__(
        self,
        title: str = "",
        destination: str = "",
        trip_type: str = "Adventure",
        activities: Optional[List[Activity]] = None,
        existing_photos: Optional[List[str]] = None,
        new_photos: Optional[List[PhotoFile]] = None,
    ):
        self.title = title
        self.destination = destination
        self.trip_type = trip_type
        self.activities: List[Activity] = list(activities or [])
        self.existing_photos: List[str] = list(existing_photos or [])
        self.new_photos: List[PhotoFile] = list(new_photos or [])

    @classmethod
    def from_form_data(
        cls,
        title: Optional[str],
        destination: Optional[str],
        trip_type: Optional[str] = None,
        activities: Optional[str] = None,
        existing_photos: Optional[str] = None,
        photos: Optional[List[PhotoFile]] = None,
    ) -> "ItineraryForm":
        """
        Build a form from multipart fields

        Args:
            title: Itinerary title
            destination: Trip destination
            trip_type: Trip type, stored as given
            activities: JSON array of activities
            existing_photos: JSON array of already stored photo URLs to keep
            photos: Newly selected files

        Raises:
            ValidationError: If activities or existing_photos is not valid JSON
        """
        return cls(
            title=title or "",
            destination=destination or "",
            trip_type=trip_type or "",
            activities=parse_activities(activities),
            existing_photos=parse_photo_urls(existing_photos),
            new_photos=photos,
        )

    def add_activity(self) -> Activity:
        activity = Activity()
        self.activities.append(activity)
        return activity

    def update_activity(self, index: int, field: str, value: str) -> Activity:
        """Set one field of one activity, leaving the others unchanged"""
        if field not in ACTIVITY_FIELDS:
            raise ValidationError(f"Unknown activity field '{field}'", {"allowed": list(ACTIVITY_FIELDS)})
        self._check_index(index, self.activities, "activity")

        updated = self.activities[index].model_copy(update={field: value})
        self.activities[index] = updated
        return updated

    def remove_activity(self, index: int) -> None:
        self._check_index(index, self.activities, "activity")
        del self.activities[index]

    def remove_existing_photo(self, index: int) -> None:
        self._check_index(index, self.existing_photos, "photo")
        del self.existing_photos[index]

    def remove_new_photo(self, index: int) -> None:
        self._check_index(index, self.new_photos, "photo")
        del self.new_photos[index]

    @staticmethod
    def _check_index(index: int, items: list, label: str) -> None:
        if not 0 <= index < len(items):
            raise ValidationError(f"No {label} at position {index}")

    def to_payload(self) -> ItineraryPayload:
        """
        Validate and build the payload written to the store

        Raises:
            ValidationError: If title or destination is missing
        """
        validate_required_fields(self.title, self.destination)
        return ItineraryPayload(
            title=self.title,
            destination=self.destination,
            trip_type=self.trip_type,
            activities=self.activities,
        )

    async def submit_create(self, session: OwnerSession, uploader: MediaUploader) -> FormResult:
        """
        Validate, upload photos, then create the itinerary

        Photos that fail to upload are left out; the itinerary is still created.
        """
        payload = self.to_payload()
        batch = await upload_photos(uploader, self.new_photos, owner_folder(session.owner_id))
        photos = self.existing_photos + batch.urls
        if batch.failures:
            logger.warning(f"{len(batch.failures)} photo(s) left out for owner {session.owner_id}")

        itinerary_id = await database.create_itinerary(session, payload, photos)
        return FormResult(id=itinerary_id, photos=photos, failed_uploads=batch.failures)

    async def submit_update(self, session: OwnerSession, itinerary_id: str, uploader: MediaUploader) -> FormResult:
        """
        Validate, upload new photos, then overwrite the itinerary

        The stored photo list becomes the kept existing photos followed by the
        newly uploaded ones.

        Raises:
            ValidationError: If title or destination is missing
            NotFound: If the owner has no itinerary with this ID
        """
        payload = self.to_payload()
        if await database.get_itinerary(session, itinerary_id) is None:
            raise NotFound("Itinerary not found", {"itinerary_id": itinerary_id})

        batch = await upload_photos(uploader, self.new_photos, owner_folder(session.owner_id))
        photos = self.existing_photos + batch.urls
        if batch.failures:
            logger.warning(f"{len(batch.failures)} photo(s) left out for owner {session.owner_id}")

        itinerary = await database.update_itinerary(session, itinerary_id, payload, photos)
        return FormResult(id=itinerary.id, photos=itinerary.photos, failed_uploads=batch.failures)
