"""Supabase database utility functions"""
import logging
from typing import Any, Dict, List, Optional

from supabase import create_client, Client
from postgrest.exceptions import APIError

from app.config import settings
from app.models.itinerary import Itinerary, ItineraryPayload
from app.models.user import OwnerSession
from app.utils.exceptions import NotAuthenticated, NotFound
from app.validators.input_validator import validate_required_fields

logger = logging.getLogger(__name__)

# Postgres "invalid_text_representation", returned when an id is not a uuid
INVALID_ID_CODE = "22P02"


class SupabaseClient:
    """Singleton Supabase client wrapper"""
    _instance: Optional[Client] = None
    _auth_instance: Optional[Client] = None

    @classmethod
    def get_client(cls) -> Client:
        """Get or create Supabase client instance"""
        if cls._instance is None:
            cls._instance = create_client(
                supabase_url=settings.supabase_url,
                supabase_key=settings.supabase_key
            )
        return cls._instance

    @classmethod
    def get_auth_client(cls) -> Client:
        """
        Get or create the client used for sign-in / sign-up calls

        Signing in stores the user's session on the client it was made with,
        so those calls never go through the table client.
        """
        if cls._auth_instance is None:
            cls._auth_instance = create_client(
                supabase_url=settings.supabase_url,
                supabase_key=settings.supabase_key
            )
        return cls._auth_instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None
        cls._auth_instance = None


def _require_owner(session: Optional[OwnerSession]) -> str:
    if session is None or not session.owner_id:
        raise NotAuthenticated("You must be signed in to access itineraries")
    return session.owner_id


def _table():
    return SupabaseClient.get_client().table(settings.itineraries_table)


# Itinerary operations
async def list_itineraries(session: OwnerSession) -> List[Itinerary]:
    """
    Get all itineraries for the session owner, newest first

    Args:
        session: Authenticated owner

    Returns:
        List of itineraries ordered by created_at descending

    Raises:
        NotAuthenticated: If there is no owner session
    """
    owner_id = _require_owner(session)
    result = _table()\
        .select('*')\
        .eq('user_id', owner_id)\
        .order('created_at', desc=True)\
        .execute()

    return [Itinerary.from_row(row) for row in result.data or []]


async def get_itinerary(session: OwnerSession, itinerary_id: str) -> Optional[Itinerary]:
    """
    Get a specific itinerary by ID (must belong to the owner)

    Args:
        session: Authenticated owner
        itinerary_id: Itinerary UUID

    Returns:
        Itinerary if found and owned by the session owner, None otherwise
    """
    owner_id = _require_owner(session)
    try:
        result = _table()\
            .select('*')\
            .eq('id', itinerary_id)\
            .eq('user_id', owner_id)\
            .execute()
    except APIError as e:
        if e.code == INVALID_ID_CODE:
            return None
        raise

    if result.data:
        return Itinerary.from_row(result.data[0])
    return None


async def create_itinerary(
    session: OwnerSession,
    payload: ItineraryPayload,
    photo_urls: Optional[List[str]] = None
) -> str:
    """
    Create a new itinerary in the itineraries table

    created_at is filled in by the table default.

    Args:
        session: Authenticated owner
        payload: Title, destination, trip type and activities
        photo_urls: Media URLs already uploaded for this itinerary

    Returns:
        ID of the created itinerary

    Raises:
        ValidationError: If title or destination is missing
        Exception: If the insert returns no row
    """
    owner_id = _require_owner(session)
    validate_required_fields(payload.title, payload.destination)

    row: Dict[str, Any] = payload.to_row(photo_urls or [])
    row['user_id'] = owner_id

    result = _table().insert(row).execute()

    if not result.data:
        raise Exception("Failed to create itinerary")

    itinerary_id = str(result.data[0]['id'])
    logger.info(f"Created itinerary {itinerary_id} for owner {owner_id}")
    return itinerary_id


async def update_itinerary(
    session: OwnerSession,
    itinerary_id: str,
    payload: ItineraryPayload,
    photo_urls: List[str]
) -> Itinerary:
    """
    Replace the mutable fields of an itinerary

    Activities and photos are overwritten as whole lists. id, created_at and
    favorite are left as they are.

    Raises:
        ValidationError: If title or destination is missing
        NotFound: If the owner has no itinerary with this ID
    """
    owner_id = _require_owner(session)
    validate_required_fields(payload.title, payload.destination)

    try:
        result = _table()\
            .update(payload.to_row(photo_urls))\
            .eq('id', itinerary_id)\
            .eq('user_id', owner_id)\
            .execute()
    except APIError as e:
        if e.code == INVALID_ID_CODE:
            raise NotFound("Itinerary not found", {"itinerary_id": itinerary_id})
        raise

    if not result.data:
        raise NotFound("Itinerary not found", {"itinerary_id": itinerary_id})

    return Itinerary.from_row(result.data[0])


async def toggle_favorite(session: OwnerSession, itinerary_id: str) -> bool:
    """
    Flip the favorite flag of an itinerary

    Read-then-write with no version check: concurrent toggles race and the
    last write wins.

    Returns:
        The new favorite value

    Raises:
        NotFound: If the owner has no itinerary with this ID
    """
    owner_id = _require_owner(session)
    itinerary = await get_itinerary(session, itinerary_id)
    if not itinerary:
        raise NotFound("Itinerary not found", {"itinerary_id": itinerary_id})

    favorite = not itinerary.is_favorite
    result = _table()\
        .update({'favorite': favorite})\
        .eq('id', itinerary_id)\
        .eq('user_id', owner_id)\
        .execute()

    if not result.data:
        raise NotFound("Itinerary not found", {"itinerary_id": itinerary_id})

    return favorite


async def delete_itinerary(session: OwnerSession, itinerary_id: str) -> bool:
    """
    Delete an itinerary (must belong to the owner)

    Uploaded photos are not removed from the media host.

    Returns:
        True if deleted successfully, False if not found
    """
    owner_id = _require_owner(session)

    # First verify the itinerary belongs to the user
    itinerary = await get_itinerary(session, itinerary_id)
    if not itinerary:
        return False

    _table()\
        .delete()\
        .eq('id', itinerary_id)\
        .eq('user_id', owner_id)\
        .execute()

    logger.info(f"Deleted itinerary {itinerary_id} for owner {owner_id}")
    return True
