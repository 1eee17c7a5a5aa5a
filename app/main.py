"""
Itinerary Keeper Backend - personal travel itinerary manager

- Supabase Auth for sign-up / sign-in (token kept in an HttpOnly cookie)
- Itineraries stored per owner in a Supabase table
- Photos uploaded to Supabase Storage or Cloudinary
- Search runs in memory over the owner's fetched itineraries
"""
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request, Depends, Response, Form, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from .config import settings
from .forms.itinerary_form import ItineraryForm
from .models.itinerary import Itinerary
from .models.user import OwnerSession
from .schemas.auth import UserRegisterRequest, UserLoginRequest, AuthResponse, UserResponse
from .schemas.request import SearchRequest
from .schemas.response import (
    CreateItineraryResponse,
    ErrorResponse,
    FavoriteResponse,
    ItineraryListResponse,
)
from .middleware.auth import get_access_token, require_auth
from .tools.media_host import PhotoFile, get_media_uploader
from .utils import auth as identity
from .utils.database import list_itineraries, get_itinerary, toggle_favorite, delete_itinerary
from .utils.exceptions import NotAuthenticated, NotFound
from .utils.itinerary_filter import filter_itineraries
from .validators.input_validator import ValidationError

# Configure logging
log_file = Path(__file__).parent.parent / "logs.txt"
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    handlers=[
        logging.FileHandler(log_file, mode='a'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Itinerary Keeper API",
    description="Create, organise and search personal travel itineraries",
    version="1.0.0"
)

# Restricts to allowed origins from environment (default: http://localhost:3000)
allowed_origins_list = [origin.strip() for origin in settings.allowed_origins.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def http_error(status_code: int, error: str, message: str, details: Optional[dict] = None) -> HTTPException:
    """Build an HTTPException carrying the standard error envelope"""
    return HTTPException(
        status_code=status_code,
        detail={
            "error": error,
            "message": message,
            "details": details or {}
        }
    )


def set_auth_cookie(response: Response, access_token: str, expires_in: Optional[int]) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=access_token,
        httponly=True,
        secure=settings.env == "production",  # HTTPS only in production
        samesite="none" if settings.env == "production" else "lax",
        max_age=expires_in
    )


async def read_photos(photos: Optional[List[UploadFile]]) -> List[PhotoFile]:
    """Read uploaded files into memory, in the order they were sent"""
    files = []
    for upload in photos or []:
        files.append(PhotoFile(
            filename=upload.filename or "photo",
            content=await upload.read(),
            content_type=upload.content_type
        ))
    return files


@app.exception_handler(NotAuthenticated)
async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
    """Send browsers to the login page, API clients get a 401"""
    if "text/html" in request.headers.get("accept", ""):
        return RedirectResponse(url=settings.login_path, status_code=303)

    return JSONResponse(
        status_code=401,
        content={"detail": {"error": exc.error_type, "message": exc.message, "details": exc.details}},
        headers={"WWW-Authenticate": "Bearer"}
    )


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "message": "Itinerary Keeper API is running"}


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.post(
    "/auth/register",
    response_model=AuthResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def register(request: UserRegisterRequest, response: Response):
    """
    Register a new account with the identity provider

    When the provider issues a session straight away the access token is set
    in an HttpOnly cookie; otherwise the user has to confirm their email first.

    Raises:
        HTTPException: If registration fails or email already exists
    """
    try:
        result = await identity.sign_up(request.name, request.email, request.password)
    except ValueError as e:
        raise http_error(400, "RegistrationError", str(e))
    except Exception as e:
        logger.error(f"Registration failed: {e}")
        raise http_error(500, "InternalServerError", "Failed to register user", {"original_error": str(e)})

    user: OwnerSession = result["user"]
    if result["access_token"]:
        set_auth_cookie(response, result["access_token"], result["expires_in"])

    return AuthResponse(
        user=UserResponse(id=user.owner_id, name=user.name, email=user.email),
        expires_in=result["expires_in"],
        email_confirmation_required=result["access_token"] is None
    )


@app.post(
    "/auth/login",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def login(request: UserLoginRequest, response: Response):
    """
    Login with email and password and set the access token in an HttpOnly cookie

    Raises:
        NotAuthenticated: If credentials are invalid
    """
    try:
        result = await identity.sign_in(request.email, request.password)
    except NotAuthenticated:
        raise
    except Exception as e:
        logger.error(f"Login failed: {e}")
        raise http_error(500, "InternalServerError", "Failed to authenticate user", {"original_error": str(e)})

    user: OwnerSession = result["user"]
    set_auth_cookie(response, result["access_token"], result["expires_in"])

    return AuthResponse(
        user=UserResponse(id=user.owner_id, name=user.name, email=user.email),
        expires_in=result["expires_in"]
    )


@app.post("/auth/logout")
async def logout(request: Request, response: Response):
    """Sign out at the provider and clear the authentication cookie"""
    try:
        await identity.sign_out(get_access_token(request))
    except Exception as e:
        logger.error(f"Error signing out: {e}")

    response.delete_cookie(key=settings.auth_cookie_name)
    return {"message": "Successfully logged out"}


@app.get("/user/profile", response_model=UserResponse)
async def get_profile(session: OwnerSession = Depends(require_auth)):
    """Get the signed-in user's profile"""
    return UserResponse(id=session.owner_id, name=session.name, email=session.email)


@app.post(
    "/api/itineraries",
    response_model=CreateItineraryResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def create_itinerary_route(
    title: Optional[str] = Form(None),
    destination: Optional[str] = Form(None),
    trip_type: Optional[str] = Form(None, alias="tripType"),
    activities: Optional[str] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
    session: OwnerSession = Depends(require_auth)
):
    """
    Create an itinerary from a multipart form (PROTECTED - requires authentication)

    Photos are uploaded one by one into the owner's folder. A photo that fails
    to upload is left out and reported in failedUploads; the itinerary is
    still created.

    Returns:
        Success envelope with the new itinerary ID

    Raises:
        HTTPException: 400 on missing fields or malformed activities, 500 otherwise
    """
    uploader = None
    try:
        uploader = get_media_uploader()
        form = ItineraryForm.from_form_data(
            title=title,
            destination=destination,
            trip_type=trip_type,
            activities=activities,
            photos=await read_photos(photos)
        )
        result = await form.submit_create(session, uploader)

        return CreateItineraryResponse(
            message="Itinerary created successfully",
            id=result.id,
            photos=result.photos,
            failed_uploads=result.failed_uploads
        )

    except ValidationError as e:
        raise http_error(400, e.error_type, e.message, e.details)

    except Exception as e:
        logger.error(f"Error creating itinerary: {e}")
        raise http_error(500, "InternalServerError", "Error creating itinerary", {"original_error": str(e)})

    finally:
        if uploader:
            await uploader.close()


@app.get(
    "/itineraries",
    response_model=ItineraryListResponse,
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def list_itineraries_route(session: OwnerSession = Depends(require_auth)):
    """
    Get all itineraries of the authenticated user, newest first

    Raises:
        HTTPException: If retrieval fails
    """
    try:
        itineraries = await list_itineraries(session)
    except Exception as e:
        logger.error(f"Error listing itineraries: {e}")
        raise http_error(500, "InternalServerError", "Failed to retrieve itineraries", {"original_error": str(e)})

    return ItineraryListResponse(itineraries=itineraries, count=len(itineraries))


@app.post(
    "/api/search",
    response_model=ItineraryListResponse,
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def search_itineraries(
    criteria: SearchRequest,
    session: OwnerSession = Depends(require_auth)
):
    """
    Search the authenticated user's itineraries

    The full list is fetched and filtered in memory, since the store cannot
    query inside the activities array.

    Raises:
        HTTPException: If the search fails
    """
    try:
        itineraries = await list_itineraries(session)
    except Exception as e:
        logger.error(f"Search error: {e}")
        raise http_error(500, "InternalServerError", "Search failed", {"original_error": str(e)})

    if not criteria.is_empty():
        itineraries = filter_itineraries(itineraries, criteria)

    return ItineraryListResponse(itineraries=itineraries, count=len(itineraries))


@app.get(
    "/itineraries/{itinerary_id}",
    response_model=Itinerary,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def get_itinerary_route(
    itinerary_id: str,
    session: OwnerSession = Depends(require_auth)
):
    """
    Get a specific itinerary by ID (must belong to authenticated user)

    Raises:
        HTTPException: If not found or retrieval fails
    """
    try:
        itinerary = await get_itinerary(session, itinerary_id)
    except Exception as e:
        logger.error(f"Error fetching itinerary {itinerary_id}: {e}")
        raise http_error(500, "InternalServerError", "Failed to load itinerary", {"original_error": str(e)})

    if not itinerary:
        raise http_error(404, "NotFound", "Itinerary not found", {"itinerary_id": itinerary_id})

    return itinerary


@app.put(
    "/itineraries/{itinerary_id}",
    response_model=CreateItineraryResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def update_itinerary_route(
    itinerary_id: str,
    title: Optional[str] = Form(None),
    destination: Optional[str] = Form(None),
    trip_type: Optional[str] = Form(None, alias="tripType"),
    activities: Optional[str] = Form(None),
    existing_photos: Optional[str] = Form(None, alias="existingPhotos"),
    photos: Optional[List[UploadFile]] = File(None),
    session: OwnerSession = Depends(require_auth)
):
    """
    Replace an itinerary from a multipart form

    Activities and photos are overwritten as whole lists: the stored photos
    become existingPhotos (the URLs the user kept) followed by any new uploads.

    Raises:
        HTTPException: 400 on invalid input, 404 if not found, 500 otherwise
    """
    uploader = None
    try:
        uploader = get_media_uploader()
        form = ItineraryForm.from_form_data(
            title=title,
            destination=destination,
            trip_type=trip_type,
            activities=activities,
            existing_photos=existing_photos,
            photos=await read_photos(photos)
        )
        result = await form.submit_update(session, itinerary_id, uploader)

        return CreateItineraryResponse(
            message="Itinerary updated successfully",
            id=result.id,
            photos=result.photos,
            failed_uploads=result.failed_uploads
        )

    except ValidationError as e:
        raise http_error(400, e.error_type, e.message, e.details)

    except NotFound as e:
        raise http_error(404, e.error_type, e.message, e.details)

    except Exception as e:
        logger.error(f"Error updating itinerary {itinerary_id}: {e}")
        raise http_error(500, "InternalServerError", "Error updating itinerary", {"original_error": str(e)})

    finally:
        if uploader:
            await uploader.close()


@app.post(
    "/itineraries/{itinerary_id}/favorite",
    response_model=FavoriteResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def toggle_favorite_route(
    itinerary_id: str,
    session: OwnerSession = Depends(require_auth)
):
    """
    Flip the favorite flag of an itinerary

    Raises:
        HTTPException: If not found or the update fails
    """
    try:
        favorite = await toggle_favorite(session, itinerary_id)
    except NotFound as e:
        raise http_error(404, e.error_type, e.message, e.details)
    except Exception as e:
        logger.error(f"Error toggling favorite on {itinerary_id}: {e}")
        raise http_error(500, "InternalServerError", "Failed to update favorite", {"original_error": str(e)})

    return FavoriteResponse(itinerary_id=itinerary_id, favorite=favorite)


@app.delete(
    "/itineraries/{itinerary_id}",
    responses={
        200: {"description": "Itinerary deleted successfully"},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def delete_itinerary_route(
    itinerary_id: str,
    session: OwnerSession = Depends(require_auth)
):
    """
    Delete a specific itinerary by ID (must belong to authenticated user)

    Raises:
        HTTPException: If not found or deletion fails
    """
    try:
        deleted = await delete_itinerary(session, itinerary_id)
    except Exception as e:
        logger.error(f"Error deleting itinerary {itinerary_id}: {e}")
        raise http_error(500, "InternalServerError", "Failed to delete itinerary", {"original_error": str(e)})

    if not deleted:
        raise http_error(404, "NotFound", "Itinerary not found", {"itinerary_id": itinerary_id})

    return {
        "message": "Itinerary deleted successfully",
        "itinerary_id": itinerary_id
    }
