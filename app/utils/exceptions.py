"""Domain errors raised by the repository, media host and session guard"""


class ItineraryError(Exception):
    """Base error carrying a user-facing message and optional details"""
    error_type = "InternalServerError"

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotAuthenticated(ItineraryError):
    """No active owner session"""
    error_type = "Unauthorized"


class NotFound(ItineraryError):
    """Referenced itinerary does not exist for this owner"""
    error_type = "NotFound"


class UploadError(ItineraryError):
    """A single photo could not be stored on the media host"""
    error_type = "UploadError"

    def __init__(self, filename: str, message: str):
        self.filename = filename
        super().__init__(message, {"filename": filename})
