"""Configuration settings using Pydantic"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Supabase Configuration (document store + identity provider)
    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_key: str = Field(..., alias="SUPABASE_KEY")
    itineraries_table: str = Field(default="itineraries", alias="ITINERARIES_TABLE")

    # Media host: "supabase" (storage bucket) or "cloudinary"
    media_backend: str = Field(default="supabase", alias="MEDIA_BACKEND")
    storage_bucket: str = Field(default="itinerary-photos", alias="STORAGE_BUCKET")
    cloudinary_cloud_name: str = Field(default="", alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str = Field(default="", alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str = Field(default="", alias="CLOUDINARY_API_SECRET")
    media_upload_timeout_seconds: float = Field(default=60.0, alias="MEDIA_UPLOAD_TIMEOUT_SECONDS")

    # Application Settings
    env: str = Field(default="development", alias="ENV")
    log_level: str = Field(default="info", alias="LOG_LEVEL")
    login_path: str = Field(default="/login", alias="LOGIN_PATH")
    auth_cookie_name: str = Field(default="access_token", alias="AUTH_COOKIE_NAME")

    # CORS Settings
    allowed_origins: str = Field(
        default="http://localhost:3000",
        alias="ALLOWED_ORIGINS",
        description="Comma-separated list of allowed origins for CORS"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
