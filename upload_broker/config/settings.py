"""
Application Settings.

Centralizes all configuration via .env / environment variables.
Built once at process start and passed explicitly to every component.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

DEFAULT_ALLOWED_CONTENT_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/heic",
)


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # --- App ---
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    allowed_origin: str = "http://localhost:5173"

    # --- Database ---
    database_url: str = "sqlite:///upload_broker.db"

    # --- Object store (S3 / MinIO) ---
    aws_region: str = "ap-northeast-1"
    s3_bucket: str = "app-images"
    s3_endpoint_url: str | None = None
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""

    # --- Presigned URLs ---
    presign_put_ttl_sec: int = 300
    presign_get_ttl_sec: int = 300

    # --- Upload limits ---
    max_upload_bytes: int = 50 * 1024 * 1024
    allowed_content_types: Annotated[tuple[str, ...], NoDecode] = DEFAULT_ALLOWED_CONTENT_TYPES

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("allowed_content_types", mode="before")
    @classmethod
    def _split_content_types(cls, value):
        # ALLOWED_CONTENT_TYPES="image/png, image/gif"
        if isinstance(value, str):
            return tuple(v.strip().lower() for v in value.split(",") if v.strip())
        return value

    @property
    def object_store_enabled(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)


@lru_cache
def get_settings() -> Settings:
    """Settings singleton for process bootstrap."""
    return Settings()
