# noteshub/core/config.py
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./noteshub.db"
    secret_key: str = "change-me"

    # boto3 falls back to its own credential chain when these are unset
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    aws_s3_bucket_name: str = "study-materials"
    aws_s3_endpoint_url: Optional[str] = None
    public_base_url: Optional[str] = None

    max_upload_bytes: int = 50 * 1024 * 1024
    log_level: str = "INFO"

    # Tell pydantic-settings to load from .env at project root
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore any extra stuff in .env
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
