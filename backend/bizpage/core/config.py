# FILE: backend/bizpage/core/config.py
# PHOENIX PROTOCOL - CONFIGURATION (BUSINESS PAGES)
# 1. Handles comma-separated CORS strings (for Docker/Production).
# 2. Storage + editor client settings live here so both sides share one source.

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Union
from pydantic import field_validator
import json

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # --- API Setup ---
    API_V1_STR: str = "/api/v1"

    # --- Auth (verification only, tokens are issued elsewhere) ---
    SECRET_KEY: str = "changeme"
    ALGORITHM: str = "HS256"

    # --- CORS Configuration ---
    BACKEND_CORS_ORIGINS: List[str] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            # Handle comma-separated string: "http://localhost,https://myapp.com"
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            return json.loads(v)
        return v

    # --- Database ---
    DATABASE_URI: str = "mongodb://localhost:27017/bizpage"

    # --- Object Storage (B2 / S3 compatible) ---
    B2_KEY_ID: str = ""
    B2_APPLICATION_KEY: str = ""
    B2_ENDPOINT_URL: str = ""
    B2_BUCKET_NAME: str = ""
    UPLOAD_URL_EXPIRES_SECONDS: int = 300
    ALLOWED_UPLOAD_TYPES: List[str] = ["image/jpeg", "image/png", "image/webp", "video/mp4"]

    @field_validator("ALLOWED_UPLOAD_TYPES", mode="before")
    @classmethod
    def assemble_upload_types(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            return json.loads(v)
        return v

    # --- Editor Client ---
    API_BASE_URL: str = "http://localhost:8000/api/v1"
    ASSET_BASE_URL: str = "http://localhost:9000/assets"
    SLUG_CHECK_DEBOUNCE_SECONDS: float = 0.5
    HTTP_TIMEOUT_SECONDS: float = 30.0

settings = Settings()
