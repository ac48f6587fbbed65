# FILE: backend/bizpage/services/storage_service.py
# PHOENIX PROTOCOL - PRESIGNED UPLOADS
# 1. The browser/editor writes bytes straight to B2; the API only signs.
# 2. Each credential is scoped to one (content_type, category) pair and one key.

import mimetypes
import uuid
import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException
import logging
from typing import Any

from ..core.config import settings
from ..models.business import UploadCredential

logger = logging.getLogger(__name__)

UPLOAD_CATEGORIES = {"avatar", "banner", "media", "license"}

_EXTENSION_OVERRIDES = {"image/jpeg": ".jpg"}

_s3_client = None

def get_s3_client() -> Any:
    global _s3_client
    if _s3_client:
        return _s3_client

    if not all([settings.B2_KEY_ID, settings.B2_APPLICATION_KEY, settings.B2_ENDPOINT_URL, settings.B2_BUCKET_NAME]):
        logger.critical("!!! CRITICAL: B2 Storage service is not configured.")
        raise HTTPException(status_code=500, detail="Storage service is not configured.")

    _s3_client = boto3.client(
        's3',
        endpoint_url=settings.B2_ENDPOINT_URL,
        aws_access_key_id=settings.B2_KEY_ID,
        aws_secret_access_key=settings.B2_APPLICATION_KEY,
        config=Config(signature_version='s3v4')
    )
    return _s3_client

def reset_s3_client():
    global _s3_client
    _s3_client = None

def build_asset_path(content_type: str, category: str) -> str:
    extension = _EXTENSION_OVERRIDES.get(content_type) or mimetypes.guess_extension(content_type) or ""
    return f"{category}/{uuid.uuid4().hex}{extension}"

def create_upload_credential(content_type: str, category: str) -> UploadCredential:
    if content_type not in settings.ALLOWED_UPLOAD_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported content type: {content_type}")
    if category not in UPLOAD_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unsupported upload category: {category}")

    s3_client = get_s3_client()
    asset_path = build_asset_path(content_type, category)

    try:
        presigned_url = s3_client.generate_presigned_url(
            'put_object',
            Params={
                'Bucket': settings.B2_BUCKET_NAME,
                'Key': asset_path,
                'ContentType': content_type,
            },
            ExpiresIn=settings.UPLOAD_URL_EXPIRES_SECONDS,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"!!! ERROR: Presign failed for {asset_path}, Reason: {e}")
        raise HTTPException(status_code=500, detail="Could not create upload URL.")

    logger.info(f"--- [Storage Service] Issued upload URL for {asset_path} ---")
    return UploadCredential(presigned_url=presigned_url, asset_path=asset_path)
