# FILE: backend/bizpage/api/endpoints/assets.py
# PHOENIX PROTOCOL - ASSET UPLOAD URLS
# 1. Hands out single-use presigned PUT URLs; bytes never pass through the API.

from fastapi import APIRouter, Depends, status
from typing import Annotated

from ...models.business import UploadCredentialRequest
from ...services import storage_service
from .dependencies import TokenData, get_current_user

router = APIRouter(tags=["Assets"])

@router.post("/upload-url", status_code=status.HTTP_200_OK)
def create_upload_url(
    request: UploadCredentialRequest,
    current_user: Annotated[TokenData, Depends(get_current_user)],
):
    """Issues a presigned upload URL scoped to one content type and category."""
    credential = storage_service.create_upload_credential(request.content_type, request.category)
    return {"message": "Upload URL generated successfully", "data": credential.model_dump()}
