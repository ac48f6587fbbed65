# FILE: backend/bizpage/api/endpoints/business.py
# PHOENIX PROTOCOL - BUSINESS ENDPOINTS
# 1. Every response is wrapped as {"message", "data"} for the editor client.
# 2. Static routes (/renewal, /count, /slug/check) are declared before /{slug}.
# 3. PATCH bodies are validated manually so bad payloads map to 400, not 422.

from fastapi import APIRouter, Depends, HTTPException, status, Query, Body
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from typing import Annotated, Any, Dict, Optional
from pydantic import ValidationError
import logging

from ...core.config import settings
from ...models.business import BusinessCreate, MediaCreate, ProfileUpdate
from ...services.business_service import BusinessService
from ...services.pagination import build_page_meta, coerce_page_params
from .dependencies import TokenData, get_business_service, get_current_user

router = APIRouter(tags=["Business"])
logger = logging.getLogger(__name__)

LISTING_PATH = f"{settings.API_V1_STR}/business"

def _reply(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    body: Dict[str, Any] = {"message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(content=body, status_code=status_code)

def _server_error(e: Exception) -> JSONResponse:
    return JSONResponse(
        content={"message": "Internal Server Error", "error": str(e)},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

@router.post("", status_code=status.HTTP_201_CREATED)
def create_business(
    payload: BusinessCreate,
    service: BusinessService = Depends(get_business_service),
):
    try:
        result = service.create_business(payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Business creation failed: {e}")
        return _server_error(e)

    return _reply("Business created successfully", {
        "user": result["user"].model_dump(mode="json"),
        "profile": result["profile"].model_dump(mode="json"),
        "license": [item.model_dump(mode="json") for item in result["license"]] if result["license"] else None,
        "payment": jsonable_encoder(result["payment"]),
    }, status.HTTP_201_CREATED)

@router.get("/renewal")
def get_renewal_businesses(
    service: BusinessService = Depends(get_business_service),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    days: Optional[str] = None,
):
    try:
        page_no, page_size = coerce_page_params(page, limit)
        try:
            window = int(days) if days is not None else 0
        except ValueError:
            window = 0

        result = service.list_renewals(page_no, page_size, window)
        if not result:
            return _reply("No businesses found", status_code=status.HTTP_404_NOT_FOUND)

        profiles, count = result
        meta = build_page_meta(f"{LISTING_PATH}/renewal", page_no, page_size, count, len(profiles), {"days": window})
        return _reply("Businesses fetched successfully", {
            "profiles": [p.model_dump(mode="json") for p in profiles],
            "meta": meta.model_dump(mode="json"),
        })
    except Exception as e:
        logger.error(f"Renewal listing failed: {e}")
        return _server_error(e)

@router.get("/count")
def get_business_count(service: BusinessService = Depends(get_business_service)):
    try:
        return _reply("Businesses count fetched successfully", service.count_profiles())
    except Exception as e:
        logger.error(f"Business count failed: {e}")
        return _server_error(e)

@router.get("/slug/check")
def check_business_slug(
    service: BusinessService = Depends(get_business_service),
    value: str = Query(""),
):
    try:
        if service.slug_exists(value):
            return _reply("This slug is already in use. Try another one.", False)
        return _reply("This slug is available for use. You can proceed.", True)
    except Exception as e:
        logger.error(f"Slug check failed: {e}")
        return _server_error(e)

@router.get("/{slug}")
def get_business_by_slug(slug: str, service: BusinessService = Depends(get_business_service)):
    try:
        business = service.get_business_by_slug(slug)
        if not business:
            return _reply("Business does not exist or is expired", status_code=status.HTTP_404_NOT_FOUND)
        return _reply("Business fetched successfully", business.model_dump(mode="json"))
    except Exception as e:
        logger.error(f"Business fetch failed for '{slug}': {e}")
        return _server_error(e)

@router.get("")
def get_businesses_by_category(
    service: BusinessService = Depends(get_business_service),
    category_id: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: str = "",
):
    try:
        page_no, page_size = coerce_page_params(page, limit)
        result = service.list_by_category(category_id, page_no, page_size, search)
        if not result:
            return _reply("No businesses found", status_code=status.HTTP_404_NOT_FOUND)

        profiles, count = result
        meta = build_page_meta(
            LISTING_PATH, page_no, page_size, count, len(profiles),
            {"category_id": category_id, "search": search},
        )
        return _reply("Businesses fetched successfully", {
            "profiles": [p.model_dump(mode="json") for p in profiles],
            "meta": meta.model_dump(mode="json"),
        })
    except Exception as e:
        logger.error(f"Business listing failed: {e}")
        return _server_error(e)

@router.patch("/{profile_id}")
def update_business(
    profile_id: str,
    current_user: Annotated[TokenData, Depends(get_current_user)],
    data: Dict[str, Any] = Body(...),
    service: BusinessService = Depends(get_business_service),
):
    try:
        update = ProfileUpdate.model_validate(data)
    except ValidationError as e:
        return JSONResponse(
            content={"message": "Business update failed", "error": str(e)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        profile = service.update_profile(profile_id, update)
        if not profile:
            return _reply("Business update failed", status_code=status.HTTP_400_BAD_REQUEST)
        return _reply("Business updated successfully", profile.model_dump(mode="json"))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Business update failed for {profile_id}: {e}")
        return _server_error(e)

@router.post("/{profile_id}/media", status_code=status.HTTP_201_CREATED)
def add_business_media(
    profile_id: str,
    media: MediaCreate,
    current_user: Annotated[TokenData, Depends(get_current_user)],
    service: BusinessService = Depends(get_business_service),
):
    try:
        item = service.add_media(profile_id, media)
        if not item:
            return _reply("Business does not exist", status_code=status.HTTP_404_NOT_FOUND)
        return _reply("Media added successfully", item.model_dump(mode="json"), status.HTTP_201_CREATED)
    except Exception as e:
        logger.error(f"Media registration failed for {profile_id}: {e}")
        return _server_error(e)

@router.delete("/{profile_id}/media/{media_id}")
def delete_business_media(
    profile_id: str,
    media_id: str,
    current_user: Annotated[TokenData, Depends(get_current_user)],
    service: BusinessService = Depends(get_business_service),
):
    try:
        if not service.delete_media(profile_id, media_id):
            return _reply("Media item not found", status_code=status.HTTP_404_NOT_FOUND)
        return _reply("Media deleted successfully", True)
    except Exception as e:
        logger.error(f"Media deletion failed for {profile_id}/{media_id}: {e}")
        return _server_error(e)
