# FILE: backend/bizpage/editor/client.py
# PHOENIX PROTOCOL - BUSINESS API CLIENT
# 1. One httpx.AsyncClient per edit session; tests inject httpx.MockTransport.
# 2. The bearer token goes to the API only, never to presigned storage URLs.
# 3. Transport failures -> NetworkError, non-2xx -> RemoteError with the server message.

import httpx
import structlog
from typing import Any, Dict, Mapping, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError as SchemaError

from ..core.config import settings
from ..models.business import (
    BusinessData,
    BusinessPage,
    MediaItem,
    Profile,
    UploadCredential,
)
from .errors import NetworkError, ProfileNotFoundError, RemoteError

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase

def _parse(model: Type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except SchemaError as e:
        raise RemoteError(f"Malformed {model.__name__} in response: {e}") from e

class BusinessApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token
        self._http = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "BusinessApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.warning("editor.request_failed", method=method, url=url, error=str(e))
            raise NetworkError(f"Could not reach {url}: {e}") from e

    async def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        """Calls the API and unwraps the {"message", "data"} envelope."""
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        response = await self._send(method, f"{self.base_url}{path}", headers=headers, **kwargs)
        if response.status_code >= 400:
            raise RemoteError(_error_message(response), response.status_code)
        try:
            body = response.json()
        except ValueError as e:
            raise RemoteError("Malformed response from server", response.status_code) from e
        return body.get("data") if isinstance(body, dict) else body

    # --- PROFILE ---

    async def fetch_profile(self, slug_or_id: str) -> BusinessData:
        try:
            data = await self._call("GET", f"/business/{slug_or_id}")
        except RemoteError as e:
            if e.status_code == 404:
                raise ProfileNotFoundError(e.message, 404) from e
            raise
        return _parse(BusinessData, data)

    async def patch_profile(self, profile_id: str, patch: Mapping[str, Any]) -> Profile:
        data = await self._call("PATCH", f"/business/{profile_id}", json=dict(patch))
        return _parse(Profile, data)

    async def check_slug_availability(self, slug: str) -> bool:
        data = await self._call("GET", "/business/slug/check", params={"value": slug})
        return bool(data)

    # --- ASSETS ---

    async def request_upload_credential(self, content_type: str, category: str) -> UploadCredential:
        data = await self._call(
            "POST", "/assets/upload-url",
            json={"content_type": content_type, "category": category},
        )
        if not isinstance(data, dict) or not data.get("presigned_url"):
            raise RemoteError("Failed to get presigned URL")
        return _parse(UploadCredential, data)

    async def upload_bytes(self, presigned_url: str, blob: bytes, content_type: str) -> None:
        response = await self._send("PUT", presigned_url, content=blob, headers={"Content-Type": content_type})
        if response.status_code >= 400:
            raise RemoteError(_error_message(response), response.status_code)

    # --- MEDIA GALLERY ---

    async def register_media(self, business_id: str, asset_path: str, media_type: str = "image") -> MediaItem:
        data = await self._call(
            "POST", f"/business/{business_id}/media",
            json={"asset_path": asset_path, "type": media_type},
        )
        return _parse(MediaItem, data)

    async def delete_media(self, business_id: str, media_id: str) -> None:
        await self._call("DELETE", f"/business/{business_id}/media/{media_id}")

    # --- LISTINGS ---

    async def list_businesses(
        self,
        category_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        search: str = "",
    ) -> BusinessPage:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if category_id:
            params["category_id"] = category_id
        if search:
            params["search"] = search
        data = await self._call("GET", "/business", params=params)
        return _parse(BusinessPage, data)

    async def list_renewals(self, page: int = 1, limit: int = 10, days: int = 0) -> BusinessPage:
        data = await self._call("GET", "/business/renewal", params={"page": page, "limit": limit, "days": days})
        return _parse(BusinessPage, data)

    async def count_businesses(self) -> int:
        return int(await self._call("GET", "/business/count"))
