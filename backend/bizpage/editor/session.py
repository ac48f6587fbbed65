# FILE: backend/bizpage/editor/session.py
# PHOENIX PROTOCOL - EDIT SESSION
# 1. Owns the BusinessData cache for one editor visit and wires every collaborator.
# 2. Text inputs commit on blur; a failed commit keeps the typed draft for retry.

import structlog
from typing import Any, Mapping, Optional

from ..core.config import settings
from ..models.business import BusinessData
from .client import BusinessApiClient
from .errors import EditorError
from .gallery import MediaGallerySync
from .imaging import CropRegion
from .mutator import ProfileMutator
from .notifications import Notifier
from .paths import PathResolver
from .store import BusinessDataStore
from .uploads import UploadJob, UploadOrchestrator

logger = structlog.get_logger(__name__)

_MISSING = object()

class FieldBinding:
    """A blur-committed text input bound to one (possibly dotted) profile field."""

    def __init__(self, session: "EditorSession", field: str):
        self.session = session
        self.field = field
        committed = session.field_value(field)
        self.draft: str = "" if committed is None else str(committed)

    @property
    def committed(self) -> Any:
        return self.session.field_value(self.field)

    @property
    def dirty(self) -> bool:
        committed = self.committed
        return self.draft != ("" if committed is None else str(committed))

    def edit(self, text: str) -> None:
        self.draft = text

    async def blur(self) -> bool:
        if not self.dirty:
            return True
        return await self.session.save_field(self.field, self.draft)

class EditorSession:
    def __init__(
        self,
        client: BusinessApiClient,
        slug: str,
        *,
        notifier: Optional[Notifier] = None,
        resolver: Optional[PathResolver] = None,
    ):
        self.client = client
        self.slug = slug
        self.notifier = notifier or Notifier()
        self.store = BusinessDataStore(resolver)
        self.mutator = ProfileMutator(client, self.store, self.notifier)
        self.uploads = UploadOrchestrator(client, self.mutator, self.notifier)
        self.gallery = MediaGallerySync(client, self.store, self.notifier, self.refresh)
        self.error: Optional[str] = None

    @property
    def data(self) -> Optional[BusinessData]:
        return self.store.data

    @property
    def loaded(self) -> bool:
        return self.store.data is not None

    # --- LOADING ---

    async def load(self) -> BusinessData:
        """Fetches the aggregate and replaces the cache. Raises on failure."""
        data = await self.client.fetch_profile(self.slug)
        self.store.replace(data)
        self.error = None
        logger.info("editor.session_loaded", slug=self.slug, profile_id=data.profile.id, media=len(data.media))
        return data

    async def refresh(self) -> bool:
        try:
            await self.load()
        except EditorError as e:
            logger.error("editor.refresh_failed", slug=self.slug, error=str(e))
            self.error = "Failed to load business data"
            self.notifier.error("Failed to load business data", key="business", error=e)
            return False
        return True

    # --- FIELDS ---

    def field_value(self, field: str) -> Any:
        if self.store.data is None:
            return None
        value: Any = self.store.data.profile.model_dump()
        for segment in field.split("."):
            if not isinstance(value, Mapping):
                return None
            value = value.get(segment, _MISSING)
            if value is _MISSING:
                return None
        return value

    def bind(self, field: str) -> FieldBinding:
        return FieldBinding(self, field)

    async def save_field(self, field: str, value: Any) -> bool:
        return await self.mutator.save_field(field, value)

    async def update_operating_hours(self, hours: Mapping[str, str]) -> bool:
        return await self.mutator.update_operating_hours(hours)

    # --- IMAGES ---

    def select_image(self, field: str, data: bytes, filename: str = "image") -> UploadJob:
        return self.uploads.select(field, data, filename)

    def cancel_image(self, job: UploadJob) -> bool:
        return self.uploads.cancel(job)

    async def confirm_image(self, job: UploadJob, region: Optional[CropRegion] = None) -> bool:
        return await self.uploads.confirm(job, region)

    # --- GALLERY ---

    async def upload_media(self, data: bytes, content_type: str) -> bool:
        return await self.gallery.upload(data, content_type)

    async def delete_media(self, media_id: str) -> bool:
        return await self.gallery.delete(media_id)

    # --- RENDERING HELPERS ---

    @staticmethod
    def asset_url(asset_path: Optional[str]) -> Optional[str]:
        if not asset_path:
            return None
        return f"{settings.ASSET_BASE_URL.rstrip('/')}/{asset_path.lstrip('/')}"
