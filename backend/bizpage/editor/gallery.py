# FILE: backend/bizpage/editor/gallery.py
# PHOENIX PROTOCOL - MEDIA GALLERY SYNC
# 1. The gallery is never patched locally; after any change the whole aggregate is refetched.
# 2. Delete always refetches exactly once, whether or not the delete succeeded.

import structlog
from typing import Awaitable, Callable

from .client import BusinessApiClient
from .errors import EditorError, ValidationError
from .notifications import Notifier
from .store import BusinessDataStore

logger = structlog.get_logger(__name__)

GALLERY_CATEGORY = "media"

class MediaGallerySync:
    def __init__(
        self,
        client: BusinessApiClient,
        store: BusinessDataStore,
        notifier: Notifier,
        refetch: Callable[[], Awaitable[bool]],
    ):
        self.client = client
        self.store = store
        self.notifier = notifier
        self.refetch = refetch

    async def upload(self, data: bytes, content_type: str) -> bool:
        media_type = "video" if content_type.startswith("video/") else "image"
        business_id = self.store.profile_id
        log = logger.bind(business_id=business_id, content_type=content_type)

        try:
            if not business_id:
                raise ValidationError("Business profile is not loaded")
            credential = await self.client.request_upload_credential(content_type, GALLERY_CATEGORY)
            await self.client.upload_bytes(credential.presigned_url, data, content_type)
            item = await self.client.register_media(business_id, credential.asset_path, media_type)
        except EditorError as e:
            log.error("editor.media_upload_failed", error=str(e))
            self.notifier.error("Failed to upload media", key="media", error=e)
            return False

        log.info("editor.media_uploaded", media_id=item.id)
        self.notifier.success("Media uploaded successfully", key="media")
        await self.refetch()
        return True

    async def delete(self, media_id: str) -> bool:
        business_id = self.store.profile_id
        log = logger.bind(business_id=business_id, media_id=media_id)
        deleted = False

        try:
            if not business_id:
                raise ValidationError("Business profile is not loaded")
            await self.client.delete_media(business_id, media_id)
            deleted = True
        except EditorError as e:
            log.error("editor.media_delete_failed", error=str(e))
            self.notifier.error("Failed to delete media item", key="media", error=e)
        finally:
            await self.refetch()

        if deleted:
            log.info("editor.media_deleted")
            self.notifier.success("Media item deleted successfully", key="media")
        return deleted
