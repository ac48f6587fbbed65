# FILE: backend/bizpage/editor/mutator.py
# PHOENIX PROTOCOL - FIELD-BY-FIELD PROFILE WRITES
# 1. Each field commits on its own PATCH; there is no bulk save.
# 2. The cache only advances after the server confirms the write.
# 3. save_field() is the boundary: errors become notifications, never crashes.

import structlog
from typing import Any, Dict, Mapping, Optional

from ..models.business import WEEK_DAYS
from .client import BusinessApiClient
from .errors import EditorError, ValidationError
from .notifications import Notifier
from .store import BusinessDataStore

logger = structlog.get_logger(__name__)

class ProfileMutator:
    def __init__(self, client: BusinessApiClient, store: BusinessDataStore, notifier: Notifier):
        self.client = client
        self.store = store
        self.notifier = notifier

    async def apply_patch(self, profile_id: Optional[str], patch: Mapping[str, Any]) -> Dict[str, Any]:
        """Sends `patch` and returns it with the server-confirmed values filled in."""
        if not profile_id:
            raise ValidationError("Business profile is not loaded")
        if not patch:
            raise ValidationError("No values to update")

        updated = await self.client.patch_profile(profile_id, patch)
        confirmed = updated.model_dump()
        return {key: confirmed.get(key, value) for key, value in patch.items()}

    async def commit(self, field: str, value: Any) -> Dict[str, Any]:
        """resolve -> PATCH -> fold. Raises EditorError and leaves the cache untouched on failure."""
        profile_id = self.store.profile_id
        patch = self.store.resolve(field, value)

        log = logger.bind(profile_id=profile_id, field=field)
        log.info("editor.patch_sending", keys=sorted(patch))

        confirmed = await self.apply_patch(profile_id, patch)
        if self.store.profile_id != profile_id:
            # The session was reloaded for another profile while the PATCH was in flight.
            log.warning("editor.patch_discarded")
            return confirmed

        self.store.fold(confirmed)
        log.info("editor.patch_confirmed")
        return confirmed

    async def save_field(self, field: str, value: Any) -> bool:
        try:
            await self.commit(field, value)
        except EditorError as e:
            logger.error("editor.field_save_failed", field=field, error=str(e))
            self.notifier.error(f"Failed to update {field}", key=field, error=e)
            return False

        self.notifier.success(f"{field} updated successfully", key=field)
        return True

    async def update_operating_hours(self, hours: Mapping[str, str]) -> bool:
        """Commits the whole weekly schedule as one flat patch."""
        unknown = [day for day in hours if day not in WEEK_DAYS]
        if unknown:
            self.notifier.error("Failed to update operating hours", key="operating_hours",
                                error=ValidationError(f"Unknown day(s): {', '.join(unknown)}"))
            return False

        try:
            await self.commit("operating_hours", dict(hours))
        except EditorError as e:
            logger.error("editor.field_save_failed", field="operating_hours", error=str(e))
            self.notifier.error("Failed to update operating hours", key="operating_hours", error=e)
            return False

        self.notifier.success("Operating hours updated successfully", key="operating_hours")
        return True
