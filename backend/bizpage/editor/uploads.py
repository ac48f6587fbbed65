# FILE: backend/bizpage/editor/uploads.py
# PHOENIX PROTOCOL - AVATAR / BANNER UPLOAD STATE MACHINE
# 1. select -> crop -> credential -> PUT bytes -> PATCH profile -> done.
# 2. The PATCH payload is the asset path the credential named, never a guessed one.
# 3. One upload per field at a time: confirmations for the same field queue on a lock.
# 4. Any failure commits nothing and drops the job back to IDLE.

import asyncio
import structlog
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..models.business import UploadCredential
from .client import BusinessApiClient
from .errors import EditorError, ValidationError
from .imaging import (
    CROPPED_CONTENT_TYPE,
    CropRegion,
    aspect_for,
    create_preview,
    crop_to_jpeg,
    default_crop,
    fit_region,
    image_size,
    release_preview,
)
from .mutator import ProfileMutator
from .notifications import Notifier

logger = structlog.get_logger(__name__)

class UploadState(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    CROPPING = "cropping"
    REQUESTING_CREDENTIAL = "requesting-credential"
    UPLOADING = "uploading"
    REGISTERING = "registering"
    DONE = "done"

@dataclass(eq=False)
class UploadJob:
    field: str
    source: bytes
    filename: str
    size: Tuple[int, int]
    aspect: Fraction
    crop: CropRegion
    preview: Optional[Path] = None
    state: UploadState = UploadState.IDLE
    blob: Optional[bytes] = None
    credential: Optional[UploadCredential] = None
    asset_path: Optional[str] = None
    error: Optional[EditorError] = None
    submitted: bool = False
    transitions: List[UploadState] = field(default_factory=list)

    def adjust(self, region: CropRegion) -> CropRegion:
        if self.state is not UploadState.CROPPING or self.submitted:
            raise ValidationError("Crop can only be adjusted while cropping")
        self.crop = fit_region(region, self.aspect, self.size)
        return self.crop

    def move(self, state: UploadState) -> None:
        logger.debug("editor.upload_state", field=self.field, old=self.state.value, new=state.value)
        self.state = state
        self.transitions.append(state)

class UploadOrchestrator:
    def __init__(self, client: BusinessApiClient, mutator: ProfileMutator, notifier: Notifier):
        self.client = client
        self.mutator = mutator
        self.notifier = notifier
        self._locks: Dict[str, asyncio.Lock] = {}
        self._cropping: Dict[str, UploadJob] = {}

    def active_job(self, field_name: str) -> Optional[UploadJob]:
        return self._cropping.get(field_name)

    def select(self, field_name: str, data: bytes, filename: str = "image") -> UploadJob:
        """Starts a job for `field_name`. A job still being cropped for that field is superseded."""
        aspect = aspect_for(field_name)
        size = image_size(data)

        previous = self._cropping.get(field_name)
        if previous is not None:
            self.cancel(previous)

        job = UploadJob(
            field=field_name,
            source=data,
            filename=filename,
            size=size,
            aspect=aspect,
            crop=default_crop(size, aspect),
        )
        job.move(UploadState.SELECTING)
        job.preview = create_preview(data, filename)
        job.move(UploadState.CROPPING)
        self._cropping[field_name] = job
        return job

    def cancel(self, job: UploadJob) -> bool:
        """Abandons a job that has not been submitted yet. No side effects beyond the preview."""
        if job.state is not UploadState.CROPPING or job.submitted:
            return False
        if self._cropping.get(job.field) is job:
            del self._cropping[job.field]
        release_preview(job.preview)
        job.preview = None
        job.move(UploadState.IDLE)
        return True

    async def confirm(self, job: UploadJob, region: Optional[CropRegion] = None) -> bool:
        log = logger.bind(field=job.field)
        if job.state is not UploadState.CROPPING or job.submitted:
            # Already running, finished or abandoned: leave that job alone.
            log.warning("editor.upload_confirm_ignored", state=job.state.value, submitted=job.submitted)
            return False

        try:
            if not self.mutator.store.profile_id:
                raise ValidationError("Business profile is not loaded")
            if region is not None:
                job.adjust(region)

            job.submitted = True
            if self._cropping.get(job.field) is job:
                del self._cropping[job.field]
            job.blob = crop_to_jpeg(job.source, job.crop)

            lock = self._locks.setdefault(job.field, asyncio.Lock())
            async with lock:
                await self._run(job)
        except EditorError as e:
            log.error("editor.upload_failed", state=job.state.value, error=str(e))
            job.error = e
            if job.state is not UploadState.IDLE:
                job.move(UploadState.IDLE)
            self.notifier.error("Failed to update image", key=job.field, error=e)
            return False
        finally:
            release_preview(job.preview)
            job.preview = None

        log.info("editor.upload_done", asset_path=job.asset_path)
        self.notifier.success("Image updated successfully", key=job.field)
        return True

    async def _run(self, job: UploadJob) -> None:
        job.move(UploadState.REQUESTING_CREDENTIAL)
        credential = await self.client.request_upload_credential(CROPPED_CONTENT_TYPE, job.field)
        job.credential = credential

        job.move(UploadState.UPLOADING)
        await self.client.upload_bytes(credential.presigned_url, job.blob, CROPPED_CONTENT_TYPE)

        job.move(UploadState.REGISTERING)
        await self.mutator.commit(job.field, credential.asset_path)

        job.asset_path = credential.asset_path
        job.move(UploadState.DONE)
