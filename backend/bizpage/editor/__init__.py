"""Field-by-field business profile editor: patches, uploads, slug checks and cache sync."""

from .client import BusinessApiClient
from .errors import EditorError, NetworkError, ProfileNotFoundError, RemoteError, ValidationError
from .gallery import MediaGallerySync
from .imaging import CropRegion
from .mutator import ProfileMutator
from .notifications import Notification, Notifier
from .paths import NestedGroup, PathResolver
from .session import EditorSession, FieldBinding
from .slug import SlugCheckState, SlugValidator, sanitize_slug
from .store import BusinessDataStore
from .timers import AsyncioScheduler, Debouncer, ManualScheduler
from .uploads import UploadJob, UploadOrchestrator, UploadState

__all__ = [
    "AsyncioScheduler",
    "BusinessApiClient",
    "BusinessDataStore",
    "CropRegion",
    "Debouncer",
    "EditorError",
    "EditorSession",
    "FieldBinding",
    "ManualScheduler",
    "MediaGallerySync",
    "NestedGroup",
    "NetworkError",
    "Notification",
    "Notifier",
    "PathResolver",
    "ProfileMutator",
    "ProfileNotFoundError",
    "RemoteError",
    "SlugCheckState",
    "SlugValidator",
    "UploadJob",
    "UploadOrchestrator",
    "UploadState",
    "ValidationError",
    "sanitize_slug",
]
