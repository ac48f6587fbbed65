# FILE: backend/bizpage/editor/store.py
# PHOENIX PROTOCOL - EDIT SESSION CACHE
# 1. Holds the one BusinessData aggregate owned by an edit session.
# 2. Only two writers: replace() after a fetch, fold() after a confirmed patch.

from typing import Any, Dict, Mapping, Optional
from pydantic import ValidationError as SchemaError

from ..models.business import BusinessData, Profile
from .errors import ValidationError
from .paths import PathResolver, default_resolver

class BusinessDataStore:
    def __init__(self, resolver: Optional[PathResolver] = None):
        self.resolver = resolver or default_resolver
        self._data: Optional[BusinessData] = None

    @property
    def data(self) -> Optional[BusinessData]:
        return self._data

    @property
    def profile_id(self) -> Optional[str]:
        return self._data.profile.id if self._data else None

    def replace(self, data: BusinessData) -> None:
        self._data = data

    def clear(self) -> None:
        self._data = None

    def snapshot(self) -> Optional[BusinessData]:
        return self._data.model_copy(deep=True) if self._data else None

    def profile_fields(self) -> Dict[str, Any]:
        if self._data is None:
            raise ValidationError("Business profile is not loaded")
        return self._data.profile.model_dump()

    def resolve(self, path: str, value: Any) -> Dict[str, Any]:
        return self.resolver.resolve(path, value, self.profile_fields())

    def merge_at(self, path: str, value: Any) -> Dict[str, Any]:
        patch = self.resolve(path, value)
        self.fold(patch)
        return patch

    def fold(self, patch: Mapping[str, Any]) -> Profile:
        merged = self.resolver.merge(self.profile_fields(), patch)
        try:
            profile = Profile.model_validate(merged)
        except SchemaError as e:
            raise ValidationError(f"Rejected profile update: {e}") from e

        self._data = self._data.model_copy(update={"profile": profile})
        return profile
