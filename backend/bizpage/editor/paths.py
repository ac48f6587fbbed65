# FILE: backend/bizpage/editor/paths.py
# PHOENIX PROTOCOL - DOTTED FIELD PATHS
# 1. "socials.facebook" becomes {"socials": {...current socials, "facebook": value}}.
# 2. Nested groups are a registry, so a new group is a table entry, not a new branch.
# 3. The same merge folds confirmed patches into the local cache.

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Sequence

from ..models.business import SOCIAL_PLATFORMS
from .errors import ValidationError

@dataclass(frozen=True)
class NestedGroup:
    """A nested mapping that dotted paths may address.

    `keys` is the allowed vocabulary (None accepts any key); `children` holds
    groups nested one level further down.
    """
    keys: Optional[FrozenSet[str]] = None
    children: Mapping[str, "NestedGroup"] = field(default_factory=dict)

    def check(self, name: str, key: str) -> None:
        if not key:
            raise ValidationError(f"Empty key in '{name}' path")
        if self.keys is not None and key not in self.keys:
            raise ValidationError(f"Unknown {name} key: {key}")

DEFAULT_GROUPS: Dict[str, NestedGroup] = {
    "socials": NestedGroup(keys=frozenset(SOCIAL_PLATFORMS)),
}

class PathResolver:
    def __init__(self, groups: Optional[Mapping[str, NestedGroup]] = None):
        self.groups = dict(DEFAULT_GROUPS if groups is None else groups)

    def resolve(self, field_name: str, value: Any, current: Mapping[str, Any]) -> Dict[str, Any]:
        """Builds the minimal patch for `field_name` against the `current` profile."""
        if not field_name or not field_name.strip():
            raise ValidationError("No values to update")

        patch = self._build(field_name.split("."), value, current, self.groups)
        if patch is None:
            patch = {field_name: value}
        if not patch:
            raise ValidationError("No values to update")
        return patch

    def _build(
        self,
        segments: Sequence[str],
        value: Any,
        current: Mapping[str, Any],
        groups: Mapping[str, NestedGroup],
    ) -> Optional[Dict[str, Any]]:
        head, rest = segments[0], segments[1:]
        if not rest:
            return {head: value}

        group = groups.get(head)
        if group is None:
            return None

        group.check(head, rest[0])
        existing = dict(current.get(head) or {})
        child = self._build(rest, value, existing, group.children)
        if child is None:
            raise ValidationError(f"Path '{'.'.join(segments)}' is nested too deep")
        return {head: {**existing, **child}}

    def merge(self, target: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
        """Folds `patch` into a copy of `target`, shallow-merging registered groups."""
        return _merge(target, patch, self.groups)

def _merge(target: Mapping[str, Any], patch: Mapping[str, Any], groups: Mapping[str, NestedGroup]) -> Dict[str, Any]:
    merged = dict(target)
    for key, value in patch.items():
        group = groups.get(key)
        if group is not None and isinstance(value, Mapping):
            for nested_key in value:
                group.check(key, nested_key)
            merged[key] = _merge(merged.get(key) or {}, value, group.children)
        else:
            merged[key] = value
    return merged

default_resolver = PathResolver()
