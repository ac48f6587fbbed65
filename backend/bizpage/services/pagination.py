# FILE: backend/bizpage/services/pagination.py
# PHOENIX PROTOCOL - PAGE META
# 1. Links are relative and always point back at the listing route that produced them.

import math
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from ..models.business import PageMeta

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

def coerce_page_params(page: Optional[str], limit: Optional[str]) -> tuple[int, int]:
    """Non-numeric or non-positive values fall back to the defaults."""
    return _positive_int(page, DEFAULT_PAGE), _positive_int(limit, DEFAULT_LIMIT)

def _positive_int(value: Optional[str], default: int) -> int:
    try:
        number = int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default

def build_page_meta(
    path: str,
    page: int,
    limit: int,
    total_count: int,
    returned: int,
    params: Optional[Dict[str, Any]] = None,
) -> PageMeta:
    params = dict(params or {})
    extra = {k: v for k, v in params.items() if k not in ("page", "limit") and v not in (None, "")}

    def link(target_page: int) -> str:
        return f"{path}?{urlencode({**extra, 'page': target_page, 'limit': limit})}"

    return PageMeta(
        params={**params, "page": page, "limit": limit},
        total_count=total_count,
        total_pages=math.ceil(total_count / limit) if limit else 0,
        previous=link(page - 1) if page > 1 else None,
        next=link(page + 1) if returned == limit else None,
    )
