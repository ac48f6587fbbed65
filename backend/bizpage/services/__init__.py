# FILE: backend/bizpage/services/__init__.py
# PHOENIX PROTOCOL - SERVICE REGISTRY

from . import (
    business_service,
    pagination,
    storage_service,
)
