# FILE: backend/bizpage/core/lifespan.py
# PHOENIX PROTOCOL - LIFESPAN (INDEXING)
# 1. Slug uniqueness is enforced by a unique index, not only by the check endpoint.
# 2. Index failures are logged so the API still boots while Mongo warms up.

from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging
from pymongo import ASCENDING

from .db import _connect_to_mongo, close_mongo_connection

logger = logging.getLogger(__name__)

def create_mongo_indexes():
    try:
        db = _connect_to_mongo()
        logger.info("--- [Lifespan] Optimizing Database Indexes... ---")

        db.profiles.create_index([("slug", ASCENDING)], unique=True)
        db.profiles.create_index([("category", ASCENDING), ("name", ASCENDING)])
        db.profiles.create_index([("expires_at", ASCENDING)])
        db.users.create_index([("phone", ASCENDING)], unique=True)
        db.profile_media.create_index([("profile_id", ASCENDING)])
        db.profile_licenses.create_index([("profile_id", ASCENDING)])

        logger.info("--- [Lifespan] Database Indexes Verified/Created. ---")
    except Exception as e:
        logger.error(f"--- [Lifespan] Index Creation Failed: {e} ---")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("--- [Lifespan] Application startup sequence initiated. ---")
    create_mongo_indexes()

    yield

    close_mongo_connection()
    logger.info("--- [Lifespan] Shutdown complete. ---")
