# FILE: backend/bizpage/core/db.py
# PHOENIX PROTOCOL - LAZY MONGO CONNECTION
# 1. Client is created on first use so importing the app never dials the database.
# 2. get_db() is the single dependency provider; tests override it.

import logging
import pymongo
from pymongo.database import Database
from pymongo.mongo_client import MongoClient
from urllib.parse import urlparse
from typing import Generator, Optional

from .config import settings

logger = logging.getLogger(__name__)

mongo_client: Optional[MongoClient] = None
db_instance: Optional[Database] = None

def _connect_to_mongo() -> Database:
    global mongo_client, db_instance
    if db_instance is not None:
        return db_instance

    db_name = urlparse(settings.DATABASE_URI).path.lstrip('/')
    if not db_name:
        raise ValueError("Database name not found in DATABASE_URI.")

    logger.info("--- [DB] Connecting to MongoDB database '%s'... ---", db_name)
    mongo_client = pymongo.MongoClient(settings.DATABASE_URI, serverSelectionTimeoutMS=5000)
    db_instance = mongo_client[db_name]
    return db_instance

# --- Dependency Providers ---
def get_db() -> Generator[Database, None, None]:
    yield _connect_to_mongo()

# --- Shutdown Logic ---
def close_mongo_connection():
    global mongo_client, db_instance
    if mongo_client:
        mongo_client.close()
        logger.info("--- [DB] MongoDB connection closed. ---")
    mongo_client = None
    db_instance = None
