# FILE: backend/bizpage/services/business_service.py
# PHOENIX PROTOCOL - BUSINESS SERVICE (PROFILE STORE)
# 1. Profiles, users, media, licenses and payments live in separate collections.
# 2. Reads assemble the editor aggregate (BusinessData) in one call.
# 3. Datetimes are stored as naive UTC, which is what pymongo hands back.

import re
import uuid
import structlog
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
from fastapi import HTTPException

from ..models.business import (
    BusinessCreate,
    BusinessData,
    License,
    MediaCreate,
    MediaItem,
    Profile,
    ProfileUpdate,
    User,
    UserSummary,
)

logger = structlog.get_logger(__name__)

def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

def _new_id() -> str:
    return uuid.uuid4().hex

class BusinessService:
    def __init__(self, db: Database):
        self.db = db

    # --- USERS ---

    def get_or_create_user(self, data: UserSummary) -> User:
        """Owners are keyed by phone number."""
        user = self.db.users.find_one({"phone": data.phone})
        if user:
            return User(**user)

        new_user = {
            "_id": _new_id(),
            "name": data.name,
            "phone": data.phone,
            "created_at": _utcnow(),
        }
        self.db.users.insert_one(new_user)
        logger.info("business.user_created", user_id=new_user["_id"])
        return User(**new_user)

    # --- PROFILES ---

    def slug_exists(self, slug: str) -> bool:
        return self.db.profiles.find_one({"slug": slug}, {"_id": 1}) is not None

    def create_business(self, payload: BusinessCreate) -> Dict[str, Any]:
        if self.slug_exists(payload.profile.slug):
            raise HTTPException(status_code=400, detail="This slug is already in use. Try another one.")

        user = self.get_or_create_user(payload.user)
        paid = payload.payment is not None and payload.payment.payment_status == "success"

        now = _utcnow()
        profile_doc = payload.profile.model_dump()
        profile_doc.update({
            "_id": _new_id(),
            "user_id": user.id,
            "status": 1 if paid else 0,
            "expires_at": _as_naive_utc(payload.profile.expires_at),
            "created_at": now,
            "updated_at": now,
        })
        try:
            self.db.profiles.insert_one(profile_doc)
        except DuplicateKeyError:
            logger.warning("business.slug_conflict", slug=payload.profile.slug)
            raise HTTPException(status_code=400, detail="This slug is already in use. Try another one.")
        profile = Profile(**profile_doc)
        logger.info("business.profile_created", profile_id=profile.id, slug=profile.slug, status=profile.status)

        licenses: Optional[List[License]] = None
        if payload.license:
            self.db.profile_licenses.insert_many([
                {"_id": _new_id(), "profile_id": profile.id, **item.model_dump()}
                for item in payload.license
            ])
            licenses = list(payload.license)

        payment: Optional[Dict[str, Any]] = None
        if payload.payment:
            payment = {"_id": _new_id(), "profile_id": profile.id, "created_at": now, **payload.payment.model_dump()}
            self.db.profile_payments.insert_one(payment)
            payment["id"] = payment.pop("_id")

        return {"user": user, "profile": profile, "license": licenses, "payment": payment}

    def get_business_by_slug(self, slug: str) -> Optional[BusinessData]:
        """Returns None when the slug is unknown or the listing has expired."""
        doc = self.db.profiles.find_one({
            "slug": slug,
            "$or": [{"expires_at": None}, {"expires_at": {"$gt": _utcnow()}}],
        })
        if not doc:
            return None

        profile = Profile(**doc)
        user_doc = self.db.users.find_one({"_id": profile.user_id}) if profile.user_id else None
        media = [MediaItem(**m) for m in self.db.profile_media.find({"profile_id": profile.id}).sort("created_at", ASCENDING)]
        licenses = [License(**item) for item in self.db.profile_licenses.find({"profile_id": profile.id})]

        return BusinessData(
            profile=profile,
            user=UserSummary(name=user_doc.get("name", ""), phone=user_doc.get("phone", "")) if user_doc else UserSummary(),
            media=media,
            licenses=licenses,
            category=profile.category,
            sub_category=profile.sub_category,
            sub_category_option=profile.sub_category_option,
            tags=profile.tags,
        )

    def _paginate(self, query: Dict[str, Any], sort_key: str, page: int, limit: int) -> Optional[Tuple[List[Profile], int]]:
        count = self.db.profiles.count_documents(query)
        if count == 0:
            return None
        cursor = self.db.profiles.find(query).sort(sort_key, ASCENDING).skip((page - 1) * limit).limit(limit)
        return [Profile(**doc) for doc in cursor], count

    def list_by_category(
        self, category_id: Optional[str], page: int, limit: int, search: str = ""
    ) -> Optional[Tuple[List[Profile], int]]:
        query: Dict[str, Any] = {}
        if category_id:
            query["category"] = category_id
        if search:
            query["name"] = {"$regex": re.escape(search), "$options": "i"}
        return self._paginate(query, "name", page, limit)

    def list_renewals(self, page: int, limit: int, days: int) -> Optional[Tuple[List[Profile], int]]:
        """Profiles whose listing expires within `days` days (0 means already expired)."""
        cutoff = _utcnow() + timedelta(days=days)
        query = {"expires_at": {"$ne": None, "$lte": cutoff}}
        return self._paginate(query, "expires_at", page, limit)

    def count_profiles(self) -> int:
        return self.db.profiles.count_documents({})

    def update_profile(self, profile_id: str, data: ProfileUpdate) -> Optional[Profile]:
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No data to update")

        update_data["updated_at"] = _utcnow()
        result = self.db.profiles.find_one_and_update(
            {"_id": profile_id},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            return None

        logger.info("business.profile_updated", profile_id=profile_id, fields=sorted(k for k in update_data if k != "updated_at"))
        return Profile(**result)

    # --- MEDIA GALLERY ---

    def add_media(self, profile_id: str, data: MediaCreate) -> Optional[MediaItem]:
        if self.db.profiles.find_one({"_id": profile_id}, {"_id": 1}) is None:
            return None

        doc = {
            "_id": _new_id(),
            "profile_id": profile_id,
            "url": data.asset_path,
            "type": data.type,
            "created_at": _utcnow(),
        }
        self.db.profile_media.insert_one(doc)
        logger.info("business.media_added", profile_id=profile_id, media_id=doc["_id"])
        return MediaItem(**doc)

    def delete_media(self, profile_id: str, media_id: str) -> bool:
        result = self.db.profile_media.delete_one({"_id": media_id, "profile_id": profile_id})
        if result.deleted_count == 0:
            return False
        logger.info("business.media_deleted", profile_id=profile_id, media_id=media_id)
        return True
