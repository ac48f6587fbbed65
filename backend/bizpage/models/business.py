# FILE: backend/bizpage/models/business.py
# PHOENIX PROTOCOL - BUSINESS ENTITY (SHARED SERVER/EDITOR)
# 1. Socials is a closed vocabulary: unknown platform keys fail validation.
# 2. '_id' is a plain string so the editor and the API speak the same ids.

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, List, Literal, Any
from datetime import datetime

SOCIAL_PLATFORMS = (
    "website",
    "facebook",
    "instagram",
    "twitter",
    "linkedin",
    "youtube",
    "reddit",
    "tiktok",
    "pinterest",
    "behance",
    "dribbble",
    "github",
    "medium",
)

SLUG_PATTERN = r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$"

WEEK_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

class Socials(BaseModel):
    model_config = ConfigDict(extra="forbid")

    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    youtube: Optional[str] = None
    reddit: Optional[str] = None
    tiktok: Optional[str] = None
    pinterest: Optional[str] = None
    behance: Optional[str] = None
    dribbble: Optional[str] = None
    github: Optional[str] = None
    medium: Optional[str] = None

class ProfileBase(BaseModel):
    name: str = ""
    description: str = ""
    email: str = ""
    phone: Optional[str] = None
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    gstin: str = ""
    type: str = ""
    additional_services: str = ""
    operating_hours: Dict[str, str] = Field(default_factory=dict)
    socials: Socials = Field(default_factory=Socials)
    avatar: Optional[str] = None
    banner: Optional[str] = None

class Profile(ProfileBase):
    id: str = Field(alias="_id")
    slug: str
    user_id: Optional[str] = None
    status: int = 1
    category: Optional[str] = None
    sub_category: Optional[str] = None
    sub_category_option: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

class ProfileCreate(ProfileBase):
    slug: str = Field(..., min_length=3, pattern=SLUG_PATTERN)
    category: Optional[str] = None
    sub_category: Optional[str] = None
    sub_category_option: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    expires_at: Optional[datetime] = None

class ProfileUpdate(BaseModel):
    """PATCH body. Only the keys the editor sends are applied."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    gstin: Optional[str] = None
    type: Optional[str] = None
    additional_services: Optional[str] = None
    operating_hours: Optional[Dict[str, str]] = None
    socials: Optional[Socials] = None
    avatar: Optional[str] = None
    banner: Optional[str] = None

class UserSummary(BaseModel):
    name: str = ""
    phone: str = ""

class User(UserSummary):
    id: str = Field(alias="_id")
    created_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

class MediaItem(BaseModel):
    id: str = Field(alias="_id")
    url: str
    type: Literal["image", "video"] = "image"

    model_config = ConfigDict(populate_by_name=True)

class MediaCreate(BaseModel):
    asset_path: str = Field(..., min_length=1)
    type: Literal["image", "video"] = "image"

class License(BaseModel):
    name: str
    number: str
    url: Optional[str] = None
    description: str = ""

class Payment(BaseModel):
    payment_status: str = "pending"
    amount: Optional[float] = None
    currency: str = "INR"
    reference: Optional[str] = None

class BusinessCreate(BaseModel):
    user: UserSummary
    profile: ProfileCreate
    license: List[License] = Field(default_factory=list)
    payment: Optional[Payment] = None

class BusinessData(BaseModel):
    """The editor's working aggregate, fetched wholesale by slug."""
    profile: Profile
    user: UserSummary = Field(default_factory=UserSummary)
    media: List[MediaItem] = Field(default_factory=list)
    licenses: List[License] = Field(default_factory=list)
    category: Optional[str] = None
    sub_category: Optional[str] = None
    sub_category_option: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

class UploadCredential(BaseModel):
    presigned_url: str
    asset_path: str

class UploadCredentialRequest(BaseModel):
    """Category and content type are checked against the allowed lists by the storage service."""
    content_type: str
    category: str

class PageMeta(BaseModel):
    params: Dict[str, Any] = Field(default_factory=dict)
    total_count: int
    total_pages: int
    previous: Optional[str] = None
    next: Optional[str] = None

class BusinessPage(BaseModel):
    profiles: List[Profile] = Field(default_factory=list)
    meta: PageMeta
