"""Shared fixtures: a fake business API behind httpx.MockTransport, images, and a mongomock-backed app."""
import copy
import io
import itertools
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from PIL import Image

from bizpage.core.config import settings
from bizpage.core.db import get_db
from bizpage.editor.client import BusinessApiClient
from bizpage.main import app

API_BASE = "https://api.test/api/v1"
STORAGE_HOST = "storage.test"


def make_business(**profile_overrides: Any) -> Dict[str, Any]:
    profile = {
        "id": "prof-1",
        "slug": "joes-bakery",
        "name": "Joe's Bakery",
        "description": "Fresh bread daily",
        "email": "joe@bakery.test",
        "phone": "5550100",
        "address": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "country": "US",
        "gstin": "",
        "type": "retail",
        "additional_services": "customOrders,afterSalesSupport",
        "operating_hours": {"monday": "9-5", "tuesday": "9-5"},
        "socials": {"facebook": "https://fb.test/joe", "instagram": "https://ig.test/joe"},
        "avatar": "avatar/old.jpg",
        "banner": None,
    }
    profile.update(profile_overrides)
    return {
        "profile": profile,
        "user": {"name": "Joe", "phone": "5550100"},
        "media": [
            {"id": "m-1", "url": "media/one.jpg", "type": "image"},
            {"id": "m-2", "url": "media/two.mp4", "type": "video"},
        ],
        "licenses": [{"name": "Food", "number": "F-1", "url": "license/f1.jpg", "description": ""}],
        "category": "food",
        "sub_category": "bakery",
        "sub_category_option": None,
        "tags": ["bread"],
    }


class FakeBusinessApi:
    """In-memory stand-in for the business API and the storage bucket.

    `failures[route]` makes the next call(s) to a route fail: the value is
    (status, message), or (0, message) for a transport error.
    """

    def __init__(self, business: Optional[Dict[str, Any]] = None):
        self.business = business or make_business()
        self.requests: List[httpx.Request] = []
        self.uploads: Dict[str, bytes] = {}
        self.failures: Dict[str, Tuple[int, str]] = {}
        self.taken_slugs = {"taken", "joes-bakery"}
        self._assets = itertools.count(1)
        self._media_ids = itertools.count(100)

    # --- helpers for assertions ---

    def calls(self, route: str) -> List[httpx.Request]:
        return [r for r in self.requests if self._route(r) == route]

    def client(self, token: Optional[str] = "test-token") -> BusinessApiClient:
        return BusinessApiClient(API_BASE, token, transport=httpx.MockTransport(self.handler))

    # --- transport ---

    def _route(self, request: httpx.Request) -> str:
        if request.url.host == STORAGE_HOST:
            return "upload"
        path = request.url.path[len("/api/v1"):]
        parts = [p for p in path.split("/") if p]
        if request.method == "GET" and parts == ["business", "slug", "check"]:
            return "slug"
        if request.method == "GET" and len(parts) == 2:
            return "fetch"
        if request.method == "PATCH":
            return "patch"
        if request.method == "POST" and parts == ["assets", "upload-url"]:
            return "credential"
        if request.method == "POST" and parts[-1:] == ["media"]:
            return "register"
        if request.method == "DELETE":
            return "delete"
        return "unknown"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._route(request)

        if route in self.failures:
            status, message = self.failures[route]
            if status == 0:
                raise httpx.ConnectError(message, request=request)
            return httpx.Response(status, json={"message": message})

        if route == "slug":
            value = request.url.params.get("value")
            return self._ok(value not in self.taken_slugs)
        if route == "fetch":
            return self._ok(copy.deepcopy(self.business))
        if route == "patch":
            body = json.loads(request.content)
            self.business["profile"].update(body)
            return self._ok(copy.deepcopy(self.business["profile"]))
        if route == "credential":
            body = json.loads(request.content)
            n = next(self._assets)
            return self._ok({
                "presigned_url": f"https://{STORAGE_HOST}/bucket/{n}?sig=abc",
                "asset_path": f"{body['category']}/asset-{n}.jpg",
            })
        if route == "upload":
            self.uploads[str(request.url)] = request.content
            return httpx.Response(200)
        if route == "register":
            body = json.loads(request.content)
            item = {"id": f"m-{next(self._media_ids)}", "url": body["asset_path"], "type": body["type"]}
            self.business["media"].append(item)
            return httpx.Response(201, json={"message": "Media added successfully", "data": item})
        if route == "delete":
            media_id = request.url.path.rsplit("/", 1)[-1]
            self.business["media"] = [m for m in self.business["media"] if m["id"] != media_id]
            return self._ok(True)
        return httpx.Response(404, json={"message": "Not Found"})

    @staticmethod
    def _ok(data: Any) -> httpx.Response:
        return httpx.Response(200, json={"message": "ok", "data": data})


@pytest.fixture
def fake_api() -> FakeBusinessApi:
    return FakeBusinessApi()


def png_bytes(size: Tuple[int, int] = (320, 240), color=(200, 30, 30, 255)) -> bytes:
    buffered = io.BytesIO()
    Image.new("RGBA", size, color).save(buffered, format="PNG")
    return buffered.getvalue()


@pytest.fixture
def sample_png() -> bytes:
    return png_bytes()


# --- server side ---

@pytest.fixture
def mongo_db():
    return mongomock.MongoClient()["bizpage_test"]


@pytest.fixture
def api_client(mongo_db):
    app.dependency_overrides[get_db] = lambda: mongo_db
    with_client = TestClient(app)
    yield with_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    token = jwt.encode({"id": "user-1", "type": "access"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return {"Authorization": f"Bearer {token}"}
