from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from pymongo import ASCENDING

from bizpage.models.business import BusinessCreate, MediaCreate
from bizpage.services.business_service import BusinessService

BASE = "/api/v1/business"


def business_payload(slug="joes-bakery", **profile):
    return {
        "user": {"name": "Joe", "phone": "5550100"},
        "profile": {
            "slug": slug,
            "name": "Joe's Bakery",
            "email": "joe@bakery.test",
            "category": "food",
            "socials": {"facebook": "https://fb.test/joe"},
            **profile,
        },
        "license": [{"name": "Food", "number": "F-1"}],
        "payment": {"payment_status": "success", "amount": 499.0},
    }


def seed(db, slug="joes-bakery", **profile):
    return BusinessService(db).create_business(BusinessCreate.model_validate(business_payload(slug, **profile)))


def test_create_business(api_client, mongo_db):
    response = api_client.post(BASE, json=business_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Business created successfully"
    profile = body["data"]["profile"]
    assert profile["slug"] == "joes-bakery"
    assert profile["status"] == 1
    assert profile["socials"]["facebook"] == "https://fb.test/joe"
    assert body["data"]["payment"]["amount"] == 499.0
    assert mongo_db.profiles.count_documents({}) == 1
    assert mongo_db.profile_licenses.count_documents({"profile_id": profile["id"]}) == 1
    assert mongo_db.users.count_documents({"phone": "5550100"}) == 1


def test_create_unpaid_business_is_inactive(api_client):
    payload = business_payload()
    payload["payment"] = None
    response = api_client.post(BASE, json=payload)

    assert response.status_code == 201
    assert response.json()["data"]["profile"]["status"] == 0
    assert response.json()["data"]["payment"] is None


def test_create_business_reuses_owner_and_rejects_taken_slug(api_client, mongo_db):
    assert api_client.post(BASE, json=business_payload()).status_code == 201
    assert api_client.post(BASE, json=business_payload("second-shop")).status_code == 201
    assert mongo_db.users.count_documents({}) == 1

    duplicate = api_client.post(BASE, json=business_payload())
    assert duplicate.status_code == 400
    assert mongo_db.profiles.count_documents({}) == 2


def test_concurrent_create_with_same_slug_is_400(api_client, mongo_db, monkeypatch):
    mongo_db.profiles.create_index([("slug", ASCENDING)], unique=True)
    seed(mongo_db)
    # both requests passed the availability check before either inserted
    monkeypatch.setattr(BusinessService, "slug_exists", lambda self, slug: False)

    with pytest.raises(HTTPException) as exc_info:
        seed(mongo_db)
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "This slug is already in use. Try another one."

    response = api_client.post(BASE, json=business_payload())
    assert response.status_code == 400
    assert mongo_db.profiles.count_documents({}) == 1


@pytest.mark.parametrize("slug", ["ab", "Bad Slug", "-edge-"])
def test_create_business_validates_slug(api_client, slug):
    assert api_client.post(BASE, json=business_payload(slug)).status_code == 422


def test_slug_check(api_client, mongo_db):
    seed(mongo_db)

    taken = api_client.get(f"{BASE}/slug/check", params={"value": "joes-bakery"}).json()
    free = api_client.get(f"{BASE}/slug/check", params={"value": "new-shop"}).json()

    assert taken == {"message": "This slug is already in use. Try another one.", "data": False}
    assert free == {"message": "This slug is available for use. You can proceed.", "data": True}


def test_get_business_by_slug(api_client, mongo_db):
    created = seed(mongo_db)
    BusinessService(mongo_db).add_media(created["profile"].id, MediaCreate(asset_path="media/a.jpg"))

    response = api_client.get(f"{BASE}/joes-bakery")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["profile"]["id"] == created["profile"].id
    assert data["user"] == {"name": "Joe", "phone": "5550100"}
    assert [m["url"] for m in data["media"]] == ["media/a.jpg"]
    assert data["licenses"][0]["number"] == "F-1"
    assert data["category"] == "food"


def test_expired_or_unknown_business_is_404(api_client, mongo_db):
    seed(mongo_db, "old-shop", expires_at=(datetime.now(timezone.utc) - timedelta(days=1)).isoformat())

    for slug in ("old-shop", "never-existed"):
        response = api_client.get(f"{BASE}/{slug}")
        assert response.status_code == 404
        assert response.json()["message"] == "Business does not exist or is expired"


def test_patch_requires_token(api_client, mongo_db):
    created = seed(mongo_db)
    response = api_client.patch(f"{BASE}/{created['profile'].id}", json={"name": "x"})
    assert response.status_code == 401


def test_patch_rejects_bad_token(api_client, mongo_db):
    created = seed(mongo_db)
    response = api_client.patch(
        f"{BASE}/{created['profile'].id}", json={"name": "x"}, headers={"Authorization": "Bearer nonsense"}
    )
    assert response.status_code == 401


def test_patch_updates_only_sent_fields(api_client, mongo_db, auth_headers):
    created = seed(mongo_db)
    profile_id = created["profile"].id

    response = api_client.patch(
        f"{BASE}/{profile_id}",
        json={"socials": {"facebook": "https://fb.test/joe", "twitter": "https://x.test/joe"}},
        headers=auth_headers,
    )

    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["socials"]["twitter"] == "https://x.test/joe"
    assert profile["name"] == "Joe's Bakery"
    stored = mongo_db.profiles.find_one({"_id": profile_id})
    assert stored["socials"]["twitter"] == "https://x.test/joe"
    assert stored["email"] == "joe@bakery.test"


@pytest.mark.parametrize("body", [
    {"socials": {"myspace": "m"}},
    {"slug": "sneaky-rename"},
    {"operating_hours": "always"},
])
def test_patch_rejects_invalid_body(api_client, mongo_db, auth_headers, body):
    created = seed(mongo_db)
    response = api_client.patch(f"{BASE}/{created['profile'].id}", json=body, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Business update failed"
    assert mongo_db.profiles.find_one({"_id": created["profile"].id})["slug"] == "joes-bakery"


def test_patch_empty_and_unknown_profile(api_client, mongo_db, auth_headers):
    created = seed(mongo_db)

    empty = api_client.patch(f"{BASE}/{created['profile'].id}", json={}, headers=auth_headers)
    assert empty.status_code == 400
    assert empty.json()["detail"] == "No data to update"

    missing = api_client.patch(f"{BASE}/nope", json={"name": "x"}, headers=auth_headers)
    assert missing.status_code == 400
    assert missing.json()["message"] == "Business update failed"


def test_media_add_and_delete(api_client, mongo_db, auth_headers):
    profile_id = seed(mongo_db)["profile"].id

    added = api_client.post(
        f"{BASE}/{profile_id}/media", json={"asset_path": "media/v.mp4", "type": "video"}, headers=auth_headers
    )
    assert added.status_code == 201
    media_id = added.json()["data"]["id"]
    assert added.json()["data"]["type"] == "video"

    deleted = api_client.delete(f"{BASE}/{profile_id}/media/{media_id}", headers=auth_headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"] is True

    again = api_client.delete(f"{BASE}/{profile_id}/media/{media_id}", headers=auth_headers)
    assert again.status_code == 404
    assert again.json()["message"] == "Media item not found"


def test_media_for_unknown_business_is_404(api_client, auth_headers):
    response = api_client.post(f"{BASE}/nope/media", json={"asset_path": "media/a.jpg"}, headers=auth_headers)
    assert response.status_code == 404


def test_listing_paginates(api_client, mongo_db):
    for slug, name in [("shop-a", "Alpha"), ("shop-b", "Bravo"), ("shop-c", "Charlie")]:
        seed(mongo_db, slug, name=name)
    seed(mongo_db, "shop-d", name="Delta", category="tools")

    first = api_client.get(BASE, params={"category_id": "food", "limit": "2"}).json()
    assert [p["name"] for p in first["data"]["profiles"]] == ["Alpha", "Bravo"]
    meta = first["data"]["meta"]
    assert meta["total_count"] == 3
    assert meta["total_pages"] == 2
    assert meta["previous"] is None
    assert meta["next"] == f"{BASE}?category_id=food&page=2&limit=2"

    second = api_client.get(BASE, params={"category_id": "food", "limit": "2", "page": "2"}).json()
    assert [p["name"] for p in second["data"]["profiles"]] == ["Charlie"]
    assert second["data"]["meta"]["previous"] == f"{BASE}?category_id=food&page=1&limit=2"
    assert second["data"]["meta"]["next"] is None


def test_listing_search_and_empty(api_client, mongo_db):
    seed(mongo_db, "shop-a", name="Alpha Bakes")
    seed(mongo_db, "shop-b", name="Bravo")

    found = api_client.get(BASE, params={"search": "bakes"}).json()
    assert [p["slug"] for p in found["data"]["profiles"]] == ["shop-a"]

    empty = api_client.get(BASE, params={"category_id": "nothing-here"})
    assert empty.status_code == 404
    assert empty.json()["message"] == "No businesses found"


def test_renewal_listing(api_client, mongo_db):
    now = datetime.now(timezone.utc)
    seed(mongo_db, "soon", expires_at=(now + timedelta(days=3)).isoformat())
    seed(mongo_db, "later", expires_at=(now + timedelta(days=60)).isoformat())
    seed(mongo_db, "forever")

    response = api_client.get(f"{BASE}/renewal", params={"days": "7"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["slug"] for p in data["profiles"]] == ["soon"]
    assert data["meta"]["params"]["days"] == 7


def test_count(api_client, mongo_db):
    assert api_client.get(f"{BASE}/count").json()["data"] == 0
    seed(mongo_db)
    seed(mongo_db, "other-shop")
    assert api_client.get(f"{BASE}/count").json()["data"] == 2


def test_health(api_client):
    assert api_client.get("/health").json()["status"] == "ok"
