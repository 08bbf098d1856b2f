"""
Tests for hashtag endpoints.
"""

import uuid

import pytest
from httpx import AsyncClient

from app.api.v1 import hashtags as hashtags_api


@pytest.mark.asyncio
async def test_list_hashtags_empty(client: AsyncClient):
    """An empty collection is a successful, empty listing."""
    response = await client.get("/api/v1/hashtags")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["hashtags"] == []
    assert data["pagination"] == {
        "mode": "aggregation",
        "limit": 20,
        "offset": 0,
        "nextOffset": None,
        "totalMatched": 0,
    }
    assert "debug" not in data


@pytest.mark.asyncio
async def test_list_hashtags(client: AsyncClient, seed_projects):
    response = await client.get("/api/v1/hashtags", params={"limit": 3})

    assert response.status_code == 200
    data = response.json()
    assert [item["hashtag"] for item in data["hashtags"]] == ["acme", "country:hu", "hu"]
    assert all(item["count"] == 2 for item in data["hashtags"])
    assert data["pagination"]["nextOffset"] == 3
    assert data["pagination"]["totalMatched"] == 10


@pytest.mark.asyncio
async def test_list_hashtags_slugs_are_stable(client: AsyncClient, seed_projects):
    first = (await client.get("/api/v1/hashtags")).json()
    second = (await client.get("/api/v1/hashtags")).json()

    assert first["hashtags"] == second["hashtags"]
    for item in first["hashtags"]:
        uuid.UUID(item["slug"])


@pytest.mark.asyncio
async def test_list_hashtags_search(client: AsyncClient, seed_projects):
    response = await client.get("/api/v1/hashtags", params={"search": "country"})

    data = response.json()
    assert [item["hashtag"] for item in data["hashtags"]] == ["country:hu", "country:at"]


@pytest.mark.asyncio
async def test_list_hashtags_debug(client: AsyncClient, seed_projects, monkeypatch):
    monkeypatch.setattr(hashtags_api.settings, "DEBUG", True)

    data = (await client.get("/api/v1/hashtags")).json()

    assert data["debug"] == {"projectsScanned": 3, "distinctHashtags": 10}


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"offset": -1}, {"limit": "x"}])
async def test_list_hashtags_bad_pagination(client: AsyncClient, params):
    response = await client.get("/api/v1/hashtags", params=params)

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "validation_failed"


@pytest.mark.asyncio
async def test_validate_hashtag(client: AsyncClient):
    response = await client.post("/api/v1/hashtags", json={"hashtag": " #Summer_24 "})

    assert response.status_code == 200
    assert response.json() == {"success": True, "hashtag": "summer_24"}


@pytest.mark.asyncio
@pytest.mark.parametrize("hashtag", ["", "#", "with space", None])
async def test_validate_hashtag_rejected(client: AsyncClient, hashtag):
    response = await client.post("/api/v1/hashtags", json={"hashtag": hashtag})

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_delete_hashtag_in_use(client: AsyncClient, seed_projects):
    response = await client.delete("/api/v1/hashtags", params={"hashtag": "vip"})

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


@pytest.mark.asyncio
async def test_delete_hashtag_requires_name(client: AsyncClient):
    response = await client.delete("/api/v1/hashtags")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_hashtag_cascade(client: AsyncClient, seed_projects):
    await client.get("/api/v1/hashtags")

    response = await client.delete("/api/v1/hashtags", params={"hashtag": "hu", "mode": "cascade"})

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "cascade"
    assert data["projectsCleaned"] == 2
    assert data["partnersCleaned"] == 0
    assert data["hashtagSlugsDeleted"] == 2

    listing = (await client.get("/api/v1/hashtags", params={"limit": 100})).json()
    tags = {item["hashtag"] for item in listing["hashtags"]}
    assert "hu" not in tags
    assert "country:hu" not in tags
    assert "country:at" in tags


@pytest.mark.asyncio
async def test_report_by_slug(client: AsyncClient, seed_projects):
    listing = (await client.get("/api/v1/hashtags", params={"search": "vip"})).json()
    slug = listing["hashtags"][0]["slug"]

    response = await client.get(f"/api/v1/hashtags/{slug}")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["project"]["eventName"] == "#vip"
    assert data["project"]["projectCount"] == 2
    assert data["project"]["stats"] == {"female": 15, "male": 27}
    assert data["project"]["dateRange"] == {"oldest": "2024-03-01", "newest": "2024-05-12"}
    assert [p["eventName"] for p in data["projects"]] == ["Cup Final", "Home Opener"]


@pytest.mark.asyncio
async def test_report_by_name(client: AsyncClient, seed_projects):
    response = await client.get("/api/v1/hashtags/sponsor:acme")

    assert response.status_code == 200
    assert response.json()["project"]["projectCount"] == 2


@pytest.mark.asyncio
async def test_report_debug(client: AsyncClient, seed_projects, monkeypatch):
    monkeypatch.setattr(hashtags_api.settings, "DEBUG", True)

    data = (await client.get("/api/v1/hashtags/sponsor:acme")).json()

    assert data["debug"] == {
        "requested": "sponsor:acme",
        "resolvedHashtag": "sponsor:acme",
        "isSlug": False,
        "projectCount": 2,
    }


@pytest.mark.asyncio
async def test_report_not_found(client: AsyncClient, seed_projects):
    unknown_slug = await client.get(f"/api/v1/hashtags/{uuid.uuid4()}")
    unused_tag = await client.get("/api/v1/hashtags/nothing")

    assert unknown_slug.status_code == 404
    assert unused_tag.status_code == 404
    assert unused_tag.json()["success"] is False


@pytest.mark.asyncio
async def test_filters(client: AsyncClient, seed_projects):
    created = await client.post("/api/v1/hashtags/filters", json={"hashtags": ["VIP", "summer"]})

    assert created.status_code == 200
    body = created.json()
    assert body["hashtags"] == ["summer", "vip"]

    report = await client.get(f"/api/v1/hashtags/filters/{body['slug']}")

    assert report.status_code == 200
    data = report.json()
    assert [p["id"] for p in data["projects"]] == ["p-1"]
    assert data["project"]["eventName"] == "#summer + #vip"


@pytest.mark.asyncio
async def test_filters_rejects_empty(client: AsyncClient):
    response = await client.post("/api/v1/hashtags/filters", json={"hashtags": []})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_filter(client: AsyncClient):
    response = await client.get(f"/api/v1/hashtags/filters/{uuid.uuid4()}")

    assert response.status_code == 404
