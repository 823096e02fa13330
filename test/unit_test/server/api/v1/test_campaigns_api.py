"""API tests for the campaign endpoints and the health checks."""

from __future__ import annotations

from productlobby.core.cache import campaign_key
from productlobby.core.database.entities import CampaignStatus

API = "/api/v1"

NEW_CAMPAIGN = {
    "title": "Waterproof Trail Runners",
    "description": "Trail shoes that survive a wet autumn.",
    "category": "Apparel",
}


class TestHealth:
    async def test_health_and_version(self, client):
        health = await client.get(f"{API}/health")
        version = await client.get(f"{API}/version")

        assert health.json() == {"status": "ok"}
        assert version.json()["schema_version"] == "v1"


class TestCreateCampaign:
    async def test_create(self, client, factory, auth):
        creator = await factory.user()

        resp = await client.post(f"{API}/campaigns", json=NEW_CAMPAIGN, headers=auth(creator))

        assert resp.status_code == 201
        body = resp.json()
        assert body["slug"] == "waterproof-trail-runners"
        assert body["category"] == "apparel"
        assert body["status"] == "LIVE"
        assert body["creator_user_id"] == creator.id
        assert body["signal_score"] is None

    async def test_duplicate_titles_get_suffixed_slugs(self, client, factory, auth):
        headers = auth(await factory.user())
        await client.post(f"{API}/campaigns", json=NEW_CAMPAIGN, headers=headers)
        await client.post(f"{API}/campaigns", json=NEW_CAMPAIGN, headers=headers)

        resp = await client.post(f"{API}/campaigns", json=NEW_CAMPAIGN, headers=headers)

        assert resp.json()["slug"] == "waterproof-trail-runners-3"

    async def test_requires_user(self, client, db_engine):
        resp = await client.post(f"{API}/campaigns", json=NEW_CAMPAIGN)

        assert resp.status_code == 401
        assert resp.json() == {"error": "Authentication required"}

    async def test_unknown_user_header_is_anonymous(self, client, db_engine):
        resp = await client.post(f"{API}/campaigns", json=NEW_CAMPAIGN, headers={"X-User-Id": "ghost"})

        assert resp.status_code == 401

    async def test_validation_errors(self, client, factory, auth):
        payload = {**NEW_CAMPAIGN, "title": "Hi", "category": "spaceships"}

        resp = await client.post(f"{API}/campaigns", json=payload, headers=auth(await factory.user()))

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Invalid request"
        assert {d["field"] for d in body["details"]} == {"title", "category"}

    async def test_unknown_brand(self, client, factory, auth):
        payload = {**NEW_CAMPAIGN, "targeted_brand_id": "missing"}

        resp = await client.post(f"{API}/campaigns", json=payload, headers=auth(await factory.user()))

        assert resp.status_code == 404


class TestListCampaigns:
    async def test_filters_and_pagination(self, client, factory):
        creator = await factory.user()
        await factory.campaign(creator, title="Trail Runners")
        await factory.campaign(creator, title="Trail Poles")
        await factory.campaign(creator, title="Desk Lamp", category="home")

        resp = await client.get(f"{API}/campaigns", params={"query": "trail", "limit": 1, "sort": "newest"})

        body = resp.json()
        assert body["total"] == 2
        assert len(body["items"]) == 1
        assert body["has_more"] is True

        home = await client.get(f"{API}/campaigns", params={"category": "HOME"})
        assert [c["title"] for c in home.json()["items"]] == ["Desk Lamp"]

    async def test_rejects_unknown_sort(self, client, db_engine):
        resp = await client.get(f"{API}/campaigns", params={"sort": "random"})

        assert resp.status_code == 400
        assert "sort must be one of" in resp.json()["error"]

    async def test_status_filter(self, client, factory):
        creator = await factory.user()
        await factory.campaign(creator, title="Live one")
        await factory.campaign(creator, title="Draft one", status=CampaignStatus.DRAFT)

        resp = await client.get(f"{API}/campaigns", params={"status": "DRAFT"})

        assert [c["title"] for c in resp.json()["items"]] == ["Draft one"]


class TestReadUpdateDelete:
    async def test_read_by_id_or_slug(self, client, factory):
        campaign = await factory.campaign(await factory.user())

        by_id = await client.get(f"{API}/campaigns/{campaign.id}")
        by_slug = await client.get(f"{API}/campaigns/{campaign.slug}")
        missing = await client.get(f"{API}/campaigns/nope")

        assert by_id.json()["id"] == by_slug.json()["id"] == campaign.id
        assert missing.status_code == 404
        assert missing.json() == {"error": "Campaign 'nope' not found"}

    async def test_only_creator_updates(self, client, factory, auth):
        creator = await factory.user()
        campaign = await factory.campaign(creator)

        denied = await client.patch(
            f"{API}/campaigns/{campaign.id}", json={"title": "Someone else's idea"}, headers=auth(await factory.user())
        )
        updated = await client.patch(
            f"{API}/campaigns/{campaign.id}", json={"title": "Vegan Trail Runners"}, headers=auth(creator)
        )

        assert denied.status_code == 403
        assert updated.status_code == 200
        assert updated.json()["title"] == "Vegan Trail Runners"
        assert updated.json()["slug"] == campaign.slug

    async def test_update_drops_cached_metrics(self, client, factory, auth, cache):
        creator = await factory.user()
        campaign = await factory.campaign(creator)
        key = campaign_key(campaign.id, "sentiment")
        await cache.set(key, {"score": 50})

        await client.patch(f"{API}/campaigns/{campaign.id}", json={"completeness_score": 80}, headers=auth(creator))

        assert await cache.get(key) is None
        resp = await client.get(f"{API}/campaigns/{campaign.id}")
        assert resp.json()["completeness_score"] == 80
        assert resp.json()["signal_score"] is not None

    async def test_delete(self, client, factory, auth):
        creator = await factory.user()
        campaign = await factory.campaign(creator)

        denied = await client.delete(f"{API}/campaigns/{campaign.id}", headers=auth(await factory.user()))
        deleted = await client.delete(f"{API}/campaigns/{campaign.id}", headers=auth(creator))

        assert denied.status_code == 403
        assert deleted.status_code == 204
        assert (await client.get(f"{API}/campaigns/{campaign.id}")).status_code == 404
