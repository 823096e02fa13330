"""API tests for the cached campaign scores, signal tiers, analytics and feed."""

from __future__ import annotations

from datetime import timedelta

from productlobby.core.cache import campaign_key
from productlobby.core.database import utc_now
from productlobby.core.database.entities import ContributionEvent, ContributionEventType, LobbyIntensity, PledgeType

API = "/api/v1"


class TestSignalScore:
    async def test_computes_stores_and_caches(self, client, factory, auth, cache, repos):
        campaign = await factory.campaign(await factory.user())
        await factory.pledge(campaign, await factory.user(phone_verified=True), PledgeType.INTENT, price_ceiling=120.0)
        await factory.lobby(campaign, await factory.user(), LobbyIntensity.TAKE_MY_MONEY)

        first = await client.get(f"{API}/campaigns/{campaign.id}/signal-score")

        body = first.json()
        assert body["campaign_id"] == campaign.id
        assert 0 <= body["score"] <= 100
        assert body["inputs"]["intent_count"] == 1
        assert await cache.get(campaign_key(campaign.id, "signal-score")) == body
        await repos.session.refresh(campaign)
        assert campaign.signal_score == body["score"]

    async def test_cache_hit_until_invalidated(self, client, factory, auth, cache):
        campaign = await factory.campaign(await factory.user())
        url = f"{API}/campaigns/{campaign.id}/signal-score"
        before = (await client.get(url)).json()

        await factory.pledge(campaign, await factory.user(), PledgeType.INTENT, price_ceiling=80.0)
        cached = (await client.get(url)).json()
        await client.post(
            f"{API}/campaigns/{campaign.id}/pledges",
            json={"pledge_type": "INTENT", "price_ceiling": 150, "timeframe_days": 30},
            headers=auth(await factory.user()),
        )
        fresh = (await client.get(url)).json()

        assert cached == before
        assert fresh["inputs"]["intent_count"] == 2


class TestBusinessCase:
    async def test_projection_from_campaign_signals(self, client, factory, cache):
        campaign = await factory.campaign(await factory.user())
        await factory.pledge(campaign, await factory.user(), PledgeType.INTENT, price_ceiling=120.0)
        await factory.lobby(campaign, await factory.user(), LobbyIntensity.TAKE_MY_MONEY)

        resp = await client.get(f"{API}/campaigns/{campaign.id}/business-case")

        body = resp.json()
        assert resp.status_code == 200
        assert (body["campaign_id"], body["campaign_title"]) == (campaign.id, campaign.title)
        assert body["total_demand_signals"] == 2
        assert body["weighted_demand"] == 5
        assert body["pricing"]["median_price_ceiling"] == 120
        assert await cache.get(campaign_key(campaign.id, "business-case")) == body

    async def test_unknown_campaign(self, client):
        resp = await client.get(f"{API}/campaigns/missing/business-case")

        assert resp.status_code == 404


class TestCampaignMetrics:
    async def test_sentiment(self, client, factory):
        campaign = await factory.campaign(await factory.user())
        await factory.comment(campaign, await factory.user(), "Love it, perfect for winter")

        body = (await client.get(f"{API}/campaigns/{campaign.id}/sentiment")).json()

        assert body["positive"] == 1
        assert body["overall"] == "positive"
        assert len(body["trend"]) == 7

    async def test_retention_and_weather(self, client, factory):
        campaign = await factory.campaign(await factory.user())

        retention = (await client.get(f"{API}/campaigns/{campaign.id}/retention")).json()
        weather = (await client.get(f"{API}/campaigns/{campaign.id}/weather")).json()

        assert retention["total_supporters"] == 0
        assert [p["days"] for p in retention["periods"]] == [7, 14, 30, 90]
        assert weather["campaign_id"] == campaign.id
        assert 0 <= weather["temperature"] <= 100

    async def test_engagement_is_creator_only(self, client, factory, auth):
        creator = await factory.user()
        campaign = await factory.campaign(creator)
        await factory.lobby(campaign, await factory.user())

        denied = await client.get(f"{API}/campaigns/{campaign.id}/engagement-score", headers=auth(await factory.user()))
        allowed = await client.get(f"{API}/campaigns/{campaign.id}/engagement-score", headers=auth(creator))

        assert denied.status_code == 403
        assert allowed.json()["total_supporters"] == 1


class TestSignalTiers:
    async def test_listing(self, client, factory):
        creator = await factory.user()
        await factory.campaign(creator, title="Quiet", signal_score=20.0)
        await factory.campaign(creator, title="Loud", signal_score=72.0)
        await factory.campaign(creator, title="Louder", signal_score=91.0)

        body = (await client.get(f"{API}/signal/tiers/very_high")).json()

        assert body["min_score"] == 70
        assert [c["title"] for c in body["campaigns"]] == ["Louder", "Loud"]

    async def test_unknown_tier(self, client, db_engine):
        resp = await client.get(f"{API}/signal/tiers/extreme")

        assert resp.status_code == 400


class TestAnalyticsAndFeed:
    async def test_export_json_and_csv(self, client, factory, auth, repos):
        creator = await factory.user()
        campaign = await factory.campaign(creator)
        now = utc_now()
        for hours_ago, device in ((1, "mobile"), (5, "desktop")):
            await repos.events.create(
                ContributionEvent(
                    campaign_id=campaign.id,
                    event_type=ContributionEventType.PAGE_VIEW,
                    event_metadata={"deviceType": device, "referrer": "newsletter"},
                    created_at=now - timedelta(hours=hours_ago),
                )
            )
        url = f"{API}/campaigns/{campaign.id}/analytics-export"

        as_json = await client.get(url, params={"period": "7d"}, headers=auth(creator))
        as_csv = await client.get(url, params={"format": "csv"}, headers=auth(creator))
        bad = await client.get(url, params={"format": "pdf"}, headers=auth(creator))
        denied = await client.get(url, headers=auth(await factory.user()))

        report = as_json.json()
        assert report["period"] == "7d"
        assert report["total_views"] == 2
        assert report["device_breakdown"]["mobile"] == 1
        assert as_csv.headers["content-type"].startswith("text/csv")
        assert "Total Views,2" in as_csv.text
        assert bad.status_code == 400
        assert denied.status_code == 403

    async def test_campaign_feed(self, client, factory):
        campaign = await factory.campaign(await factory.user())
        fan = await factory.user()
        await factory.lobby(campaign, fan, created_at=utc_now() - timedelta(hours=1))
        await factory.comment(campaign, fan, "Sign me up")

        body = (await client.get(f"{API}/campaigns/{campaign.id}/feed", params={"limit": 1})).json()

        assert body["total"] == 2
        assert [item["type"] for item in body["items"]] == ["comment"]
