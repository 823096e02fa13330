"""API tests for comment threads, campaign teams and milestones."""

from __future__ import annotations

from datetime import timedelta

from productlobby.core.database import utc_now

API = "/api/v1"


class TestComments:
    async def test_threads_nest_replies(self, client, factory, auth):
        campaign = await factory.campaign(await factory.user())
        headers = auth(await factory.user())
        url = f"{API}/campaigns/{campaign.id}/comments"

        parent = (await client.post(url, json={"content": "Need wide fit"}, headers=headers)).json()
        await client.post(url, json={"content": "Seconded", "parent_id": parent["id"]}, headers=headers)
        await client.post(url, json={"content": "And a vegan version"}, headers=headers)

        threads = (await client.get(url)).json()

        assert [c["content"] for c in threads] == ["Need wide fit", "And a vegan version"]
        assert [r["content"] for r in threads[0]["replies"]] == ["Seconded"]

    async def test_parent_from_other_campaign(self, client, factory, auth):
        creator = await factory.user()
        here = await factory.campaign(creator)
        elsewhere = await factory.campaign(creator)
        foreign = await factory.comment(elsewhere, creator, "Over here")

        resp = await client.post(
            f"{API}/campaigns/{here.id}/comments",
            json={"content": "Reply", "parent_id": foreign.id},
            headers=auth(creator),
        )

        assert resp.status_code == 400

    async def test_empty_content_rejected(self, client, factory, auth):
        campaign = await factory.campaign(await factory.user())

        resp = await client.post(
            f"{API}/campaigns/{campaign.id}/comments", json={"content": ""}, headers=auth(await factory.user())
        )

        assert resp.status_code == 400

    async def test_only_author_edits(self, client, factory, auth):
        campaign = await factory.campaign(await factory.user())
        author = await factory.user()
        comment = await factory.comment(campaign, author, "Typo here")

        denied = await client.patch(
            f"{API}/comments/{comment.id}", json={"content": "Hijacked"}, headers=auth(await factory.user())
        )
        edited = await client.patch(f"{API}/comments/{comment.id}", json={"content": "Fixed"}, headers=auth(author))

        assert denied.status_code == 403
        assert edited.json()["content"] == "Fixed"

    async def test_creator_deletes_thread(self, client, factory, auth):
        creator = await factory.user()
        campaign = await factory.campaign(creator)
        author = await factory.user()
        parent = await factory.comment(campaign, author, "Spam")
        await factory.comment(campaign, author, "More spam", parent_id=parent.id)

        denied = await client.delete(f"{API}/comments/{parent.id}", headers=auth(await factory.user()))
        deleted = await client.delete(f"{API}/comments/{parent.id}", headers=auth(creator))

        assert denied.status_code == 403
        assert deleted.status_code == 204
        assert (await client.get(f"{API}/campaigns/{campaign.id}/comments")).json() == []
        assert (await client.delete(f"{API}/comments/{parent.id}", headers=auth(creator))).status_code == 404


class TestTeam:
    async def test_invite_accept_and_remove(self, client, factory, auth):
        creator = await factory.user()
        campaign = await factory.campaign(creator)
        invitee = await factory.user("sam")
        url = f"{API}/campaigns/{campaign.id}/team"

        invited = await client.post(url, json={"email": "Sam@Example.com", "role": "Editor"}, headers=auth(creator))
        roster = (await client.get(url)).json()
        accepted = await client.post(f"{url}/accept", headers=auth(invitee))
        after = (await client.get(url)).json()
        removed = await client.delete(f"{url}/{invited.json()['id']}", headers=auth(creator))

        assert invited.status_code == 201
        assert invited.json()["email"] == "sam@example.com"
        assert [m["email"] for m in roster["pending"]] == ["sam@example.com"]
        assert accepted.json()["status"] == "ACTIVE"
        assert [m["user_id"] for m in after["members"]] == [invitee.id]
        assert removed.status_code == 204

    async def test_invite_rules(self, client, factory, auth):
        creator = await factory.user()
        campaign = await factory.campaign(creator)
        url = f"{API}/campaigns/{campaign.id}/team"

        bad_email = await client.post(url, json={"email": "nope"}, headers=auth(creator))
        bad_role = await client.post(url, json={"email": "a@example.com", "role": "Owner"}, headers=auth(creator))
        not_creator = await client.post(url, json={"email": "a@example.com"}, headers=auth(await factory.user()))
        await client.post(url, json={"email": "a@example.com"}, headers=auth(creator))
        repeat = await client.post(url, json={"email": "a@example.com"}, headers=auth(creator))

        assert bad_email.status_code == 400
        assert bad_role.status_code == 400
        assert bad_role.json()["details"] == ["Admin", "Editor", "Moderator", "Viewer"]
        assert not_creator.status_code == 403
        assert repeat.status_code == 409

    async def test_accept_without_invitation(self, client, factory, auth):
        campaign = await factory.campaign(await factory.user())

        resp = await client.post(f"{API}/campaigns/{campaign.id}/team/accept", headers=auth(await factory.user()))

        assert resp.status_code == 404


class TestMilestones:
    async def test_progress_and_share(self, client, factory, auth):
        campaign = await factory.campaign(await factory.user(), created_at=utc_now() - timedelta(days=31))
        fan = await factory.user()
        url = f"{API}/campaigns/{campaign.id}/milestones"

        shared = await client.post(
            url,
            json={"action": "share_milestone", "milestone_type": "days_active", "milestone_threshold": 30},
            headers=auth(fan),
        )
        report = (await client.get(url)).json()

        assert shared.status_code == 201
        assert shared.json()["message"] == "Milestone share recorded successfully"
        assert report["campaign_id"] == campaign.id
        assert report["days_active"] == 31
        assert report["total_shares"] == 0
        achieved = {m["id"]: m for m in report["milestones"] if m["achieved"]}
        assert set(achieved) == {"days_active-7", "days_active-30"}
        assert achieved["days_active-30"]["achieved_at"] is not None
        assert achieved["days_active-7"]["achieved_at"] is None

    async def test_unknown_action(self, client, factory, auth):
        campaign = await factory.campaign(await factory.user())

        resp = await client.post(
            f"{API}/campaigns/{campaign.id}/milestones",
            json={"action": "share_campaign"},
            headers=auth(await factory.user()),
        )

        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid action"}
