"""Tests for channel subscriptions and the channel dashboard."""

import uuid

from conftest import bearer


class TestSubscriptions:

    def test_toggle_on_and_off(self, client, user_session, other_session):
        user_id, _, _ = user_session
        other_id, other_token, _ = other_session

        added = client.post(f"/api/v1/subscriptions/c/{user_id}", headers=bearer(other_token))
        assert added.status_code == 200
        assert added.get_json()["message"] == "added"
        assert added.get_json()["data"] == {"subscriber": other_id, "channel": user_id, "subscribed": True}

        removed = client.post(f"/api/v1/subscriptions/c/{user_id}", headers=bearer(other_token))
        assert removed.get_json()["message"] == "removed"
        assert removed.get_json()["data"]["subscribed"] is False

    def test_cannot_subscribe_to_self(self, client, user_session):
        user_id, access_token, _ = user_session

        assert client.post(f"/api/v1/subscriptions/c/{user_id}", headers=bearer(access_token)).status_code == 400

    def test_unknown_channel(self, client, user_session):
        _, access_token, _ = user_session

        res = client.post(f"/api/v1/subscriptions/c/{uuid.uuid4()}", headers=bearer(access_token))

        assert res.status_code == 404


class TestChannelStats:

    def test_empty_channel(self, client, user_session):
        _, access_token, _ = user_session

        res = client.get("/api/v1/dashboard/stats", headers=bearer(access_token))

        assert res.status_code == 200
        assert res.get_json()["data"] == {
            "totalVideos": 0,
            "totalViews": 0,
            "totalLikes": 0,
            "totalSubscribers": 0,
        }

    def test_counts_only_this_channel(self, client, user_session, other_session, make_video):
        user_id, access_token, _ = user_session
        other_id, other_token, _ = other_session
        first = make_video(user_id, views=10)
        make_video(user_id, views=5)
        foreign = make_video(other_id, views=100)

        client.post(f"/api/v1/likes/toggle/video/{first}", headers=bearer(access_token))
        client.post(f"/api/v1/likes/toggle/video/{first}", headers=bearer(other_token))
        client.post(f"/api/v1/likes/toggle/video/{foreign}", headers=bearer(access_token))
        client.post(f"/api/v1/subscriptions/c/{user_id}", headers=bearer(other_token))

        res = client.get("/api/v1/dashboard/stats", headers=bearer(access_token))

        assert res.get_json()["data"] == {
            "totalVideos": 2,
            "totalViews": 15,
            "totalLikes": 2,
            "totalSubscribers": 1,
        }

    def test_requires_authentication(self, client):
        assert client.get("/api/v1/dashboard/stats").status_code == 401


class TestChannelVideos:

    def test_lists_own_videos_newest_first(self, client, user_session, other_session, make_video):
        user_id, access_token, _ = user_session
        other_id, _, _ = other_session
        make_video(user_id, title="Old")
        make_video(user_id, title="New")
        make_video(other_id, title="Not mine")

        res = client.get("/api/v1/dashboard/videos", headers=bearer(access_token))

        assert res.status_code == 200
        data = res.get_json()["data"]
        assert [v["title"] for v in data["videos"]] == ["New", "Old"]
        assert data["meta"] == {"page": 1, "limit": 10, "total": 2}

    def test_pagination(self, client, user_session, make_video):
        user_id, access_token, _ = user_session
        for title in ("a", "b", "c"):
            make_video(user_id, title=title)

        data = client.get("/api/v1/dashboard/videos?page=2&limit=2", headers=bearer(access_token)).get_json()["data"]

        assert [v["title"] for v in data["videos"]] == ["a"]
