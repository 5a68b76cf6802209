"""Tests for tweets, comments and the healthcheck."""

import uuid

from models import storage
from models.like import Like
from conftest import bearer


def test_healthcheck(client):
    res = client.get("/api/v1/healthcheck")

    assert res.status_code == 200
    assert res.get_json() == {
        "statusCode": 200,
        "data": {"status": "OK"},
        "message": "Service is healthy",
        "success": True,
    }


class TestTweets:

    def test_create_and_list_newest_first(self, client, user_session):
        user_id, access_token, _ = user_session
        client.post("/api/v1/tweets", json={"content": "first"}, headers=bearer(access_token))
        res = client.post("/api/v1/tweets", json={"content": " second "}, headers=bearer(access_token))

        assert res.status_code == 201
        assert res.get_json()["data"]["content"] == "second"
        assert res.get_json()["data"]["owner"]["id"] == user_id

        listed = client.get(f"/api/v1/tweets/user/{user_id}")
        assert [t["content"] for t in listed.get_json()["data"]] == ["second", "first"]

    def test_blank_content_rejected(self, client, user_session):
        _, access_token, _ = user_session

        res = client.post("/api/v1/tweets", json={"content": "   "}, headers=bearer(access_token))

        assert res.status_code == 400

    def test_list_for_unknown_user(self, client):
        assert client.get(f"/api/v1/tweets/user/{uuid.uuid4()}").status_code == 404
        assert client.get("/api/v1/tweets/user/xyz").status_code == 400

    def test_only_owner_can_update(self, client, user_session, other_session):
        _, access_token, _ = user_session
        _, other_token, _ = other_session
        tweet_id = client.post(
            "/api/v1/tweets", json={"content": "mine"}, headers=bearer(access_token)
        ).get_json()["data"]["id"]

        forbidden = client.patch(
            f"/api/v1/tweets/{tweet_id}", json={"content": "hijack"}, headers=bearer(other_token)
        )
        assert forbidden.status_code == 403

        ok = client.patch(f"/api/v1/tweets/{tweet_id}", json={"content": "edited"}, headers=bearer(access_token))
        assert ok.status_code == 200
        assert ok.get_json()["data"]["content"] == "edited"

    def test_delete_removes_likes(self, app, client, user_session, other_session):
        _, access_token, _ = user_session
        _, other_token, _ = other_session
        tweet_id = client.post(
            "/api/v1/tweets", json={"content": "bye"}, headers=bearer(access_token)
        ).get_json()["data"]["id"]
        client.post(f"/api/v1/likes/toggle/tweet/{tweet_id}", headers=bearer(other_token))

        assert client.delete(f"/api/v1/tweets/{tweet_id}", headers=bearer(other_token)).status_code == 403
        res = client.delete(f"/api/v1/tweets/{tweet_id}", headers=bearer(access_token))

        assert res.status_code == 200
        with app.app_context():
            assert storage.get_session().query(Like).filter_by(target_id=tweet_id).count() == 0
        assert client.delete(f"/api/v1/tweets/{tweet_id}", headers=bearer(access_token)).status_code == 404


class TestComments:

    def test_add_and_paginate(self, client, user_session, make_video):
        user_id, access_token, _ = user_session
        video_id = make_video(user_id)
        for text in ("one", "two", "three"):
            res = client.post(f"/api/v1/comments/{video_id}", json={"content": text}, headers=bearer(access_token))
            assert res.status_code == 201

        page = client.get(f"/api/v1/comments/{video_id}?page=2&limit=2").get_json()["data"]

        assert [c["content"] for c in page["comments"]] == ["three"]
        assert page["meta"] == {"page": 2, "limit": 2, "total": 3}
        assert page["comments"][0]["videoId"] == video_id

    def test_bad_pagination(self, client, user_session, make_video):
        video_id = make_video(user_session[0])

        assert client.get(f"/api/v1/comments/{video_id}?page=abc").status_code == 400

    def test_unknown_video(self, client, user_session):
        _, access_token, _ = user_session

        res = client.post(f"/api/v1/comments/{uuid.uuid4()}", json={"content": "x"}, headers=bearer(access_token))

        assert res.status_code == 404

    def test_update_and_delete_by_owner_only(self, client, user_session, other_session, make_video):
        user_id, access_token, _ = user_session
        _, other_token, _ = other_session
        video_id = make_video(user_id)
        comment_id = client.post(
            f"/api/v1/comments/{video_id}", json={"content": "hi"}, headers=bearer(access_token)
        ).get_json()["data"]["id"]

        assert client.patch(
            f"/api/v1/comments/c/{comment_id}", json={"content": "no"}, headers=bearer(other_token)
        ).status_code == 403
        updated = client.patch(
            f"/api/v1/comments/c/{comment_id}", json={"content": "hello"}, headers=bearer(access_token)
        )
        assert updated.get_json()["data"]["content"] == "hello"

        assert client.delete(f"/api/v1/comments/c/{comment_id}", headers=bearer(other_token)).status_code == 403
        assert client.delete(f"/api/v1/comments/c/{comment_id}", headers=bearer(access_token)).status_code == 200
        assert client.get(f"/api/v1/comments/{video_id}").get_json()["data"]["meta"]["total"] == 0

    def test_delete_removes_comment_likes(self, app, client, user_session, other_session, make_video):
        user_id, access_token, _ = user_session
        _, other_token, _ = other_session
        video_id = make_video(user_id)
        comment_id = client.post(
            f"/api/v1/comments/{video_id}", json={"content": "liked"}, headers=bearer(access_token)
        ).get_json()["data"]["id"]
        other_comment_id = client.post(
            f"/api/v1/comments/{video_id}", json={"content": "stays"}, headers=bearer(access_token)
        ).get_json()["data"]["id"]
        for token in (access_token, other_token):
            client.post(f"/api/v1/likes/toggle/comment/{comment_id}", headers=bearer(token))
        client.post(f"/api/v1/likes/toggle/comment/{other_comment_id}", headers=bearer(other_token))

        res = client.delete(f"/api/v1/comments/c/{comment_id}", headers=bearer(access_token))

        assert res.status_code == 200
        with app.app_context():
            session = storage.get_session()
            assert session.query(Like).filter_by(target_id=comment_id).count() == 0
            assert session.query(Like).filter_by(target_id=other_comment_id).count() == 1
