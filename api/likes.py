"""
Likes blueprint:
- POST /likes/toggle/video/<video_id>
- POST /likes/toggle/comment/<comment_id>
- POST /likes/toggle/tweet/<tweet_id>
- GET  /likes/videos

Toggling never does exists-then-insert. It deletes by the full composite key first;
if nothing was deleted it inserts, and a unique violation on that insert means a
concurrent request already added the like, so the existing row is returned instead.
"""
from __future__ import annotations

import logging

from flask import Blueprint, g
from sqlalchemy.exc import IntegrityError

from models import storage
from models.like import Like, LikeTarget
from models.video import Video
from models.comment import Comment
from models.tweet import Tweet
from models.base_model import is_valid_id
from models.schemas.like import LikeOutSchema, LikedVideoOutSchema
from api.errors import ValidationError, NotFoundError
from api.utils.response import api_response
from utils.decorators import jwt_required

logger = logging.getLogger(__name__)

bp = Blueprint("likes", __name__)

like_out_schema = LikeOutSchema()
liked_videos_out_schema = LikedVideoOutSchema(many=True)

TARGET_MODELS = {
    LikeTarget.VIDEO: Video,
    LikeTarget.COMMENT: Comment,
    LikeTarget.TWEET: Tweet,
}


def _delete_like(session, actor_id: str, target_id: str, kind: LikeTarget) -> int:
    return (
        session.query(Like)
        .filter(Like.liked_by_id == actor_id, Like.target_id == target_id, Like.target_kind == kind)
        .delete(synchronize_session=False)
    )


def _find_like(session, actor_id: str, target_id: str, kind: LikeTarget):
    return (
        session.query(Like)
        .filter(Like.liked_by_id == actor_id, Like.target_id == target_id, Like.target_kind == kind)
        .first()
    )


def toggle_like(actor_id: str, target_id: str, kind: LikeTarget) -> tuple[dict, str]:
    """Flip the like (actor, target, kind). Returns (data, "added" | "removed")."""
    if not is_valid_id(target_id):
        raise ValidationError(f"Invalid {kind.value} id")
    if storage.get(TARGET_MODELS[kind], target_id) is None:
        raise NotFoundError(f"{kind.value.capitalize()} not found")

    session = storage.get_session()
    deleted = _delete_like(session, actor_id, target_id, kind)
    if deleted:
        storage.save()
        data = {
            "likedBy": actor_id,
            "targetId": target_id,
            "targetKind": kind.value,
            "deletedCount": deleted,
        }
        return data, "removed"

    like = Like(liked_by_id=actor_id, target_id=target_id, target_kind=kind)
    storage.new(like)
    try:
        storage.save()
    except IntegrityError:
        # Someone else toggled it on between our delete and insert
        logger.info("Like %s/%s by %s already present, resyncing", kind.value, target_id, actor_id)
        like = _find_like(session, actor_id, target_id, kind)
        if like is None:
            raise
    return like_out_schema.dump(like), "added"


def _toggle_view(target_id: str, kind: LikeTarget):
    data, message = toggle_like(g.current_user.id, target_id, kind)
    return api_response(data, message)


@bp.post("/toggle/video/<video_id>")
@jwt_required()
def toggle_video_like(video_id: str):
    """
    Toggle the caller's like on a video
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
    responses:
      200:
        description: Like added or removed (see message)
      400:
        description: Malformed id
      404:
        description: Video not found
    """
    return _toggle_view(video_id, LikeTarget.VIDEO)


@bp.post("/toggle/comment/<comment_id>")
@jwt_required()
def toggle_comment_like(comment_id: str):
    """
    Toggle the caller's like on a comment
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: comment_id, type: string, required: true }
    responses:
      200:
        description: Like added or removed
    """
    return _toggle_view(comment_id, LikeTarget.COMMENT)


@bp.post("/toggle/tweet/<tweet_id>")
@jwt_required()
def toggle_tweet_like(tweet_id: str):
    """
    Toggle the caller's like on a tweet
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tweet_id, type: string, required: true }
    responses:
      200:
        description: Like added or removed
    """
    return _toggle_view(tweet_id, LikeTarget.TWEET)


@bp.get("/videos")
@jwt_required()
def liked_videos():
    """
    List the videos the caller has liked
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    responses:
      200:
        description: Liked videos, oldest like first
    """
    user = g.current_user
    session = storage.get_session()
    rows = (
        session.query(Like, Video)
        .join(Video, Video.id == Like.target_id)
        .filter(Like.liked_by_id == user.id, Like.target_kind == LikeTarget.VIDEO)
        .order_by(Like.created_at.asc(), Like.id.asc())
        .all()
    )
    items = [
        {"id": like.id, "liked_by": user, "video": video, "created_at": like.created_at}
        for like, video in rows
    ]
    return api_response(liked_videos_out_schema.dump(items), "Liked videos fetched successfully")
