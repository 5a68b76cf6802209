"""
Dashboard blueprint (the caller's own channel):
- GET /dashboard/stats
- GET /dashboard/videos
"""
from __future__ import annotations

from flask import Blueprint, g
from sqlalchemy import func

from models import storage
from models.video import Video
from models.like import Like, LikeTarget
from models.subscription import Subscription
from models.schemas.content import VideoOutSchema
from api.utils.pagination import parse_pagination
from api.utils.response import api_response
from utils.decorators import jwt_required

bp = Blueprint("dashboard", __name__)

videos_out_schema = VideoOutSchema(many=True)


@bp.get("/stats")
@jwt_required()
def channel_stats():
    """
    Totals for the caller's channel
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    responses:
      200:
        description: totalVideos, totalViews, totalLikes (on the channel's videos) and totalSubscribers
    """
    channel_id = g.current_user.id
    session = storage.get_session()

    total_videos, total_views = (
        session.query(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
        .filter(Video.owner_id == channel_id)
        .one()
    )
    total_likes = (
        session.query(func.count(Like.id))
        .join(Video, Video.id == Like.target_id)
        .filter(Like.target_kind == LikeTarget.VIDEO, Video.owner_id == channel_id)
        .scalar()
    )
    total_subscribers = (
        session.query(func.count(Subscription.id))
        .filter(Subscription.channel_id == channel_id)
        .scalar()
    )

    stats = {
        "totalVideos": total_videos,
        "totalViews": int(total_views),
        "totalLikes": total_likes,
        "totalSubscribers": total_subscribers,
    }
    return api_response(stats, "Channel stats fetched successfully")


@bp.get("/videos")
@jwt_required()
def channel_videos():
    """
    The caller's uploaded videos, newest first (published or not)
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, required: false }
      - { in: query, name: limit, type: integer, required: false }
    responses:
      200:
        description: Videos plus page/limit/total
      400:
        description: Non-integer page or limit
    """
    page, limit = parse_pagination()
    session = storage.get_session()
    query = session.query(Video).filter(Video.owner_id == g.current_user.id)
    total = query.count()
    rows = (
        query.order_by(Video.created_at.desc(), Video.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    body = {
        "videos": videos_out_schema.dump(rows),
        "meta": {"page": page, "limit": limit, "total": total},
    }
    return api_response(body, "Channel videos fetched successfully")
