"""
Subscriptions blueprint:
- POST /subscriptions/c/<channel_id>   toggle the caller's subscription to a channel

Toggles the same way likes do: delete by the pair, insert when nothing was deleted,
and treat a unique violation on insert as "already subscribed".
"""
from __future__ import annotations

import logging

from flask import Blueprint, g
from sqlalchemy.exc import IntegrityError

from models import storage
from models.subscription import Subscription
from models.user import User
from models.base_model import is_valid_id
from api.errors import ValidationError, NotFoundError
from api.utils.response import api_response
from utils.decorators import jwt_required

logger = logging.getLogger(__name__)

bp = Blueprint("subscriptions", __name__)


def _pair_filter(query, subscriber_id: str, channel_id: str):
    return query.filter(
        Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel_id
    )


@bp.post("/c/<channel_id>")
@jwt_required()
def toggle_subscription(channel_id: str):
    """
    Toggle the caller's subscription to a channel
    ---
    tags:
      - Subscriptions
    security:
      - Bearer: []
    parameters:
      - { in: path, name: channel_id, type: string, required: true }
    responses:
      200:
        description: Subscription added or removed (see message)
      400:
        description: Malformed id, or subscribing to yourself
      404:
        description: Channel not found
    """
    if not is_valid_id(channel_id):
        raise ValidationError("Invalid channel id")
    if storage.get(User, channel_id) is None:
        raise NotFoundError("Channel not found")
    subscriber_id = g.current_user.id
    if subscriber_id == channel_id:
        raise ValidationError("You cannot subscribe to your own channel")

    session = storage.get_session()
    data = {"subscriber": subscriber_id, "channel": channel_id}
    deleted = _pair_filter(session.query(Subscription), subscriber_id, channel_id).delete(
        synchronize_session=False
    )
    if deleted:
        storage.save()
        return api_response({**data, "subscribed": False}, "removed")

    storage.new(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))
    try:
        storage.save()
    except IntegrityError:
        logger.info("Subscription %s -> %s already present", subscriber_id, channel_id)
        if _pair_filter(session.query(Subscription), subscriber_id, channel_id).first() is None:
            raise
    return api_response({**data, "subscribed": True}, "added")
