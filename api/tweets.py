from __future__ import annotations

from flask import Blueprint, request, g

from models import storage
from models.tweet import Tweet
from models.user import User
from models.like import Like, LikeTarget
from models.base_model import is_valid_id
from models.schemas.content import ContentSchema, TweetOutSchema
from api.errors import ValidationError, NotFoundError, ForbiddenError
from api.utils.response import api_response
from utils.decorators import jwt_required

bp = Blueprint("tweets", __name__)

content_schema = ContentSchema()
tweet_out_schema = TweetOutSchema()
tweets_out_schema = TweetOutSchema(many=True)


def _get_owned_tweet(tweet_id: str) -> Tweet:
    if not is_valid_id(tweet_id):
        raise ValidationError("Invalid tweet id")
    tweet = storage.get(Tweet, tweet_id)
    if not tweet:
        raise NotFoundError("Tweet not found")
    if tweet.owner_id != g.current_user.id:
        raise ForbiddenError("You can only modify your own tweets")
    return tweet


@bp.post("")
@jwt_required()
def create_tweet():
    """
    Create a tweet
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             content: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Blank content
    """
    data = content_schema.load(request.get_json(silent=True) or {})
    tweet = Tweet(content=data["content"], owner_id=g.current_user.id)
    storage.new(tweet)
    storage.save()
    return api_response(tweet_out_schema.dump(tweet), "Tweet created successfully", 201)


@bp.get("/user/<user_id>")
def get_user_tweets(user_id: str):
    """
    List a user's tweets, newest first
    ---
    tags:
      - Tweets
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    if not is_valid_id(user_id):
        raise ValidationError("Invalid user id")
    if not storage.get(User, user_id):
        raise NotFoundError("User not found")

    session = storage.get_session()
    rows = (
        session.query(Tweet)
        .filter(Tweet.owner_id == user_id)
        .order_by(Tweet.created_at.desc(), Tweet.id.desc())
        .all()
    )
    return api_response(tweets_out_schema.dump(rows), "Tweets fetched successfully")


@bp.patch("/<tweet_id>")
@jwt_required()
def update_tweet(tweet_id: str):
    """
    Update a tweet (owner only)
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tweet_id, type: string, required: true }
      -  in: body
         name: body
         schema:
           type: object
           properties:
             content: { type: string }
    responses:
      200: { description: Updated }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    tweet = _get_owned_tweet(tweet_id)
    data = content_schema.load(request.get_json(silent=True) or {})
    tweet.content = data["content"]
    tweet.save()
    return api_response(tweet_out_schema.dump(tweet), "Tweet updated successfully")


@bp.delete("/<tweet_id>")
@jwt_required()
def delete_tweet(tweet_id: str):
    """
    Delete a tweet (owner only); likes on it go with it
    ---
    tags:
      - Tweets
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tweet_id, type: string, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    tweet = _get_owned_tweet(tweet_id)
    session = storage.get_session()
    session.query(Like).filter(
        Like.target_kind == LikeTarget.TWEET, Like.target_id == tweet.id
    ).delete(synchronize_session=False)
    tweet.delete()
    storage.save()
    return api_response({"id": tweet_id}, "Tweet deleted successfully")
