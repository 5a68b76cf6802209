from __future__ import annotations

from flask import Blueprint, request, g

from models import storage
from models.comment import Comment
from models.video import Video
from models.like import Like, LikeTarget
from models.base_model import is_valid_id
from models.schemas.content import ContentSchema, CommentOutSchema
from api.errors import ValidationError, NotFoundError, ForbiddenError
from api.utils.pagination import parse_pagination
from api.utils.response import api_response
from utils.decorators import jwt_required

bp = Blueprint("comments", __name__)

content_schema = ContentSchema()
comment_out_schema = CommentOutSchema()
comments_out_schema = CommentOutSchema(many=True)


def _get_video(video_id: str) -> Video:
    if not is_valid_id(video_id):
        raise ValidationError("Invalid video id")
    video = storage.get(Video, video_id)
    if not video:
        raise NotFoundError("Video not found")
    return video


def _get_owned_comment(comment_id: str) -> Comment:
    if not is_valid_id(comment_id):
        raise ValidationError("Invalid comment id")
    comment = storage.get(Comment, comment_id)
    if not comment:
        raise NotFoundError("Comment not found")
    if comment.owner_id != g.current_user.id:
        raise ForbiddenError("You can only modify your own comments")
    return comment


@bp.get("/<video_id>")
def get_video_comments(video_id: str):
    """
    List comments on a video, oldest first
    ---
    tags:
      - Comments
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
    responses:
      200: { description: OK }
      404: { description: Video not found }
    """
    video = _get_video(video_id)
    page, limit = parse_pagination(default_limit=10)

    session = storage.get_session()
    query = session.query(Comment).filter(Comment.video_id == video.id)
    total = query.count()
    rows = (
        query.order_by(Comment.created_at.asc(), Comment.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return api_response(
        {
            "comments": comments_out_schema.dump(rows),
            "meta": {"page": page, "limit": limit, "total": total},
        },
        "Comments fetched successfully",
    )


@bp.post("/<video_id>")
@jwt_required()
def add_comment(video_id: str):
    """
    Comment on a video
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      -  in: body
         name: body
         schema:
           type: object
           properties:
             content: { type: string }
    responses:
      201: { description: Created }
      404: { description: Video not found }
    """
    video = _get_video(video_id)
    data = content_schema.load(request.get_json(silent=True) or {})
    comment = Comment(content=data["content"], video_id=video.id, owner_id=g.current_user.id)
    storage.new(comment)
    storage.save()
    return api_response(comment_out_schema.dump(comment), "Comment added successfully", 201)


@bp.patch("/c/<comment_id>")
@jwt_required()
def update_comment(comment_id: str):
    """
    Edit a comment (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200: { description: Updated }
      403: { description: Not the owner }
    """
    comment = _get_owned_comment(comment_id)
    data = content_schema.load(request.get_json(silent=True) or {})
    comment.content = data["content"]
    comment.save()
    return api_response(comment_out_schema.dump(comment), "Comment updated successfully")


@bp.delete("/c/<comment_id>")
@jwt_required()
def delete_comment(comment_id: str):
    """
    Delete a comment (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
    """
    comment = _get_owned_comment(comment_id)
    session = storage.get_session()
    session.query(Like).filter(
        Like.target_kind == LikeTarget.COMMENT, Like.target_id == comment.id
    ).delete(synchronize_session=False)
    comment.delete()
    storage.save()
    return api_response({"id": comment_id}, "Comment deleted successfully")
