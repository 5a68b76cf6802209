"""
Playlists blueprint:
- POST   /playlists
- GET    /playlists/user/<user_id>
- GET    /playlists/<playlist_id>
- PATCH  /playlists/<playlist_id>
- DELETE /playlists/<playlist_id>
- PATCH  /playlists/add/<video_id>/<playlist_id>
- PATCH  /playlists/remove/<video_id>/<playlist_id>

Only the owner may change a playlist. A video appears in a playlist at most once
(the join table's primary key), so adding it twice leaves one entry.
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, g
from sqlalchemy.exc import IntegrityError

from models import storage
from models.playlist import Playlist
from models.user import User
from models.video import Video
from models.base_model import is_valid_id
from models.schemas.playlist import PlaylistCreateSchema, PlaylistUpdateSchema, PlaylistOutSchema
from api.errors import ValidationError, NotFoundError, ForbiddenError
from api.utils.response import api_response
from utils.decorators import jwt_required

logger = logging.getLogger(__name__)

bp = Blueprint("playlists", __name__)

create_schema = PlaylistCreateSchema()
update_schema = PlaylistUpdateSchema()
out_schema = PlaylistOutSchema()
out_many_schema = PlaylistOutSchema(many=True)


def _get_playlist(playlist_id: str) -> Playlist:
    if not is_valid_id(playlist_id):
        raise ValidationError("Invalid playlist id")
    playlist = storage.get(Playlist, playlist_id)
    if not playlist:
        raise NotFoundError("Playlist not found")
    return playlist


def _get_owned_playlist(playlist_id: str) -> Playlist:
    playlist = _get_playlist(playlist_id)
    if playlist.owner_id != g.current_user.id:
        raise ForbiddenError("You can only modify your own playlists")
    return playlist


def _get_video(video_id: str) -> Video:
    if not is_valid_id(video_id):
        raise ValidationError("Invalid video id")
    video = storage.get(Video, video_id)
    if not video:
        raise NotFoundError("Video not found")
    return video


@bp.post("")
@jwt_required()
def create_playlist():
    """
    Create a playlist
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             name: { type: string }
             description: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Blank name
    """
    data = create_schema.load(request.get_json(silent=True) or {})
    playlist = Playlist(name=data["name"], description=data["description"], owner_id=g.current_user.id)
    storage.new(playlist)
    storage.save()
    logger.info("User %s created playlist %s", g.current_user.id, playlist.id)
    return api_response(out_schema.dump(playlist), "Playlist created successfully", 201)


@bp.get("/user/<user_id>")
def get_user_playlists(user_id: str):
    """
    List a user's playlists, newest first
    ---
    tags:
      - Playlists
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
        session.query(Playlist)
        .filter(Playlist.owner_id == user_id)
        .order_by(Playlist.created_at.desc(), Playlist.id.desc())
        .all()
    )
    return api_response(out_many_schema.dump(rows), "Playlists fetched successfully")


@bp.get("/<playlist_id>")
def get_playlist(playlist_id: str):
    """
    Get a playlist with its videos
    ---
    tags:
      - Playlists
    parameters:
      - { in: path, name: playlist_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    return api_response(out_schema.dump(_get_playlist(playlist_id)), "Playlist fetched successfully")


@bp.patch("/<playlist_id>")
@jwt_required()
def update_playlist(playlist_id: str):
    """
    Update a playlist's name and/or description (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: playlist_id, type: string, required: true }
      -  in: body
         name: body
         schema:
           type: object
           properties:
             name: { type: string }
             description: { type: string }
    responses:
      200: { description: Updated }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    playlist = _get_owned_playlist(playlist_id)
    data = update_schema.load(request.get_json(silent=True) or {})
    if "name" in data:
        playlist.name = data["name"]
    if "description" in data:
        playlist.description = data["description"]
    playlist.save()
    return api_response(out_schema.dump(playlist), "Playlist updated successfully")


@bp.delete("/<playlist_id>")
@jwt_required()
def delete_playlist(playlist_id: str):
    """
    Delete a playlist (owner only); the videos themselves are untouched
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: playlist_id, type: string, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    playlist = _get_owned_playlist(playlist_id)
    playlist.delete()
    storage.save()
    return api_response({"id": playlist_id}, "Playlist deleted successfully")


@bp.patch("/add/<video_id>/<playlist_id>")
@jwt_required()
def add_video_to_playlist(video_id: str, playlist_id: str):
    """
    Add a video to a playlist (owner only); adding it again is a no-op
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      - { in: path, name: playlist_id, type: string, required: true }
    responses:
      200: { description: Video is in the playlist }
      403: { description: Not the owner }
      404: { description: Playlist or video not found }
    """
    playlist = _get_owned_playlist(playlist_id)
    video = _get_video(video_id)

    if video not in playlist.videos:
        playlist.videos.append(video)
        try:
            storage.save()
        except IntegrityError:
            # Added by a concurrent request; the join row is already there
            logger.info("Video %s already in playlist %s, resyncing", video_id, playlist_id)
            playlist = _get_playlist(playlist_id)

    return api_response(out_schema.dump(playlist), "Video added to playlist")


@bp.patch("/remove/<video_id>/<playlist_id>")
@jwt_required()
def remove_video_from_playlist(video_id: str, playlist_id: str):
    """
    Remove a video from a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      - { in: path, name: playlist_id, type: string, required: true }
    responses:
      200: { description: Removed }
      403: { description: Not the owner }
      404: { description: Playlist or video not found, or video not in playlist }
    """
    playlist = _get_owned_playlist(playlist_id)
    video = _get_video(video_id)

    if video not in playlist.videos:
        raise NotFoundError("Video is not in this playlist")
    playlist.videos.remove(video)
    storage.save()
    return api_response(out_schema.dump(playlist), "Video removed from playlist")
