from flask import Blueprint

from api.utils.response import api_response

bp = Blueprint("health", __name__)


@bp.get("/healthcheck")
def healthcheck():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            statusCode: { type: integer, example: 200 }
            data:
              type: object
              properties:
                status: { type: string, example: OK }
            message: { type: string }
            success: { type: boolean }
    """
    return api_response({"status": "OK"}, "Service is healthy")
