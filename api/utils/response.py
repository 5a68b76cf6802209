from flask import jsonify


def api_response(data=None, message: str = "Success", status: int = 200):
    """Uniform success envelope returned by every view."""
    payload = {
        "statusCode": status,
        "data": data,
        "message": message,
        "success": status < 400,
    }
    return jsonify(payload), status
