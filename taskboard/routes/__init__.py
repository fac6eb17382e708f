from flask import request

from taskboard.errors import ValidationError


def json_body():
    """Decoded JSON request body; malformed or missing JSON is a 400."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Invalid JSON body")
    return payload
