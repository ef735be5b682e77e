# backend/cafeteria/routes/assistant.py
from flask import Blueprint, request

from ..services.assistant_service import AssistantError, assistant_reply


assistant_bp = Blueprint("assistant", __name__, url_prefix="/api/assistant")


@assistant_bp.post("/messages")
def post_message():
    """Body: {"message": "anything spicy?"} -> {"message": "<reply>"}"""
    payload = request.get_json(silent=True) or {}

    try:
        reply = assistant_reply(payload.get("message"))
    except AssistantError as e:
        return {"error": str(e)}, 400

    return {"message": reply}, 200
