import logging

from flask import request, session
from flask_socketio import emit

from blogfeed.extensions.extensions import socketio
from blogfeed.routes.helpers import extract_bearer_token
from blogfeed.services.credential_service import verify_token

logger = logging.getLogger(__name__)


def handle_connect(auth=None):
    identity = verify_token(extract_bearer_token(auth))
    if identity is None:
        return False

    user_id, _ = identity
    session["user_id"] = user_id
    logger.debug("Listener %s connected as user %s", request.sid, user_id)
    emit("connected", {"user_id": user_id})


def handle_disconnect(reason=None):
    logger.debug("Listener for user %s disconnected", session.get("user_id"))


def register_socket_events():
    # Must run after socketio.init_app: handlers bind to the current server.
    socketio.on_event("connect", handle_connect)
    socketio.on_event("disconnect", handle_disconnect)
