import logging


logger = logging.getLogger(__name__)

POSTS_EVENT = "posts"

NEW_POST = "newPost"
UPDATE_POST = "updatePost"
DELETE_POST = "deletePost"


class NotificationBroadcaster:
    """Fans post changes out to every connected Socket.IO client.

    Delivery is best effort: nothing is stored, so a client that connects
    after an event was emitted never sees it.
    """

    def __init__(self, socketio, event=POSTS_EVENT):
        self._socketio = socketio
        self._event = event

    def publish(self, action, payload):
        message = {"action": action}
        message.update(payload)
        self._socketio.emit(self._event, message)
        logger.debug("Published %s on %s", action, self._event)

    def post_created(self, post_payload):
        self.publish(NEW_POST, {"post": post_payload})

    def post_updated(self, post_payload):
        self.publish(UPDATE_POST, {"post": post_payload})

    def post_deleted(self, post_id):
        self.publish(DELETE_POST, {"post_id": str(post_id)})
