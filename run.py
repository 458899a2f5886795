import os

from blogfeed import create_app
from blogfeed.extensions.extensions import socketio

app = create_app()


if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
