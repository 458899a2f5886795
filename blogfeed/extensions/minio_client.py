from threading import Lock

import urllib3
from flask import current_app
from minio import Minio


_minio_lock = Lock()


def _client_settings(config):
    return (
        config["MINIO_ENDPOINT"],
        config["MINIO_ACCESS_KEY"],
        config["MINIO_SECRET_KEY"],
        config["MINIO_SECURE"],
        config["MINIO_CONNECT_TIMEOUT"],
        config["MINIO_READ_TIMEOUT"],
        config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
    )


def _build_client(config):
    http_client = urllib3.PoolManager(
        timeout=urllib3.Timeout(
            connect=config["MINIO_CONNECT_TIMEOUT"],
            read=config["MINIO_READ_TIMEOUT"],
        ),
        retries=False,
        maxsize=config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
    )
    return Minio(
        config["MINIO_ENDPOINT"],
        access_key=config["MINIO_ACCESS_KEY"],
        secret_key=config["MINIO_SECRET_KEY"],
        secure=config["MINIO_SECURE"],
        http_client=http_client,
    )


def get_minio_client():
    """Return the app's MinIO client, rebuilding it if the settings changed."""
    app = current_app._get_current_object()
    settings = _client_settings(app.config)

    with _minio_lock:
        cached = app.extensions.get("minio")
        if cached is not None and cached[0] == settings:
            return cached[1]

        client = _build_client(app.config)
        app.extensions["minio"] = (settings, client)
        return client
