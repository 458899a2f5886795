import logging
import os
import uuid

from flask import current_app
from minio.error import S3Error

from blogfeed.errors import MediaStorageError, ValidationError
from blogfeed.extensions.minio_client import get_minio_client


logger = logging.getLogger(__name__)

ALLOWED_IMAGE_MIME_TYPES = {
    "image/png",
    "image/jpg",
    "image/jpeg",
}

LOCAL_PREFIX = "static/"
LOCAL_UPLOAD_PARTS = ("uploads", "posts")


def _extension_for_mimetype(mimetype: str) -> str:
    mapping = {
        "image/jpeg": "jpeg",
        "image/jpg": "jpg",
        "image/png": "png",
    }
    return mapping.get(mimetype, mimetype.split("/")[-1])


def _get_stream_and_length(file_storage):
    stream = getattr(file_storage, "stream", file_storage)
    try:
        stream.seek(0, 2)
        length = stream.tell()
        stream.seek(0)
        return stream, length
    except (AttributeError, OSError):
        return stream, -1


def _store_locally(file_storage, extension: str) -> str:
    filename = f"{uuid.uuid4()}.{extension}"
    relative_parts = [*LOCAL_UPLOAD_PARTS, filename]
    absolute_path = os.path.join(current_app.static_folder, *relative_parts)
    os.makedirs(os.path.dirname(absolute_path), exist_ok=True)

    stream = getattr(file_storage, "stream", None)
    if stream is not None and hasattr(stream, "seek"):
        stream.seek(0)

    file_storage.save(absolute_path)
    return LOCAL_PREFIX + "/".join(relative_parts)


def _local_path_for(ref: str):
    """Resolve a ``static/uploads/...`` reference, refusing anything outside it."""
    uploads_root = os.path.realpath(
        os.path.join(current_app.static_folder, LOCAL_UPLOAD_PARTS[0])
    )
    relative = ref[len(LOCAL_PREFIX):]
    candidate = os.path.realpath(os.path.join(current_app.static_folder, relative))
    if os.path.commonpath([uploads_root, candidate]) != uploads_root:
        return None
    return candidate


def store_image(file_storage) -> str:
    """Persist an uploaded image and return its reference.

    Objects go to MinIO under ``posts/``; when MinIO cannot be reached and
    the local fallback is enabled they land in the static uploads folder.
    """
    if not getattr(file_storage, "filename", ""):
        raise ValidationError("Image file is required")

    mimetype = getattr(file_storage, "mimetype", None) or ""
    if mimetype not in ALLOWED_IMAGE_MIME_TYPES:
        raise ValidationError(f"Unsupported media type: {mimetype}")

    extension = _extension_for_mimetype(mimetype)
    bucket = current_app.config["MINIO_BUCKET"]
    local_fallback_enabled = bool(
        current_app.config.get("MEDIA_LOCAL_FALLBACK_ENABLED", True)
    )

    try:
        minio = get_minio_client()
        if not minio.bucket_exists(bucket):
            minio.make_bucket(bucket)

        object_name = f"posts/{uuid.uuid4()}.{extension}"
        stream, length = _get_stream_and_length(file_storage)
        upload_kwargs = {
            "bucket_name": bucket,
            "object_name": object_name,
            "data": stream,
            "length": length,
            "content_type": mimetype,
        }
        if length == -1:
            upload_kwargs["part_size"] = 10 * 1024 * 1024

        minio.put_object(**upload_kwargs)
        return object_name
    except Exception as e:
        if not local_fallback_enabled:
            raise MediaStorageError("Media storage is unavailable") from e
        logger.warning("MinIO upload failed, storing image locally: %s", e)

    try:
        return _store_locally(file_storage, extension)
    except OSError as e:
        raise MediaStorageError("Media storage is unavailable") from e


def remove_image(ref: str):
    """Delete the file behind ``ref``. Raises on storage failures."""
    if ref.startswith(LOCAL_PREFIX):
        path = _local_path_for(ref)
        if path is None:
            raise ValueError(f"Refusing to delete outside uploads: {ref}")
        os.remove(path)
        return

    minio = get_minio_client()
    minio.remove_object(current_app.config["MINIO_BUCKET"], ref)


class ImageLifecycleManager:
    """Deletes superseded or orphaned images without failing the caller.

    ``spawn`` runs the deletion; it receives a callable and its arguments,
    matching ``SocketIO.start_background_task``. When omitted deletions run
    inline.
    """

    def __init__(self, app, spawn=None, remover=remove_image):
        self._app = app
        self._spawn = spawn
        self._remover = remover

    def replace(self, old_ref, new_ref):
        if old_ref and old_ref != new_ref:
            self._schedule(old_ref)

    def delete(self, ref):
        if ref:
            self._schedule(ref)

    def _schedule(self, ref):
        if self._spawn is None:
            self._run(ref)
            return
        self._spawn(self._run, ref)

    def _run(self, ref):
        with self._app.app_context():
            try:
                self._remover(ref)
                logger.info("Deleted image %s", ref)
            except FileNotFoundError:
                logger.info("Image %s already gone", ref)
            except (OSError, ValueError, S3Error) as e:
                logger.warning("Could not delete image %s: %s", ref, e)
            except Exception:
                logger.exception("Unexpected error deleting image %s", ref)
