from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    request,
    stream_with_context,
)
from minio.error import S3Error
from werkzeug.http import http_date

from blogfeed.extensions.minio_client import get_minio_client

media_bp = Blueprint("media", __name__)

_MISSING_CODES = {"NoSuchKey", "NoSuchBucket", "NoSuchObject"}


def _quote_etag(value):
    value = str(value or "").strip().strip('"')
    return f'"{value}"' if value else None


def _image_headers(stat):
    max_age = max(int(current_app.config.get("MEDIA_CACHE_MAX_AGE_SECONDS", 0)), 0)
    headers = {
        "Cache-Control": f"public, max-age={max_age}",
        "Content-Type": getattr(stat, "content_type", None) or "application/octet-stream",
    }

    size = getattr(stat, "size", None)
    if size is not None:
        headers["Content-Length"] = str(size)

    etag = _quote_etag(getattr(stat, "etag", None))
    if etag:
        headers["ETag"] = etag

    last_modified = getattr(stat, "last_modified", None)
    if last_modified is not None:
        headers["Last-Modified"] = http_date(last_modified)

    return headers


def _etag_matches(if_none_match, etag):
    if not if_none_match or not etag:
        return False
    candidates = {part.strip().strip('"') for part in if_none_match.split(",")}
    return "*" in candidates or etag.strip('"') in candidates


def _storage_error(error):
    if isinstance(error, S3Error) and error.code in _MISSING_CODES:
        return jsonify({"message": "Image not found"}), 404
    return jsonify({"message": "Media unavailable"}), 503


@media_bp.route("/media/<path:object_name>", methods=["GET", "HEAD"])
def get_image(object_name: str):
    bucket = current_app.config["MINIO_BUCKET"]
    minio = get_minio_client()

    try:
        stat = minio.stat_object(bucket_name=bucket, object_name=object_name)
    except Exception as e:
        return _storage_error(e)

    headers = _image_headers(stat)
    if _etag_matches(request.headers.get("If-None-Match"), headers.get("ETag")):
        return Response(status=304, headers=headers)
    if request.method == "HEAD":
        return Response(status=200, headers=headers)

    try:
        minio_response = minio.get_object(bucket_name=bucket, object_name=object_name)
    except Exception as e:
        return _storage_error(e)

    chunk_size = max(
        int(current_app.config.get("MEDIA_STREAM_CHUNK_SIZE", 256 * 1024)),
        1024,
    )

    def _stream():
        try:
            yield from minio_response.stream(chunk_size)
        finally:
            minio_response.close()
            minio_response.release_conn()

    return Response(
        stream_with_context(_stream()),
        status=200,
        headers=headers,
        direct_passthrough=True,
    )
