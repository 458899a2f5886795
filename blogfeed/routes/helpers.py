from flask import request


def extract_bearer_token(auth=None):
    """Find the caller's token in a socket auth dict, the header or the query."""
    if isinstance(auth, dict):
        token = auth.get("token") or auth.get("access_token")
        if token:
            return token

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()

    return request.args.get("token")


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data
