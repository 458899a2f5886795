from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def coerce_id(value):
    """Turn an opaque id from a token or URL back into a primary key.

    Returns None for anything that cannot name a row, so lookups simply miss.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return None
