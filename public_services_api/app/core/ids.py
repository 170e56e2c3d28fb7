"""Record identifier generation."""

import secrets
import string
import time


_ALPHABET = string.digits + string.ascii_lowercase


def generate_id() -> str:
    """Return a new record id of the form ``<epoch-millis>-<9 base36 chars>``."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"{millis}-{suffix}"
