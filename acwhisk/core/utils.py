import re
import uuid
from datetime import datetime, timezone
from typing import Any

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: Any) -> bool:
    """True for RFC 4122 UUID strings of versions 1-5."""
    if not value or not isinstance(value, str):
        return False
    return UUID_PATTERN.match(value) is not None


def generate_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
