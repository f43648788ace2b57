"""Query-parameter checks FastAPI's type system doesn't cover."""

import re
from datetime import datetime
from typing import Optional

from ..core.errors import ValidationError

# Extended-format datetime with an explicit offset: the store compares
# bounds as strings against stored ``observed_at`` values in this shape,
# so bare dates, basic format and space separators are refused.
_ISO_DATETIME = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})"
)


def iso_datetime(name: str, value: Optional[str]) -> Optional[str]:
    """Reject ``value`` unless it is a full ISO-8601 datetime.

    The input string is returned untouched so the store compares
    against exactly what the caller sent.
    """
    if value is None:
        return None
    try:
        if not _ISO_DATETIME.fullmatch(value):
            raise ValueError(value)
        datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            "Invalid request parameters",
            details=[{"loc": ["query", name], "msg": "Invalid datetime format"}],
        ) from None
    return value
