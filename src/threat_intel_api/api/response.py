"""Response envelope helpers.

Successful calls return ``{"success": true, "data": ..., "meta": ...}``
(``meta`` only when present); failures return
``{"success": false, "error": {"code", "message", "details"?}}``.
"""

from typing import Any, Dict, Optional


def success_response(data: Any, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": data}
    if meta:
        body["meta"] = meta
    return body


def error_response(code: str, message: str, details: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}
