"""Success envelope shared by every route: {success, message?, data?}."""

from typing import Any, Dict, Optional


def envelope(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body
