from typing import Any

from fastapi import status

from app.utils.time import utcnow_iso


def api_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK,
) -> dict[str, Any]:
    """Wrap a payload in the uniform response envelope."""
    return {
        "statusCode": status_code,
        "message": message,
        "timestamp": utcnow_iso(),
        "data": data,
    }
