from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    retryable: Optional[bool] = None

    def __str__(self) -> str:
        return self.message


def error_response(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    retryable: Optional[bool] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "code": code,
        "message": message,
        "details": details or {},
    }
    if retryable is not None:
        payload["retryable"] = retryable
    return {"error": payload}
