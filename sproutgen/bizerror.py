"""Business errors mapped to HTTP and gRPC responses, plus health checking."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from http import HTTPStatus
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Protocol, Tuple

_HTTP_BY_SUFFIX = {
    1: HTTPStatus.BAD_REQUEST,
    2: HTTPStatus.UNAUTHORIZED,
    3: HTTPStatus.FORBIDDEN,
    4: HTTPStatus.NOT_FOUND,
    5: HTTPStatus.CONFLICT,
}

_GRPC_BY_SUFFIX = {
    1: "INVALID_ARGUMENT",
    2: "UNAUTHENTICATED",
    3: "PERMISSION_DENIED",
    4: "NOT_FOUND",
    5: "ALREADY_EXISTS",
}
_GRPC_INTERNAL = "INTERNAL"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class BizError(Exception):
    """A business error carrying a code (usually ServiceID*10000 + suffix) and a message."""

    def __init__(self, biz_code: int, biz_msg: str):
        super().__init__(biz_msg)
        self.biz_code = biz_code
        self.biz_msg = biz_msg


def _suffix(code: int) -> int:
    # Remainder truncated toward zero, so negative codes keep their sign.
    rem = abs(code) % 10000
    return -rem if code < 0 else rem


def _chain(err: Optional[BaseException]) -> Iterator[BaseException]:
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = err.__cause__


def http_status_for(biz_code: int) -> HTTPStatus:
    """Return the HTTP status for a business code, chosen by its last four digits."""
    return _HTTP_BY_SUFFIX.get(_suffix(biz_code), HTTPStatus.INTERNAL_SERVER_ERROR)


def map_to_http(err: Optional[BaseException]) -> Optional[Tuple[HTTPStatus, Dict[str, Any]]]:
    """Return the (status, JSON body) for ``err``; None when there is no error.

    A BizError anywhere in the ``__cause__`` chain decides the response;
    any other error becomes a 500 with code 0.
    """
    if err is None:
        return None
    biz = next((e for e in _chain(err) if isinstance(e, BizError)), None)
    if biz is not None:
        return http_status_for(biz.biz_code), {"code": biz.biz_code, "message": biz.biz_msg}
    return HTTPStatus.INTERNAL_SERVER_ERROR, {"code": 0, "message": "internal error"}


def grpc_code_for(biz_code: int) -> str:
    """Return the gRPC status code name for a business code's last four digits."""
    return _GRPC_BY_SUFFIX.get(_suffix(biz_code), _GRPC_INTERNAL)


def map_to_grpc(err: Optional[BaseException]) -> Optional[Tuple[str, str]]:
    """Return the (gRPC code name, message) for ``err``; None when there is no error."""
    if err is None:
        return None
    if isinstance(err, BizError):
        return grpc_code_for(err.biz_code), err.biz_msg
    return _GRPC_INTERNAL, str(err)


def _escape_html(text: str) -> str:
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


@dataclass
class ErrorDetail:
    """Extra error information: business code, message and request ID."""

    biz_code: int = 0
    biz_msg: str = ""
    request_id: str = ""

    def to_json(self) -> str:
        """Serialise to a compact JSON object."""
        data = {
            "biz_code": self.biz_code,
            "biz_msg": self.biz_msg,
            "request_id": self.request_id,
        }
        return _escape_html(json.dumps(data, ensure_ascii=False, separators=(",", ":")))

    @staticmethod
    def from_json(data: str) -> "ErrorDetail":
        """Parse a JSON object; raise ValueError if it is malformed or mistyped."""
        decoded = json.loads(data)
        detail = ErrorDetail()
        if decoded is None:
            return detail
        if not isinstance(decoded, dict):
            raise ValueError("error detail must be a JSON object")

        code = decoded.get("biz_code")
        if code is not None:
            if isinstance(code, bool) or not isinstance(code, int):
                raise ValueError("biz_code must be an integer")
            if not _INT32_MIN <= code <= _INT32_MAX:
                raise ValueError("biz_code out of range")
            detail.biz_code = code
        for key in ("biz_msg", "request_id"):
            value = decoded.get(key)
            if value is not None:
                if not isinstance(value, str):
                    raise ValueError(f"{key} must be a string")
                setattr(detail, key, value)
        return detail


class HealthStatus(IntEnum):
    """Serving status as in the gRPC health checking protocol."""

    UNKNOWN = 0
    SERVING = 1
    NOT_SERVING = 2


class _Checker(Protocol):
    def check(self) -> None: ...


class HealthServer:
    """Per-service health checks; a checker signals failure by raising."""

    def __init__(self) -> None:
        self._checkers: Dict[str, _Checker] = {}

    def register(self, service: str, checker: _Checker) -> None:
        """Register the checker for ``service``, replacing any earlier one."""
        self._checkers[service] = checker

    def check(self, service: str = "") -> HealthStatus:
        """Return SERVING for the empty name, UNKNOWN for unregistered services."""
        if not service:
            return HealthStatus.SERVING
        checker = self._checkers.get(service)
        if checker is None:
            return HealthStatus.UNKNOWN
        try:
            checker.check()
        except Exception:
            return HealthStatus.NOT_SERVING
        return HealthStatus.SERVING


class PingChecker:
    """Health checker that calls a ping function, such as a database or Redis ping."""

    def __init__(self, ping: Callable[[], Any]):
        self._ping = ping

    def check(self) -> None:
        """Call the ping function; its exception means unhealthy."""
        self._ping()


def readiness(checks: Iterable[Callable[[], bool]]) -> Tuple[HTTPStatus, Dict[str, str]]:
    """Return 503 "not ready" if any check returns False, else 200 "ready"."""
    for check in checks:
        if not check():
            return HTTPStatus.SERVICE_UNAVAILABLE, {"status": "not ready"}
    return HTTPStatus.OK, {"status": "ready"}