"""Picsum 异常类。

picsum-client v0.1.0

四类错误，均携带 message：
- InvalidRequest: 上游拒绝请求 (400)
- ServerError: 上游内部错误 (500)
- InvalidResponse: 成功响应但 JSON 无法解析
- UnexpectedError: 其他状态码、网络错误、响应头缺失等
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "RequestError",
    "InvalidRequest",
    "InvalidResponse",
    "ServerError",
    "UnexpectedError",
]


class RequestError(Exception):
    """Picsum 请求错误基类。

    Attributes:
        message: 错误消息
        status_code: HTTP 状态码（由状态码产生时）
        url: 请求的完整 URL
    """

    kind = "request_error"
    prefix = "Request failed"

    def __init__(self, message: str, status_code: int | None = None, url: str = "") -> None:
        self.message = message
        self.status_code = status_code
        self.url = url
        super().__init__(f"{self.prefix}: {message}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequestError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "status_code": self.status_code,
            "url": self.url,
        }


class InvalidRequest(RequestError):
    """请求参数被上游拒绝 (400)。"""
    kind = "invalid_request"
    prefix = "Request error"


class InvalidResponse(RequestError):
    """响应体无法解析为预期结构。"""
    kind = "invalid_response"
    prefix = "Invalid response"


class ServerError(RequestError):
    """上游内部错误 (500)。"""
    kind = "server_error"
    prefix = "Server error"


class UnexpectedError(RequestError):
    """兜底错误：其他状态码、网络错误、读取失败、缺少响应头。"""
    kind = "unexpected_error"
    prefix = "Unexpected error"
