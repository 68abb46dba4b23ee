"""Picsum API 客户端。

picsum-client v0.1.0

使用 aiohttp 异步调用 Lorem Picsum (https://picsum.photos)：
1. GET /id/{id}/{width}/{height}.{ext}   指定图片
2. GET /{width}/{height}.{ext}           随机图片
3. GET /id/{id}/info                     图片元数据
4. GET /v2/list?page=&limit=             元数据列表

每次调用只发送一个请求，不重试、不缓存。
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from http import HTTPStatus
from typing import Any, Awaitable, Callable, TypeVar
from urllib.parse import quote

import aiohttp

from .config import PicsumConfig, get_picsum_config, normalize_base_url
from .errors import (
    InvalidRequest,
    InvalidResponse,
    RequestError,
    ServerError,
    UnexpectedError,
)
from .types import _U8_MAX, _U16_MAX, Image, ImageDetails, ImageSettings, _check_int

__all__ = ["PicsumClient", "PICSUM_ID_HEADER", "map_status_error"]

logger = logging.getLogger(__name__)

# 图片接口返回真实图片 ID 的响应头
PICSUM_ID_HEADER = "picsum-id"

# 列表接口默认分页
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 30

# 事件回调类型
EventCallback = Callable[[dict[str, Any]], None]

# 传输层异常（未收到响应或读取中断）
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)

T = TypeVar("T")


def _error_text(exc: BaseException) -> str:
    """异常消息，空消息时使用异常类型名。"""
    return str(exc) or type(exc).__name__


def map_status_error(status: int, reason: str | None, url: str) -> RequestError:
    """将失败的 HTTP 状态码映射为错误类型。

    400 -> InvalidRequest, 500 -> ServerError, 其他 -> UnexpectedError。
    """
    if not reason:
        try:
            reason = HTTPStatus(status).phrase
        except ValueError:
            reason = ""
    side = "server" if status >= 500 else "client"
    status_text = f"{status} {reason}".strip()
    message = f"HTTP status {side} error ({status_text}) for url ({url})"

    if status == HTTPStatus.BAD_REQUEST:
        return InvalidRequest(message, status, url)
    if status == HTTPStatus.INTERNAL_SERVER_ERROR:
        return ServerError(message, status, url)
    return UnexpectedError(message, status, url)


def _parse_details_list(payload: Any) -> list[ImageDetails]:
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
    return [ImageDetails.from_dict(item) for item in payload]


class PicsumClient:
    """Picsum API 客户端。

    构造后不再修改，可在任意数量的并发调用间共享。

    Example:
        async with PicsumClient() as client:
            image = await client.get_image("1", ImageSettings(width=400, height=300))
            details = await client.get_image_details("1")
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        base_url: str | None = None,
        config: PicsumConfig | None = None,
        event_callback: EventCallback | None = None,
    ) -> None:
        """初始化客户端。

        Args:
            session: 外部 HTTP 会话（可选，不会被 close() 关闭）
            base_url: 服务地址（可选，优先于 config）
            config: 配置（可选，默认从环境变量加载）
            event_callback: 事件回调函数
        """
        self._config = config or get_picsum_config()
        self._base_url = normalize_base_url(base_url or self._config.base_url)
        self._event_callback = event_callback
        self._session = session
        self._owns_session = session is None

    def __repr__(self) -> str:
        return f"PicsumClient(base_url={self._base_url!r})"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def config(self) -> PicsumConfig:
        return self._config

    async def __aenter__(self) -> PicsumClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """获取或创建 HTTP 会话。"""
        if not self._owns_session:
            return self._session  # type: ignore[return-value]
        if self._session is None or self._session.closed:
            kwargs: dict[str, Any] = {}
            if self._config.timeout:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self._config.timeout)
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    async def close(self) -> None:
        """关闭自建的 HTTP 会话。"""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    def _emit_event(self, event: dict[str, Any]) -> None:
        """发送事件到回调。"""
        if self._event_callback:
            self._event_callback(event)

    # ------------------------------------------------------------------
    # URL 构建
    # ------------------------------------------------------------------

    def image_url(self, image_id: str | int, settings: ImageSettings) -> str:
        return (
            f"{self._base_url}/id/{quote(str(image_id), safe='')}"
            f"/{settings.width}/{settings.height}.{settings.format.extension}"
        )

    def random_image_url(self, settings: ImageSettings) -> str:
        return f"{self._base_url}/{settings.width}/{settings.height}.{settings.format.extension}"

    def details_url(self, image_id: str | int) -> str:
        return f"{self._base_url}/id/{quote(str(image_id), safe='')}/info"

    def list_url(self) -> str:
        return f"{self._base_url}/v2/list"

    # ------------------------------------------------------------------
    # 请求 / 响应处理
    # ------------------------------------------------------------------

    async def _request(
        self,
        url: str,
        params: list[tuple[str, str]],
        decode: Callable[[aiohttp.ClientResponse], Awaitable[T]],
    ) -> T:
        """发送 GET 请求，成功时交给 decode 解析，失败时抛出 RequestError。"""
        session = await self._get_session()
        request_id = uuid.uuid4().hex[:8]

        self._emit_event({
            "type": "api_request",
            "request_id": request_id,
            "url": url,
            "method": "GET",
            "params": dict(params),
        })
        logger.debug(f"[{request_id}] GET {url} params={params}")

        start_time = time.monotonic()
        try:
            async with session.get(url, params=params) as resp:
                duration_ms = int((time.monotonic() - start_time) * 1000)
                logger.debug(f"[{request_id}] {resp.status} in {duration_ms}ms")
                self._emit_event({
                    "type": "api_response",
                    "request_id": request_id,
                    "status_code": resp.status,
                    "duration_ms": duration_ms,
                    "headers": list(resp.headers.items()),
                })

                if resp.status >= 400:
                    raise map_status_error(resp.status, resp.reason, str(resp.url))

                return await decode(resp)

        except RequestError:
            raise
        except TRANSPORT_ERRORS as e:
            error = UnexpectedError(_error_text(e), url=url)
            self._emit_event({
                "type": "api_error",
                "request_id": request_id,
                "error": error.message,
                "kind": error.kind,
            })
            raise error from e

    @staticmethod
    async def _read_body(resp: aiohttp.ClientResponse) -> bytes:
        """读取完整响应体，失败时抛出 UnexpectedError。"""
        try:
            return await resp.read()
        except TRANSPORT_ERRORS as e:
            raise UnexpectedError(
                f"Couldn't read response body: {_error_text(e)}",
                url=str(resp.url),
            ) from e

    async def _decode_json(
        self,
        resp: aiohttp.ClientResponse,
        parse: Callable[[Any], T],
    ) -> T:
        body = await self._read_body(resp)
        try:
            return parse(json.loads(body))
        except (ValueError, RecursionError) as e:
            # JSONDecodeError / UnicodeDecodeError / 嵌套过深 / 字段校验失败
            raise InvalidResponse(str(e), url=str(resp.url)) from e

    async def _decode_image(self, resp: aiohttp.ClientResponse) -> Image:
        image_id = resp.headers.get(PICSUM_ID_HEADER)
        if image_id is None:
            raise UnexpectedError(
                f"Couldn't retrieve `{PICSUM_ID_HEADER}` header.",
                url=str(resp.url),
            )
        data = await self._read_body(resp)
        return Image(id=image_id, data=data)

    # ------------------------------------------------------------------
    # 公开接口
    # ------------------------------------------------------------------

    async def get_image_details(self, image_id: str | int) -> ImageDetails:
        """获取指定图片的元数据。

        Args:
            image_id: 图片 ID

        Returns:
            ImageDetails

        Raises:
            RequestError: 请求失败或响应无法解析
        """
        return await self._request(
            self.details_url(image_id),
            [],
            lambda resp: self._decode_json(resp, ImageDetails.from_dict),
        )

    async def get_images(
        self,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> list[ImageDetails]:
        """获取一页图片元数据。

        Args:
            page: 页码 (0-65535)
            limit: 每页数量 (0-255)

        Returns:
            ImageDetails 列表

        Raises:
            ValueError: 页码或数量超出范围
            RequestError: 请求失败或响应无法解析
        """
        _check_int("page", page, _U16_MAX)
        _check_int("limit", limit, _U8_MAX)
        return await self._request(
            self.list_url(),
            [("page", str(page)), ("limit", str(limit))],
            lambda resp: self._decode_json(resp, _parse_details_list),
        )

    async def get_image(
        self,
        image_id: str | int,
        settings: ImageSettings | None = None,
    ) -> Image:
        """获取指定 ID 的图片。

        Args:
            image_id: 图片 ID
            settings: 尺寸、灰度、模糊度和格式（默认 400x400 JPEG）

        Returns:
            Image，id 取自 picsum-id 响应头

        Raises:
            RequestError: 请求失败、缺少 picsum-id 响应头或读取失败
        """
        settings = settings or ImageSettings.default()
        return await self._request(
            self.image_url(image_id, settings),
            settings.query_params(),
            self._decode_image,
        )

    async def get_random_image(self, settings: ImageSettings | None = None) -> Image:
        """获取随机图片。

        Args:
            settings: 尺寸、灰度、模糊度和格式（默认 400x400 JPEG）

        Returns:
            Image，id 为服务端实际返回的图片 ID
        """
        settings = settings or ImageSettings.default()
        return await self._request(
            self.random_image_url(settings),
            settings.query_params(),
            self._decode_image,
        )
