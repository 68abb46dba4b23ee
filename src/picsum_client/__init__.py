"""Picsum 客户端。

picsum-client v0.1.0

Lorem Picsum 占位图服务的异步客户端：按 ID 或随机获取图片、
获取图片元数据及分页列表。

环境变量:
    PICSUM_BASE_URL: 服务地址（默认 https://picsum.photos）
    PICSUM_TIMEOUT: 自建会话的总超时（秒）
"""

from __future__ import annotations

__version__ = "0.1.0"

from .client import PICSUM_ID_HEADER, PicsumClient, map_status_error
from .config import (
    DEFAULT_BASE_URL,
    PicsumConfig,
    get_picsum_config,
    normalize_base_url,
)
from .errors import (
    InvalidRequest,
    InvalidResponse,
    RequestError,
    ServerError,
    UnexpectedError,
)
from .types import (
    MAX_BLUR,
    Image,
    ImageDetails,
    ImageFormat,
    ImageSettings,
)

__all__ = [
    "__version__",
    # Client
    "PicsumClient",
    "PICSUM_ID_HEADER",
    "map_status_error",
    # Config
    "DEFAULT_BASE_URL",
    "PicsumConfig",
    "get_picsum_config",
    "normalize_base_url",
    # Errors
    "RequestError",
    "InvalidRequest",
    "InvalidResponse",
    "ServerError",
    "UnexpectedError",
    # Types
    "MAX_BLUR",
    "ImageFormat",
    "ImageSettings",
    "Image",
    "ImageDetails",
]
