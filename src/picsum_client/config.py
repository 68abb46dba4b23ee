"""Picsum 客户端配置。

picsum-client v0.1.0

环境变量:
    PICSUM_BASE_URL: 服务地址（默认 https://picsum.photos）
    PICSUM_TIMEOUT: 自建会话的总超时（秒，空=使用 aiohttp 默认值）
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

__all__ = [
    "DEFAULT_BASE_URL",
    "PicsumConfig",
    "get_picsum_config",
    "normalize_base_url",
]

logger = logging.getLogger(__name__)

# 默认服务地址
DEFAULT_BASE_URL = "https://picsum.photos"


def normalize_base_url(url: str | None) -> str:
    """规范化 BASE_URL，去掉末尾斜杠；空值回退默认地址。"""
    url = (url or "").strip().rstrip("/")
    return url or DEFAULT_BASE_URL


def _parse_timeout(value: str) -> float | None:
    """解析超时秒数，无效值返回 None。"""
    value = value.strip()
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid PICSUM_TIMEOUT: {value!r}")
        return None
    if timeout <= 0:
        logger.warning(f"Ignoring non-positive PICSUM_TIMEOUT: {value!r}")
        return None
    return timeout


@dataclass(frozen=True)
class PicsumConfig:
    """Picsum 客户端配置。

    Attributes:
        base_url: 服务地址
        timeout: 自建会话的总超时（秒），None 表示沿用传输层默认值
    """
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None


def get_picsum_config() -> PicsumConfig:
    """从环境变量加载配置。

    Returns:
        PicsumConfig 实例
    """
    raw_url = os.environ.get("PICSUM_BASE_URL", DEFAULT_BASE_URL)
    timeout = _parse_timeout(os.environ.get("PICSUM_TIMEOUT", ""))

    return PicsumConfig(
        base_url=normalize_base_url(raw_url),
        timeout=timeout,
    )
