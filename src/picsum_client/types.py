"""Picsum 类型定义。

picsum-client v0.1.0
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any
from urllib.parse import urlencode

__all__ = [
    "MAX_BLUR",
    "ImageFormat",
    "ImageSettings",
    "Image",
    "ImageDetails",
]

# 服务端允许的最大模糊度
MAX_BLUR = 10

# 原生宽度限制（u16 / u8）
_U16_MAX = 0xFFFF
_U8_MAX = 0xFF

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 400


def _check_int(name: str, value: Any, upper: int) -> int:
    """校验整数字段（拒绝 bool）。"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= upper:
        raise ValueError(f"{name} must be between 0 and {upper}, got {value}")
    return value


class ImageFormat(str, Enum):
    """输出图片格式。"""
    JPEG = "jpg"
    WEBP = "webp"

    @property
    def extension(self) -> str:
        """文件扩展名（用于路径构建）。"""
        return self.value


@dataclass(frozen=True)
class ImageSettings:
    """图片请求参数。

    Attributes:
        width: 宽度（像素）
        height: 高度（像素）
        grayscale: 是否灰度
        blur: 模糊度，超过 10 时按 10 发送
        format: 输出格式
    """
    width: int
    height: int
    grayscale: bool = False
    blur: int = 0
    format: ImageFormat = ImageFormat.JPEG

    def __post_init__(self) -> None:
        _check_int("width", self.width, _U16_MAX)
        _check_int("height", self.height, _U16_MAX)
        _check_int("blur", self.blur, _U8_MAX)
        if not isinstance(self.grayscale, bool):
            raise TypeError(f"grayscale must be a bool, got {type(self.grayscale).__name__}")
        if not isinstance(self.format, ImageFormat):
            # frozen dataclass: 绕过 __setattr__ 做类型归一化
            object.__setattr__(self, "format", ImageFormat(self.format))

    @classmethod
    def default(cls) -> ImageSettings:
        """400x400 JPEG，无灰度、无模糊。"""
        return cls(width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT)

    @classmethod
    def square(cls, size: int, **kwargs: Any) -> ImageSettings:
        """正方形图片。"""
        return cls(width=size, height=size, **kwargs)

    def effective_blur(self) -> int:
        """实际发送的模糊度。"""
        return min(self.blur, MAX_BLUR)

    def has_blur(self) -> bool:
        return self.blur > 0

    def is_grayscale(self) -> bool:
        return self.grayscale

    def query_params(self) -> list[tuple[str, str]]:
        """生成查询参数，默认值不输出。

        Returns:
            (key, value) 列表，顺序固定为 grayscale, blur
        """
        params: list[tuple[str, str]] = []
        if self.is_grayscale():
            params.append(("grayscale", "true"))
        if self.has_blur():
            params.append(("blur", str(self.effective_blur())))
        return params

    def encode_query(self) -> str:
        """URL 编码后的查询字符串（无参数时为空字符串）。"""
        return urlencode(self.query_params())


@dataclass(frozen=True)
class Image:
    """图片数据。

    Attributes:
        id: 图片 ID（来自 picsum-id 响应头）
        data: 原始响应体
    """
    id: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Image(id={self.id!r}, size={self.size})"


@dataclass(frozen=True)
class ImageDetails:
    """图片元数据。

    Attributes:
        id: 图片 ID
        author: 作者
        width: 原图宽度
        height: 原图高度
        url: 来源页面
        download_url: 下载地址
    """
    id: str
    author: str
    width: int
    height: int
    url: str
    download_url: str

    @classmethod
    def from_dict(cls, data: Any) -> ImageDetails:
        """从 JSON 对象解析，所有字段必填。

        Raises:
            ValueError: 非对象、缺少字段或字段类型错误
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        values: dict[str, Any] = {}
        for name, kind in _DETAILS_FIELDS:
            if name not in data:
                raise ValueError(f"missing field `{name}`")
            value = data[name]
            if kind is int:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"invalid type for `{name}`: expected integer")
                if not 0 <= value <= _U16_MAX:
                    raise ValueError(f"invalid value for `{name}`: {value} out of range")
            elif not isinstance(value, str):
                raise ValueError(f"invalid type for `{name}`: expected string")
            values[name] = value
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_DETAILS_FIELDS: tuple[tuple[str, type], ...] = (
    ("id", str),
    ("author", str),
    ("width", int),
    ("height", int),
    ("url", str),
    ("download_url", str),
)
