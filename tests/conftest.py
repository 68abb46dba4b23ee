"""Pytest 配置和 fixtures。"""

from __future__ import annotations

import contextlib
import sys
from pathlib import Path
from typing import Any, AsyncIterator

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent

# 添加 src 目录到 Python 路径
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from picsum_client import PicsumClient  # noqa: E402

# 上游返回的 id=1 元数据
DETAILS_1 = {
    "id": "1",
    "author": "Alejandro Escamilla",
    "width": 5000,
    "height": 3333,
    "url": "https://unsplash.com/photos/LNRyGwIJr5c",
    "download_url": "https://picsum.photos/id/1/5000/3333",
}

# 随机接口重定向到的图片 ID
RANDOM_ID = "237"

IMAGE_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"


def make_details(image_id: int) -> dict[str, Any]:
    """构造一条元数据。"""
    if image_id == 1:
        return dict(DETAILS_1)
    return {
        "id": str(image_id),
        "author": f"Author {image_id}",
        "width": 1000 + image_id,
        "height": 800 + image_id,
        "url": f"https://unsplash.com/photos/{image_id}",
        "download_url": f"https://picsum.photos/id/{image_id}/{1000 + image_id}/{800 + image_id}",
    }


def build_picsum_app(requests: list[dict[str, Any]] | None = None) -> web.Application:
    """上游服务的最小实现。

    Args:
        requests: 可选，记录收到的请求 (path + query)
    """
    log = requests if requests is not None else []

    async def record(request: web.Request) -> None:
        log.append({"path": request.path, "query": list(request.query.items())})

    async def details(request: web.Request) -> web.Response:
        await record(request)
        image_id = request.match_info["id"]
        if not image_id.isdigit():
            return web.Response(status=400, text="Invalid image id")
        return web.json_response(make_details(int(image_id)))

    async def image_list(request: web.Request) -> web.Response:
        await record(request)
        page = int(request.query.get("page", "1"))
        limit = int(request.query.get("limit", "30"))
        start = (page - 1) * limit
        return web.json_response([make_details(i) for i in range(start, start + limit)])

    async def image(request: web.Request) -> web.Response:
        await record(request)
        image_id = request.match_info["id"]
        if not image_id.isdigit():
            return web.Response(status=400, text="Invalid image id")
        content_type = "image/webp" if request.match_info["ext"] == "webp" else "image/jpeg"
        return web.Response(
            body=IMAGE_BYTES,
            content_type=content_type,
            headers={"Picsum-ID": image_id},
        )

    async def random_image(request: web.Request) -> web.Response:
        await record(request)
        m = request.match_info
        location = f"/id/{RANDOM_ID}/{m['width']}/{m['height']}.{m['ext']}"
        if request.query_string:
            location = f"{location}?{request.query_string}"
        raise web.HTTPFound(location=location)

    app = web.Application()
    app.router.add_get("/id/{id}/info", details)
    app.router.add_get("/v2/list", image_list)
    app.router.add_get(r"/id/{id}/{width:\d+}/{height:\d+}.{ext:jpg|webp}", image)
    app.router.add_get(r"/{width:\d+}/{height:\d+}.{ext:jpg|webp}", random_image)
    return app


def single_route_app(path: str, handler: Any) -> web.Application:
    """只有一个路由的应用，用于构造异常响应。"""
    app = web.Application()
    app.router.add_get(path, handler)
    return app


@contextlib.asynccontextmanager
async def running_client(app: web.Application, **kwargs: Any) -> AsyncIterator[PicsumClient]:
    """启动测试服务器并返回指向它的客户端。"""
    async with TestServer(app) as server:
        async with PicsumClient(base_url=f"http://{server.host}:{server.port}", **kwargs) as client:
            yield client


@pytest.fixture
def request_log() -> list[dict[str, Any]]:
    """上游收到的请求记录。"""
    return []


@pytest.fixture
def picsum_app(request_log: list[dict[str, Any]]) -> web.Application:
    """上游服务应用。"""
    return build_picsum_app(request_log)
