from collections.abc import AsyncIterator, Iterator
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from billedy.main import app
from billedy.services.image_assets import ImageAssetClient, get_image_assets

SECURE_URL = "https://res.cloudinary.com/demo/image/upload/v1700000000/billedy/entities/abc123.png"


@pytest.fixture
def uploader() -> MagicMock:
    mock = MagicMock()
    mock.upload.return_value = {"secure_url": SECURE_URL, "public_id": "billedy/entities/abc123"}
    mock.destroy.return_value = {"result": "ok"}
    return mock


@pytest.fixture
def assets(uploader: MagicMock) -> ImageAssetClient:
    return ImageAssetClient(cloud_name="demo", api_key="key", api_secret="secret", uploader=uploader)


@pytest.fixture
def override_assets(assets: ImageAssetClient) -> Iterator[ImageAssetClient]:
    app.dependency_overrides[get_image_assets] = lambda: assets
    yield assets
    app.dependency_overrides.pop(get_image_assets, None)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
