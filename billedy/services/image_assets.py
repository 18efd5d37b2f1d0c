import re
from dataclasses import dataclass
from typing import Any

import cloudinary.uploader
import structlog

from billedy.config import settings

logger = structlog.get_logger()

_EXTENSION_RE = re.compile(r"\.[^/.]+$")

_client: "ImageAssetClient | None" = None


@dataclass(frozen=True)
class ImageAsset:
    url: str
    public_id: str


def extract_public_id(url: str, root_folder: str = "billedy") -> str | None:
    """Derive the storage identifier from a hosted image URL.

    ``https://res.cloudinary.com/demo/image/upload/v1/billedy/accounts/abc123.png``
    becomes ``billedy/accounts/abc123``. Returns None when the URL has no
    ``<root_folder>/`` segment.
    """
    match = re.search(rf"{re.escape(root_folder)}/[\w/-]+", url, re.ASCII)
    if not match:
        return None
    return _EXTENSION_RE.sub("", match.group(0))


class ImageAssetClient:
    """Uploads and deletes entity images on Cloudinary.

    Credentials are sent with every call instead of being written to the
    SDK's global config, so several clients can coexist in one process.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        root_folder: str = "billedy",
        default_folder: str = "entities",
        size: int = 128,
        uploader: Any = None,
    ) -> None:
        self.root_folder = root_folder
        self.default_folder = default_folder
        self.size = size
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }
        self._uploader = uploader if uploader is not None else cloudinary.uploader

    @property
    def transformation(self) -> list[dict[str, Any]]:
        return [
            {"width": self.size, "height": self.size, "crop": "fill"},
            {"quality": "auto"},
            {"fetch_format": "auto"},
        ]

    def folder_path(self, folder: str | None = None) -> str:
        return f"{self.root_folder}/{folder or self.default_folder}"

    def upload_asset(self, data: str, folder: str | None = None) -> ImageAsset:
        target = self.folder_path(folder)
        result = self._uploader.upload(
            data,
            folder=target,
            transformation=self.transformation,
            **self._credentials,
        )
        asset = ImageAsset(url=result["secure_url"], public_id=result.get("public_id", ""))
        logger.info("image_uploaded", folder=target, public_id=asset.public_id)
        return asset

    def upload(self, data: str, folder: str | None = None) -> str:
        return self.upload_asset(data, folder).url

    def destroy(self, public_id: str) -> str:
        result = self._uploader.destroy(public_id, **self._credentials)
        status = result.get("result", "") if isinstance(result, dict) else ""
        logger.info("image_destroyed", public_id=public_id, result=status)
        return status

    def delete(self, url: str) -> str | None:
        """Destroy the image behind ``url`` and return its public_id, or None when none can be derived."""
        public_id = extract_public_id(url, self.root_folder)
        if public_id is None:
            logger.warning("image_delete_skipped", url=url[:120], reason="no_public_id")
            return None
        self.destroy(public_id)
        return public_id

    def replace(self, data: str, previous_url: str | None, folder: str | None = None) -> ImageAsset:
        asset = self.upload_asset(data, folder)
        if previous_url:
            try:
                self.delete(previous_url)
            except Exception as e:
                logger.error("previous_image_delete_failed", url=previous_url[:120], error=str(e))
        return asset


def get_image_assets() -> ImageAssetClient:
    global _client
    if _client is None:
        _client = ImageAssetClient(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            root_folder=settings.image_root_folder,
            default_folder=settings.image_default_folder,
            size=settings.image_size,
        )
    return _client
