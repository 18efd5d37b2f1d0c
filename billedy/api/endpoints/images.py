import cloudinary.exceptions
import structlog
from fastapi import APIRouter, Depends

from billedy.core.exceptions import AppError
from billedy.schemas.images import (
    ImageDeleteRequest,
    ImageDeleteResponse,
    ImageReplaceRequest,
    ImageUploadRequest,
    ImageUploadResponse,
)
from billedy.services.image_assets import ImageAssetClient, get_image_assets
from billedy.services.image_inspection import InvalidImageError, inspect_image, to_data_url

logger = structlog.get_logger()

router = APIRouter(prefix="/images")


def _validate_folder(folder: str | None) -> None:
    if folder is None:
        return
    if not folder or ".." in folder or "/" in folder:
        raise AppError(status_code=400, detail="Invalid folder")


def _prepare_image(data: str) -> str:
    try:
        inspect_image(data)
        return to_data_url(data)
    except InvalidImageError as e:
        raise AppError(status_code=400, detail=str(e)) from e


@router.post("", response_model=ImageUploadResponse)
def upload_image(
    body: ImageUploadRequest,
    assets: ImageAssetClient = Depends(get_image_assets),
) -> ImageUploadResponse:
    _validate_folder(body.folder)
    data_url = _prepare_image(body.data)
    try:
        asset = assets.upload_asset(data_url, body.folder)
    except cloudinary.exceptions.Error as e:
        logger.error("image_upload_failed", folder=body.folder, error=str(e))
        raise AppError(status_code=502, detail="Failed to upload image") from e
    return ImageUploadResponse(url=asset.url, public_id=asset.public_id)


@router.post("/replace", response_model=ImageUploadResponse)
def replace_image(
    body: ImageReplaceRequest,
    assets: ImageAssetClient = Depends(get_image_assets),
) -> ImageUploadResponse:
    _validate_folder(body.folder)
    data_url = _prepare_image(body.data)
    try:
        asset = assets.replace(data_url, body.previous_url, body.folder)
    except cloudinary.exceptions.Error as e:
        logger.error("image_replace_failed", folder=body.folder, error=str(e))
        raise AppError(status_code=502, detail="Failed to upload image") from e
    return ImageUploadResponse(url=asset.url, public_id=asset.public_id)


@router.delete("", response_model=ImageDeleteResponse)
def delete_image(
    body: ImageDeleteRequest,
    assets: ImageAssetClient = Depends(get_image_assets),
) -> ImageDeleteResponse:
    try:
        if body.public_id is not None:
            assets.destroy(body.public_id)
            return ImageDeleteResponse(deleted=True, public_id=body.public_id)
        public_id = assets.delete(body.url or "")
    except cloudinary.exceptions.Error as e:
        logger.error("image_delete_failed", error=str(e))
        raise AppError(status_code=502, detail="Failed to delete image") from e
    return ImageDeleteResponse(deleted=public_id is not None, public_id=public_id)
