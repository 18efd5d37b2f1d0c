from unittest.mock import MagicMock

import cloudinary.exceptions
import pytest

from billedy.services import image_assets
from billedy.services.image_assets import ImageAsset, ImageAssetClient, extract_public_id

DATA_URL = "data:image/png;base64,iVBORw0KGgo="
TRANSFORMATION = [
    {"width": 128, "height": 128, "crop": "fill"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]


class TestExtractPublicId:
    def test_strips_extension_and_keeps_prefix(self) -> None:
        url = "https://res.cloudinary.com/demo/image/upload/v1/billedy/accounts/abc123.png"
        assert extract_public_id(url) == "billedy/accounts/abc123"

    def test_nested_folder(self) -> None:
        url = "https://res.cloudinary.com/demo/image/upload/billedy/entities/sub/img-1_a.webp"
        assert extract_public_id(url) == "billedy/entities/sub/img-1_a"

    def test_without_extension(self) -> None:
        assert extract_public_id("https://cdn/billedy/entities/abc") == "billedy/entities/abc"

    def test_no_match_returns_none(self) -> None:
        assert extract_public_id("https://example.com/images/abc123.png") is None

    def test_matches_ascii_word_characters_only(self) -> None:
        url = "https://res.cloudinary.com/demo/image/upload/billedy/entities/caf\u00e9-logo.png"
        assert extract_public_id(url) == "billedy/entities/caf"

    def test_custom_root_folder(self) -> None:
        url = "https://res.cloudinary.com/demo/image/upload/other/x.jpg"
        assert extract_public_id(url, root_folder="other") == "other/x"


class TestUpload:
    def test_uses_default_folder(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        assets.upload(DATA_URL)
        _, kwargs = uploader.upload.call_args
        assert kwargs["folder"] == "billedy/entities"

    def test_uses_given_folder(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        assets.upload(DATA_URL, "accounts")
        _, kwargs = uploader.upload.call_args
        assert kwargs["folder"] == "billedy/accounts"

    def test_requests_fixed_transformation(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        assets.upload(DATA_URL, "categories")
        args, kwargs = uploader.upload.call_args
        assert args == (DATA_URL,)
        assert kwargs["transformation"] == TRANSFORMATION

    def test_returns_secure_url_verbatim(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        uploader.upload.return_value = {"secure_url": "https://x/y/z.png?v=1", "public_id": "p"}
        assert assets.upload(DATA_URL) == "https://x/y/z.png?v=1"

    def test_passes_credentials_per_call(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        assets.upload(DATA_URL)
        _, kwargs = uploader.upload.call_args
        assert kwargs["cloud_name"] == "demo"
        assert kwargs["api_key"] == "key"
        assert kwargs["api_secret"] == "secret"

    def test_upload_asset_returns_public_id(self, assets: ImageAssetClient) -> None:
        asset = assets.upload_asset(DATA_URL)
        assert asset == ImageAsset(
            url="https://res.cloudinary.com/demo/image/upload/v1700000000/billedy/entities/abc123.png",
            public_id="billedy/entities/abc123",
        )

    def test_vendor_error_propagates(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        uploader.upload.side_effect = cloudinary.exceptions.Error("Invalid image file")
        with pytest.raises(cloudinary.exceptions.Error):
            assets.upload(DATA_URL)

    def test_each_call_uploads(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        assets.upload(DATA_URL)
        assets.upload(DATA_URL)
        assert uploader.upload.call_count == 2


class TestDelete:
    def test_destroys_derived_public_id(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        url = "https://res.cloudinary.com/demo/image/upload/v1/billedy/accounts/abc123.png"
        assert assets.delete(url) == "billedy/accounts/abc123"
        args, kwargs = uploader.destroy.call_args
        assert args == ("billedy/accounts/abc123",)
        assert kwargs["api_key"] == "key"

    def test_non_matching_url_is_noop(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        assert assets.delete("https://example.com/avatar.png") is None
        uploader.destroy.assert_not_called()

    def test_vendor_error_propagates(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        uploader.destroy.side_effect = cloudinary.exceptions.AuthorizationRequired("bad key")
        with pytest.raises(cloudinary.exceptions.Error):
            assets.delete("https://cdn/billedy/entities/abc.png")

    def test_destroy_returns_result(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        uploader.destroy.return_value = {"result": "not found"}
        assert assets.destroy("billedy/entities/gone") == "not found"


class TestReplace:
    def test_uploads_then_deletes_previous(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        asset = assets.replace(DATA_URL, "https://cdn/billedy/entities/old.png")
        assert asset.public_id == "billedy/entities/abc123"
        assert [c[0] for c in uploader.mock_calls] == ["upload", "destroy"]
        assert uploader.destroy.call_args[0] == ("billedy/entities/old",)

    def test_without_previous_url(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        assets.replace(DATA_URL, None)
        uploader.destroy.assert_not_called()

    def test_previous_delete_failure_keeps_upload(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        uploader.destroy.side_effect = cloudinary.exceptions.Error("boom")
        asset = assets.replace(DATA_URL, "https://cdn/billedy/entities/old.png")
        assert asset.url.startswith("https://res.cloudinary.com/")

    def test_upload_failure_leaves_previous(self, assets: ImageAssetClient, uploader: MagicMock) -> None:
        uploader.upload.side_effect = cloudinary.exceptions.Error("boom")
        with pytest.raises(cloudinary.exceptions.Error):
            assets.replace(DATA_URL, "https://cdn/billedy/entities/old.png")
        uploader.destroy.assert_not_called()


class TestGetImageAssets:
    def test_builds_from_settings_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(image_assets, "_client", None)
        monkeypatch.setattr(image_assets.settings, "cloudinary_cloud_name", "env-cloud")
        first = image_assets.get_image_assets()
        second = image_assets.get_image_assets()
        assert first is second
        assert first.root_folder == "billedy"
        assert first.folder_path() == "billedy/entities"
