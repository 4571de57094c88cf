import base64
from io import BytesIO
from unittest.mock import MagicMock

from PIL import Image

from dish_audit import image_preprocess
from dish_audit.config import AuditSettings
from dish_audit.image_preprocess import prepare_photo, resize_image_b64


def _png_b64(width, height):
    buffer = BytesIO()
    Image.new("RGBA", (width, height), (200, 120, 40, 255)).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


def _size_of(image_b64):
    with Image.open(BytesIO(base64.b64decode(image_b64))) as img:
        return img.format, img.size


def test_resize_keeps_aspect_ratio_and_forces_jpeg():
    resized, input_size, output_size = resize_image_b64(_png_b64(800, 400), max_side=200)

    assert input_size == (800, 400)
    assert output_size == (200, 100)
    assert _size_of(resized) == ("JPEG", (200, 100))


def test_prepare_photo_strips_data_uri_without_resize():
    settings = AuditSettings(use_backend_resize=False)
    assert prepare_photo("data:image/png;base64,AAAA", settings) == "AAAA"


def test_prepare_photo_passes_through_undecodable_image():
    settings = AuditSettings(use_backend_resize=True, max_side_px=100)
    assert prepare_photo("bm90IGFuIGltYWdl", settings) == "bm90IGFuIGltYWdl"


def test_prepare_photo_downloads_remote_reference(monkeypatch):
    response = MagicMock()
    response.content = b"jpeg-bytes"
    get = MagicMock(return_value=response)
    monkeypatch.setattr(image_preprocess.requests, "get", get)

    settings = AuditSettings(use_backend_resize=False, http_timeout_s=3.0)
    result = prepare_photo("https://cdn.example.com/dish.jpg", settings)

    assert base64.b64decode(result) == b"jpeg-bytes"
    get.assert_called_once_with("https://cdn.example.com/dish.jpg", timeout=3.0)
    response.raise_for_status.assert_called_once()
