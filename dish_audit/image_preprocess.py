"""Photo loading and backend-side resize before vision analysis.

Accepted photo references:
- data URIs ("data:image/png;base64,...")
- bare base64 strings
- http(s) URLs, downloaded here

When USE_BACKEND_RESIZE is on, the longer side is capped at
BACKEND_MAX_SIDE_PX and the photo is re-encoded as JPEG, which is what the
vision prompts declare as mime type.
"""

import base64
import binascii
import logging
import time
from io import BytesIO
from typing import Optional, Tuple

import requests
from PIL import Image, UnidentifiedImageError

from dish_audit.config import AuditSettings
from dish_audit.utils import strip_data_uri

logger = logging.getLogger(__name__)


def is_remote(reference: str) -> bool:
    return reference.startswith(("http://", "https://"))


def download_photo(url: str, timeout: Optional[float] = None) -> str:
    """Fetch a photo and return it base64 encoded. HTTP errors propagate."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    logger.info("Downloaded photo %s (%.1fkb)", url, len(response.content) / 1024)
    return base64.b64encode(response.content).decode("utf-8")


def resize_image_b64(image_b64: str, max_side: int) -> Tuple[str, Tuple[int, int], Tuple[int, int]]:
    """Resize so that the longer side <= max_side, keep aspect ratio, force JPEG."""
    raw = base64.b64decode(image_b64, validate=True)
    with Image.open(BytesIO(raw)) as img:
        input_size = img.size
        img.thumbnail((max_side, max_side))
        img = img.convert("RGB")  # PNG -> JPEG
        output_size = img.size
        buffer = BytesIO()
        img.save(buffer, format="JPEG")
    return base64.b64encode(buffer.getvalue()).decode("utf-8"), input_size, output_size


def prepare_photo(reference: str, settings: AuditSettings) -> str:
    """Turn a photo reference into base64 image content for the classifier."""
    if is_remote(reference):
        image_b64 = download_photo(reference, timeout=settings.http_timeout_s)
    else:
        image_b64 = strip_data_uri(reference)

    if not settings.use_backend_resize:
        return image_b64

    start = time.time()
    try:
        resized, input_size, output_size = resize_image_b64(image_b64, settings.max_side_px)
    except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as e:
        logger.warning("Photo resize skipped, image not decodable: %s", e)
        return image_b64

    logger.info(
        "Resized photo %sx%s -> %sx%s in %sms",
        input_size[0],
        input_size[1],
        output_size[0],
        output_size[1],
        round((time.time() - start) * 1000, 2),
    )
    return resized
