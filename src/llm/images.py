# src/llm/images.py — v1
"""Resolve an ImageInput to raw bytes.

Inline data is returned as is. URL sources are fetched over HTTP(S).
"""

from __future__ import annotations

import base64
import logging
import urllib.request

from llmbridge.llm.errors import ProviderRequestError
from llmbridge.llm.models import ImageInput

logger = logging.getLogger(__name__)

_DEFAULT_FETCH_TIMEOUT = 30.0


def load_image_bytes(
    image: ImageInput,
    provider: str | None = None,
    timeout: float | None = None,
) -> bytes:
    """Return the image payload, downloading it when only a URL is given.

    Raises:
        ProviderRequestError: If the URL cannot be fetched.
    """
    if image.data:
        return image.data

    url = image.url or ""
    if not url.lower().startswith(("http://", "https://")):
        raise ProviderRequestError(f"unsupported image url: {url!r}", provider=provider)

    logger.debug("Fetching image from %s", url)
    try:
        with urllib.request.urlopen(url, timeout=timeout or _DEFAULT_FETCH_TIMEOUT) as resp:
            return resp.read()
    except OSError as e:
        raise ProviderRequestError(
            f"failed to download image {url}: {e}", provider=provider
        ) from e


def encode_base64(payload: bytes) -> str:
    """Standard base64 text, as expected by JSON wire formats."""
    return base64.b64encode(payload).decode("ascii")
