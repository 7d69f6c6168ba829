"""Inline embedding of images served over plain HTTP.

Detail views render markdown without the browser's cookie jar, so images the
server only hands out to an authenticated session over ``http://`` are fetched
here and turned into ``data:`` URLs. ``https://`` images are left untouched.
"""
from __future__ import annotations

import base64
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Sequence

from . import config, locale_text
from .config import Credentials
from .errors import TransportError
from .logging_utils import _scraper_event
from .transport import build_headers, send
from .utils import log_line


def image_placeholder(url: str) -> str:
    return locale_text.IMAGE_FALLBACK_TEMPLATE.format(url=url)


def convert_image_to_data_url(
    url: str,
    *,
    session: Any,
    credentials: Credentials,
    timeout: Optional[int] = None,
) -> str:
    """Return ``url`` as a base64 data URL, or a link placeholder on any failure."""

    headers = build_headers(credentials, accept=config.IMAGE_ACCEPT)
    try:
        response = send(
            session,
            "GET",
            url,
            headers=headers,
            timeout=timeout or config.IMAGE_TIMEOUT_SECONDS,
        )
    except TransportError as exc:
        log_line(f"[IMAGE][WARN] Failed to fetch image: {url}, error: {exc}")
        return image_placeholder(url)
    except Exception as exc:  # noqa: BLE001
        log_line(f"[IMAGE][ERROR] Error converting image to base64: {url}: {exc!r}")
        return image_placeholder(url)

    content_type = (response.headers.get("content-type") or "").split(";", 1)[0].strip()
    if not content_type.startswith("image/"):
        log_line(f"[IMAGE][WARN] Response is not an image: {url}, content-type: {content_type}")
        return image_placeholder(url)

    encoded = base64.b64encode(response.content or b"").decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def process_images(
    urls: Sequence[str],
    *,
    session: Any,
    credentials: Credentials,
    max_workers: Optional[int] = None,
) -> list[str]:
    """Inline every ``http://`` image in ``urls`` concurrently.

    The result has one entry per input, in input order. A failed image becomes
    a placeholder and never affects the others.
    """

    if not urls:
        return []

    def _process(url: str) -> str:
        if url.startswith("http://"):
            return convert_image_to_data_url(url, session=session, credentials=credentials)
        return url

    insecure = sum(1 for url in urls if url.startswith("http://"))
    if insecure == 0:
        return list(urls)

    workers = max(1, min(max_workers or config.MAX_PARALLEL_IMAGES, insecure))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        processed = list(executor.map(_process, urls))

    inlined = sum(1 for value in processed if value.startswith("data:"))
    _scraper_event(
        "image",
        phase="process",
        total=len(urls),
        insecure=insecure,
        inlined=inlined,
        failed=insecure - inlined,
    )
    return processed


__all__ = ["image_placeholder", "convert_image_to_data_url", "process_images"]
