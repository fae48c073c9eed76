import hashlib
import io
import logging
from pathlib import Path

import requests
from PIL import Image

from ..config import REMOVE_BG_API_KEY, REMOVE_BG_CACHE_DIR, REMOVE_BG_TIMEOUT, REMOVE_BG_URL
from .base import BackgroundRemover

logger = logging.getLogger(__name__)


class RemoveBgRemover(BackgroundRemover):
    """
    Background remover delegating to a remove.bg compatible HTTP service.

    Best for: Photographic logos where a color threshold is not enough.
    Raises on network errors and non-success responses; wrap it in a
    FallbackRemover so callers never see those failures.

    Results can be cached on disk, keyed by the MD5 of the uploaded PNG,
    to save API credits while iterating on the same inputs.
    """

    def __init__(
        self,
        api_key: str | None = REMOVE_BG_API_KEY,
        url: str = REMOVE_BG_URL,
        timeout: float = REMOVE_BG_TIMEOUT,
        cache_dir: str | Path | None = REMOVE_BG_CACHE_DIR,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.cache_dir = Path(cache_dir) if cache_dir else None
        self.session = session or requests.Session()

    def remove(self, image: Image.Image) -> Image.Image:
        if not self.api_key:
            raise RuntimeError("No remove.bg API key configured")

        buffer = io.BytesIO()
        image.save(buffer, "PNG")
        payload = buffer.getvalue()
        digest = hashlib.md5(payload).hexdigest()

        cached = self._read_cache(digest)
        if cached is not None:
            logger.info("remove.bg cache hit for %s", digest[:8])
            return Image.open(io.BytesIO(cached)).convert("RGBA")

        logger.info("Calling remove.bg (%d bytes)", len(payload))
        response = self.session.post(
            self.url,
            headers={"X-Api-Key": self.api_key},
            files={"image_file": ("image.png", payload, "image/png")},
            data={"size": "auto"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        logger.info("remove.bg responded %s with %d bytes", response.status_code, len(response.content))

        result = Image.open(io.BytesIO(response.content)).convert("RGBA")
        self._write_cache(digest, response.content)
        return result

    def _cache_path(self, digest: str) -> Path | None:
        if self.cache_dir is None:
            return None
        return self.cache_dir / f"{digest}.png"

    def _read_cache(self, digest: str) -> bytes | None:
        path = self._cache_path(digest)
        if path is None or not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError:
            logger.warning("Could not read remove.bg cache entry %s", path, exc_info=True)
            return None

    def _write_cache(self, digest: str, content: bytes) -> None:
        path = self._cache_path(digest)
        if path is None:
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError:
            logger.warning("Could not write remove.bg cache entry %s", path, exc_info=True)
