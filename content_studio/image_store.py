import logging
from collections import OrderedDict
from threading import Lock
from typing import Optional, Tuple
from uuid import uuid4

import httpx

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 256


class ImageNotFoundError(KeyError):
    pass


class ImageStore:
    """
    In-memory registry of generated image URLs.

    Upstream image URLs are short-lived and cross-origin, so the UI loads them
    through `/api/images/{id}`. Only the URL is kept, never the bytes; the
    oldest entries are dropped once `capacity` is reached.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._urls: "OrderedDict[str, str]" = OrderedDict()
        self._lock = Lock()

    def register(self, url: str) -> str:
        image_id = uuid4().hex
        with self._lock:
            self._urls[image_id] = url
            while len(self._urls) > self.capacity:
                evicted, _ = self._urls.popitem(last=False)
                logger.debug("Evicted image id=%s", evicted)
        logger.info("Registered image id=%s", image_id)
        return image_id

    def get(self, image_id: str) -> Optional[str]:
        with self._lock:
            return self._urls.get(image_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    async def fetch(
        self,
        image_id: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Tuple[bytes, str]:
        """Download a registered image; returns (bytes, content type)."""
        url = self.get(image_id)
        if url is None:
            raise ImageNotFoundError(image_id)

        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()

        content_type = response.headers.get("content-type", "image/png")
        return response.content, content_type


image_store = ImageStore()
