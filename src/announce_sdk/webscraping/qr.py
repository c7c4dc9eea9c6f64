"""QR codes for the links in a text selection, rendered by api.qrserver.com."""

import logging
import re
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests

from ..core.deck import AnnouncementSlide, ImageTile

logger = logging.getLogger("AnnouncementsMCP.webscraping.qr")

QR_API_URL = "https://api.qrserver.com/v1/create-qr-code/"
QR_AREA = 400.0  # points, shared by all codes inserted at once
QR_PIXELS = 400

# [label](https://...) or a bare https://... URL
LINK_RE = re.compile(r"\[[^\]]*\]\((https?://[^\s)]+)\)|(https?://[^\s<>\"'()\[\]]+)")


class NoSelection(ValueError):
    """There is no selected text to look for links in."""


class NoLinksSelected(ValueError):
    """The selection holds no hyperlinks."""


class RateLimiter:
    """Simple token-bucket rate limiter."""

    def __init__(self, max_requests: int, period_seconds: float):
        self.max_requests = max_requests
        self.period = period_seconds
        self.tokens = max_requests
        self.last_refill = time.time()

    def acquire(self) -> bool:
        now = time.time()
        elapsed = now - self.last_refill
        refill = int(elapsed / self.period * self.max_requests)
        if refill > 0:
            self.tokens = min(self.max_requests, self.tokens + refill)
            self.last_refill = now

        if self.tokens > 0:
            self.tokens -= 1
            return True
        return False


@dataclass
class TilePlacement:
    left: float
    top: float
    size: float


def extract_links(text: Optional[str]) -> list[str]:
    """Return the hyperlinks in a selection, in the order they appear."""
    if not text or not text.strip():
        raise NoSelection("Nothing is selected")
    links = []
    for match in LINK_RE.finditer(text):
        link = match.group(1) or match.group(2).rstrip(".,;:!?")
        links.append(link)
    if not links:
        raise NoLinksSelected("Did you forget to select some text with a link?")
    return links


def layout_tiles(count: int, area: float = QR_AREA) -> list[TilePlacement]:
    """Split a square area among ``count`` codes, stacked down the left edge."""
    if count <= 0:
        return []
    size = area / count
    return [TilePlacement(left=0.0, top=i * size, size=size) for i in range(count)]


class QRCodeClient:
    """Builds, downloads, and places QR code images."""

    def __init__(self, pixels: int = QR_PIXELS, rate_limiter: Optional[RateLimiter] = None):
        self.pixels = pixels
        self._rate_limiter = rate_limiter or RateLimiter(60, 60)

    def build_url(self, link: str) -> str:
        request = requests.Request(
            "GET",
            QR_API_URL,
            params={"data": link, "size": f"{self.pixels}x{self.pixels}"},
        )
        return request.prepare().url

    def download(self, link: str, dest_dir: Path, filename: Optional[str] = None) -> Path:
        """Download the QR image for ``link`` into ``dest_dir``."""
        if not self._rate_limiter.acquire():
            raise RuntimeError("QR code rate limit reached, try again in a minute")
        dest_dir.mkdir(parents=True, exist_ok=True)
        filename = filename or f"qr_{uuid.uuid4().hex[:12]}.png"
        dest_path = dest_dir / filename

        response = requests.get(self.build_url(link), timeout=30, stream=True)
        response.raise_for_status()
        with open(dest_path, 'wb') as f:
            for chunk in response.iter_content(chunk_size=8192):
                f.write(chunk)

        logger.info(f"Downloaded QR code for {link} to {dest_path}")
        return dest_path

    def insert_qr_codes(self, slide: AnnouncementSlide, links: list[str],
                        dest_dir: Optional[Path] = None) -> list[ImageTile]:
        """Add one QR tile per link to the slide.

        With ``dest_dir`` each image is also downloaded, and the tile's
        asset_id is the downloaded file's stem.
        """
        tiles = []
        for link, place in zip(links, layout_tiles(len(links))):
            tile = ImageTile(
                source_url=self.build_url(link),
                left=place.left,
                top=place.top,
                width=place.size,
                height=place.size,
            )
            if dest_dir is not None:
                tile.asset_id = self.download(link, dest_dir).stem
            slide.images.append(tile)
            tiles.append(tile)
        logger.info(f"Inserted {len(tiles)} QR code(s) on slide {slide.object_id}")
        return tiles
