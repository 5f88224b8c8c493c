"""Link cards: Open Graph metadata fetch, thumbnail download, catalog append.

A resolution is attempted once. Any failure aborts before the catalog is
touched, and a half-downloaded thumbnail is removed before the error is
raised, so a link entry never points at a missing blob.
"""
import logging
import os
import time
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from gallery_app.errors import (
    ImageDownloadFailed,
    MetadataFetchFailed,
    NoImageFound,
    PersistenceError,
    ValidationError,
)
from gallery_app.models.entry import LINK_TITLE_PLACEHOLDER, LinkEntry
from gallery_app.utils.file_rules import extension_from_url_path

logger = logging.getLogger(__name__)

IMAGE_PROPERTIES = ("og:image", "og:image:url", "og:image:secure_url", "twitter:image")
TITLE_PROPERTIES = ("og:title", "twitter:title")
CHUNK_SIZE = 64 * 1024


@dataclass
class LinkMetadata:
    title: str | None
    images: list


@dataclass
class ResolvedLink:
    filename: str
    title: str
    thumbnail: str
    url: str

    def to_entry(self):
        return LinkEntry(thumbnail=self.thumbnail, url=self.url, title=self.title)


def _is_web_url(url):
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def parse_open_graph(html, base_url):
    """Title and candidate image URLs (absolute, in document order) from a page."""
    soup = BeautifulSoup(html, "html.parser")
    found = {}
    for meta in soup.find_all("meta"):
        key = (meta.get("property") or meta.get("name") or "").strip().lower()
        content = (meta.get("content") or "").strip()
        if key and content:
            found.setdefault(key, []).append(content)

    images = []
    for prop in IMAGE_PROPERTIES:
        for value in found.get(prop, []):
            absolute = urljoin(base_url, value)
            if absolute not in images:
                images.append(absolute)

    title = None
    for prop in TITLE_PROPERTIES:
        if found.get(prop):
            title = found[prop][0]
            break
    if title is None and soup.title and soup.title.string:
        title = soup.title.string.strip() or None
    return LinkMetadata(title=title, images=images)


def _discard(path):
    if not os.path.isfile(path):
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


class LinkResolver:
    def __init__(self, blobs, session=None, timeout=10, user_agent=None, clock=time.time):
        self.blobs = blobs
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent} if user_agent else {}
        self.clock = clock

    def fetch_metadata(self, url):
        try:
            response = self.session.get(url, timeout=self.timeout, headers=self.headers)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Metadata fetch failed for %s: %s", url, e)
            raise MetadataFetchFailed(f"Could not fetch metadata for {url}") from e
        return parse_open_graph(response.text, response.url or url)

    def make_filename(self, image_url):
        ext = extension_from_url_path(urlparse(image_url).path)
        return f"og_{int(self.clock() * 1000)}{ext}"

    def download(self, image_url, target):
        try:
            with self.session.get(
                image_url, stream=True, timeout=self.timeout, headers=self.headers
            ) as response:
                response.raise_for_status()
                with open(target, "wb") as fh:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
        except requests.RequestException as e:
            _discard(target)
            logger.warning("Image download failed for %s: %s", image_url, e)
            raise ImageDownloadFailed(f"Could not download image {image_url}") from e
        except OSError as e:
            _discard(target)
            logger.error("Could not write %s", target, exc_info=True)
            raise PersistenceError("Error saving link image") from e

    def resolve(self, category, url):
        """Fetch the page's metadata and materialize its image under ``category``."""
        if not isinstance(url, str) or not _is_web_url(url):
            raise ValidationError("Link must be an http or https URL")
        self.blobs.category_dir(category)

        metadata = self.fetch_metadata(url)
        if not metadata.images:
            raise NoImageFound(f"No image found for {url}")
        image_url = metadata.images[0]

        filename = self.make_filename(image_url)
        target = self.blobs.target_path(category, filename)
        created = not os.path.isdir(self.blobs.category_dir(category))
        self.blobs.ensure_category_dir(category)
        try:
            self.download(image_url, target)
        except (ImageDownloadFailed, PersistenceError):
            if created:
                self.blobs.remove_empty_category_dir(category)
            raise

        return ResolvedLink(
            filename=filename,
            title=metadata.title or LINK_TITLE_PLACEHOLDER,
            thumbnail=self.blobs.relative_path(category, filename),
            url=url,
        )

    def ingest(self, category, url, catalog):
        """Resolve ``url`` and append it to ``catalog`` as a link card."""
        resolved = self.resolve(category, url)
        path = catalog.append_entry(category, resolved.to_entry())
        logger.info("Added link %s to %s as %s", url, category, path)
        return path
