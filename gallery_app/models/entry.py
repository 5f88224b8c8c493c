from dataclasses import dataclass

from gallery_app.errors import PersistenceError

LINK_TITLE_PLACEHOLDER = "Link"


@dataclass(frozen=True)
class PathEntry:
    """An uploaded image, stored in the catalog as its bare relative path."""

    path: str

    @property
    def effective_path(self):
        return self.path

    def to_json(self):
        return self.path

    def __repr__(self):
        return f"<PathEntry {self.path}>"


@dataclass(frozen=True)
class LinkEntry:
    """A link card; the thumbnail is a blob owned by the entry."""

    thumbnail: str
    url: str
    title: str = LINK_TITLE_PLACEHOLDER

    @property
    def effective_path(self):
        return self.thumbnail

    def to_json(self):
        return {
            "type": "link",
            "thumbnail": self.thumbnail,
            "url": self.url,
            "title": self.title,
        }

    def __repr__(self):
        return f"<LinkEntry {self.thumbnail} -> {self.url}>"


def entry_from_json(raw):
    if isinstance(raw, str):
        return PathEntry(raw)
    if isinstance(raw, dict) and isinstance(raw.get("thumbnail"), str):
        return LinkEntry(
            thumbnail=raw["thumbnail"],
            url=raw.get("url") or "",
            title=raw.get("title") or LINK_TITLE_PLACEHOLDER,
        )
    raise PersistenceError(f"Unrecognised catalog entry: {raw!r}")
