from gallery_app.models.entry import LINK_TITLE_PLACEHOLDER, LinkEntry, PathEntry, entry_from_json

__all__ = ["LINK_TITLE_PLACEHOLDER", "LinkEntry", "PathEntry", "entry_from_json"]
