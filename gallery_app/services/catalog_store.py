"""The JSON catalog: category name -> ordered list of entries.

The document on disk is the source of truth. Every mutation is a
read-modify-write of the whole file, run under the lock shared by all stores
opened on the same path, and written with an atomic replace so readers never
see a half-written file.
"""
import logging
import os

from gallery_app.errors import NotFound, PersistenceError
from gallery_app.models.entry import entry_from_json
from gallery_app.utils.jsonfile import lock_for, read_json, write_json_atomic

logger = logging.getLogger(__name__)


def _parse_document(data):
    if not isinstance(data, dict):
        raise PersistenceError("Catalog document is not an object")
    catalog = {}
    for category, entries in data.items():
        if not isinstance(entries, list):
            raise PersistenceError(f"Catalog entries for {category!r} are not a list")
        catalog[category] = [entry_from_json(raw) for raw in entries]
    return catalog


def _dump_document(catalog):
    return {category: [entry.to_json() for entry in entries] for category, entries in catalog.items()}


class CatalogStore:
    def __init__(self, path, blobs):
        self.path = path
        self.blobs = blobs
        self._lock = lock_for(path)

    # -- reads: best effort, never raise ----------------------------------

    def _read_or_empty(self):
        try:
            return _parse_document(read_json(self.path))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, PersistenceError) as e:
            logger.warning("Catalog %s unreadable, serving empty listing: %s", self.path, e)
            return {}

    def list_categories(self):
        return list(self._read_or_empty())

    def list_entries(self, category):
        return list(self._read_or_empty().get(category, []))

    # -- writes: serialized read-modify-write -----------------------------

    def _load_for_update(self):
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.error("Error reading catalog %s", self.path, exc_info=True)
            raise PersistenceError("Error reading database") from e
        return _parse_document(data)

    def _save(self, catalog):
        try:
            write_json_atomic(self.path, _dump_document(catalog))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing catalog %s", self.path, exc_info=True)
            raise PersistenceError("Error updating database") from e

    def append_entry(self, category, entry):
        """Add ``entry`` to ``category`` unless its path is already there.

        The blob must still be on disk when the lock is taken; a concurrent
        delete may have removed it since it was written.
        Returns the entry's effective path either way.
        """
        blob = self.blobs.resolve(entry.effective_path)
        with self._lock:
            catalog = self._load_for_update()
            if not os.path.isfile(blob):
                raise PersistenceError(f"Stored file {entry.effective_path} is missing")
            entries = catalog.setdefault(category, [])
            if any(existing.effective_path == entry.effective_path for existing in entries):
                logger.info("Entry %s already in %s", entry.effective_path, category)
            else:
                entries.append(entry)
                self._save(catalog)
        return entry.effective_path

    def remove_entry(self, category, path):
        with self._lock:
            catalog = self._load_for_update()
            if category not in catalog:
                raise NotFound()
            blob = self.blobs.resolve(path)
            category_dir = self.blobs.category_dir(category)
            entries = catalog[category]
            kept = [entry for entry in entries if entry.effective_path != path]
            catalog[category] = kept
            self._save(catalog)
            if len(kept) != len(entries) or os.path.dirname(blob) == category_dir:
                self.blobs.delete_file(path)
        logger.info("Removed %s from %s", path, category)
        return True

    def remove_category(self, category):
        with self._lock:
            catalog = self._load_for_update()
            if category not in catalog:
                raise NotFound()
            self.blobs.category_dir(category)
            del catalog[category]
            self._save(catalog)
            self.blobs.delete_category_tree(category)
        logger.info("Removed category %s", category)
        return True

    def replace_all(self, catalog):
        with self._lock:
            self._save(catalog)
