"""Regenerate the catalog from the folders already under the blob root.

A full rebuild for bootstrapping; nothing in the current catalog is kept.
"""
import os

from gallery_app.models.entry import PathEntry
from gallery_app.utils.file_rules import is_image_file


def scan_gallery(gallery_dir, prefix="gallery"):
    result = {}
    for folder in os.listdir(gallery_dir):
        full_path = os.path.join(gallery_dir, folder)
        if not os.path.isdir(full_path):
            continue
        result[folder] = [
            f"{prefix}/{folder}/{name}"
            for name in os.listdir(full_path)
            if is_image_file(name) and os.path.isfile(os.path.join(full_path, name))
        ]
    return result


def seed_catalog(catalog, blobs):
    scanned = scan_gallery(blobs.root, blobs.prefix)
    catalog.replace_all({folder: [PathEntry(p) for p in paths] for folder, paths in scanned.items()})
    return scanned
