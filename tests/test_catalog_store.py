import json
import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from gallery_app.errors import NotFound, PersistenceError, ValidationError
from gallery_app.models.entry import LinkEntry, PathEntry
from gallery_app.services.catalog_store import CatalogStore


def _paths(entries):
    return [entry.effective_path for entry in entries]


def test_fresh_catalog_is_empty(catalog):
    assert catalog.list_categories() == []
    assert catalog.list_entries("Modern") == []


def test_append_creates_category_and_keeps_order(catalog, catalog_path, image):
    assert catalog.append_entry("Modern", image("Modern", "1.jpg")) == "gallery/Modern/1.jpg"
    catalog.append_entry("Modern", image("Modern", "2.jpg"))
    catalog.append_entry("Classic", image("Classic", "3.jpg"))

    assert catalog.list_categories() == ["Modern", "Classic"]
    assert _paths(catalog.list_entries("Modern")) == ["gallery/Modern/1.jpg", "gallery/Modern/2.jpg"]

    on_disk = json.loads(catalog_path.read_text(encoding="utf-8"))
    assert on_disk == {
        "Modern": ["gallery/Modern/1.jpg", "gallery/Modern/2.jpg"],
        "Classic": ["gallery/Classic/3.jpg"],
    }


def test_append_same_path_twice_is_idempotent(catalog, image):
    entry = image("Modern", "1.jpg")
    catalog.append_entry("Modern", entry)
    catalog.append_entry("Modern", entry)

    assert catalog.list_entries("Modern") == [PathEntry("gallery/Modern/1.jpg")]


def test_dedup_compares_link_thumbnails_with_paths(catalog, image):
    catalog.append_entry("Links", image("Links", "og_1.jpg"))
    catalog.append_entry("Links", LinkEntry("gallery/Links/og_1.jpg", "https://example.com", "Example"))

    assert catalog.list_entries("Links") == [PathEntry("gallery/Links/og_1.jpg")]


def test_link_entries_round_trip_through_the_document(catalog, catalog_path, blobs):
    thumb = blobs.write_uploaded_file("Links", "og_1.png", b"png")
    link = LinkEntry(thumb, "https://example.com/post", "A post")
    catalog.append_entry("Links", link)

    assert catalog.list_entries("Links") == [link]
    on_disk = json.loads(catalog_path.read_text(encoding="utf-8"))
    assert on_disk["Links"] == [{
        "type": "link",
        "thumbnail": "gallery/Links/og_1.png",
        "url": "https://example.com/post",
        "title": "A post",
    }]


def test_append_refuses_entry_whose_blob_was_deleted_meanwhile(catalog, catalog_path, image):
    catalog.append_entry("Modern", image("Modern", "0.jpg"))
    entry = image("Modern", "1.jpg")
    catalog.remove_category("Modern")
    before = catalog_path.read_bytes()

    with pytest.raises(PersistenceError):
        catalog.append_entry("Modern", entry)

    assert catalog_path.read_bytes() == before
    assert catalog.list_categories() == []


def test_append_refuses_entry_after_its_blob_was_removed(catalog, image):
    entry = image("Modern", "1.jpg")
    catalog.append_entry("Modern", entry)
    catalog.remove_entry("Modern", entry.path)

    with pytest.raises(PersistenceError):
        catalog.append_entry("Modern", entry)

    assert catalog.list_entries("Modern") == []


def test_remove_entry_drops_path_and_blob(catalog, blobs, image):
    entry = image("Modern", "1.jpg")
    catalog.append_entry("Modern", entry)
    catalog.append_entry("Modern", image("Modern", "2.jpg"))

    assert catalog.remove_entry("Modern", entry.path) is True

    assert _paths(catalog.list_entries("Modern")) == ["gallery/Modern/2.jpg"]
    assert not os.path.exists(blobs.resolve(entry.path))


def test_remove_link_entry_by_thumbnail(catalog, blobs):
    thumb = blobs.write_uploaded_file("Links", "og_5.jpg", b"img")
    catalog.append_entry("Links", LinkEntry(thumb, "https://example.com", "Example"))

    catalog.remove_entry("Links", thumb)

    assert catalog.list_entries("Links") == []
    assert not os.path.exists(blobs.resolve(thumb))


def test_remove_entry_with_missing_blob_still_succeeds(catalog, blobs):
    catalog.replace_all({"Modern": [PathEntry("gallery/Modern/ghost.jpg")]})

    assert catalog.remove_entry("Modern", "gallery/Modern/ghost.jpg") is True
    assert catalog.list_entries("Modern") == []
    assert catalog.list_categories() == ["Modern"]


def test_remove_entry_unknown_category_leaves_document_unchanged(catalog, catalog_path, image):
    catalog.append_entry("Modern", image("Modern", "1.jpg"))
    before = catalog_path.read_bytes()

    with pytest.raises(NotFound):
        catalog.remove_entry("Nope", "gallery/Nope/1.jpg")

    assert catalog_path.read_bytes() == before


def test_unknown_category_wins_over_bad_path(catalog, image):
    catalog.append_entry("Modern", image("Modern", "1.jpg"))

    with pytest.raises(NotFound):
        catalog.remove_entry("Nope", "images/x.jpg")
    with pytest.raises(NotFound):
        catalog.remove_category("../Nope")


def test_remove_entry_rejects_paths_outside_gallery(catalog, tmp_path, image):
    victim = tmp_path / "gallery.json.bak"
    victim.write_text("keep me")
    catalog.append_entry("Modern", image("Modern", "1.jpg"))

    with pytest.raises(ValidationError):
        catalog.remove_entry("Modern", "gallery/../gallery.json.bak")

    assert victim.read_text() == "keep me"
    assert len(catalog.list_entries("Modern")) == 1


def test_remove_category_drops_key_and_folder(catalog, gallery_dir, image):
    catalog.append_entry("Modern", image("Modern", "1.jpg"))
    catalog.append_entry("Modern", image("Modern", "2.jpg"))
    catalog.append_entry("Classic", image("Classic", "3.jpg"))

    assert catalog.remove_category("Modern") is True

    assert catalog.list_categories() == ["Classic"]
    assert not (gallery_dir / "Modern").exists()
    assert (gallery_dir / "Classic" / "3.jpg").exists()


def test_remove_unknown_category_is_not_found(catalog, catalog_path, image):
    catalog.append_entry("Modern", image("Modern", "1.jpg"))
    before = catalog_path.read_bytes()

    with pytest.raises(NotFound):
        catalog.remove_category("Classic")

    assert catalog_path.read_bytes() == before


def test_concurrent_appends_lose_nothing(catalog, image):
    entries = [image("Modern", f"{i}.jpg") for i in range(40)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda entry: catalog.append_entry("Modern", entry), entries))

    assert sorted(_paths(catalog.list_entries("Modern"))) == sorted(e.path for e in entries)


def test_stores_on_the_same_document_share_one_lock(catalog_path, blobs, image):
    stores = [CatalogStore(str(catalog_path), blobs) for _ in range(4)]
    jobs = [(stores[i % 4], image("Modern", f"{i}.jpg")) for i in range(40)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda job: job[0].append_entry("Modern", job[1]), jobs))

    assert len(stores[0].list_entries("Modern")) == 40


def test_corrupt_document_degrades_reads_and_blocks_writes(catalog, catalog_path, image):
    catalog_path.write_text("{ not json", encoding="utf-8")

    assert catalog.list_categories() == []
    assert catalog.list_entries("Modern") == []

    with pytest.raises(PersistenceError):
        catalog.append_entry("Modern", image("Modern", "1.jpg"))
    assert catalog_path.read_text(encoding="utf-8") == "{ not json"


def test_wrong_shape_document_is_treated_as_unreadable(catalog, catalog_path):
    catalog_path.write_text(json.dumps({"Modern": "gallery/Modern/1.jpg"}), encoding="utf-8")

    assert catalog.list_categories() == []
    with pytest.raises(PersistenceError):
        catalog.remove_category("Modern")


def test_writes_leave_no_temporary_files(catalog, catalog_path, image):
    for i in range(5):
        catalog.append_entry("Modern", image("Modern", f"{i}.jpg"))

    leftovers = [p.name for p in catalog_path.parent.iterdir() if p.name.endswith(".tmp")]
    assert leftovers == []
