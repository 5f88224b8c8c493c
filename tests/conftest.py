import pytest

from gallery_app import create_app
from gallery_app.models.entry import PathEntry
from gallery_app.services.blob_store import BlobStore
from gallery_app.services.catalog_store import CatalogStore
from gallery_app.services.config_store import ConfigStore
from gallery_app.services.link_resolver import LinkResolver
from tests.web_fixtures import FakeSession


# --- Store fixtures ----------------------------------------------------------
@pytest.fixture()
def gallery_dir(tmp_path):
    path = tmp_path / "gallery"
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture()
def blobs(gallery_dir):
    return BlobStore(str(gallery_dir))


@pytest.fixture()
def catalog_path(tmp_path):
    return tmp_path / "gallery.json"


@pytest.fixture()
def catalog(catalog_path, blobs):
    return CatalogStore(str(catalog_path), blobs)


@pytest.fixture()
def image(blobs):
    """Write a blob and hand back the path entry that references it."""
    def _mk(category, filename, data=b"img"):
        return PathEntry(blobs.write_uploaded_file(category, filename, data))

    return _mk


@pytest.fixture()
def config_store(tmp_path):
    return ConfigStore(str(tmp_path / "config.json"))


@pytest.fixture()
def web():
    return FakeSession()


@pytest.fixture()
def resolver(blobs, web):
    # whole seconds keep the og_<millis> names exact
    ticks = iter(range(1_700_000_000, 1_700_001_000))
    return LinkResolver(blobs, session=web, clock=lambda: next(ticks))


# --- Application fixtures ----------------------------------------------------
@pytest.fixture()
def app(tmp_path, web):
    app = create_app({
        "TESTING": True,
        "ADMIN_PASSWORD": "secret",
        "DATA_DIR": str(tmp_path),
        "LINK_SESSION": web,
    })
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()
