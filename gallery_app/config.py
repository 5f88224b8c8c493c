import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "gallery-dev-key-change-in-production")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

    # Catalog, config document and blob root default to files under DATA_DIR;
    # create_app fills in whichever of them is left unset
    DATA_DIR = os.path.abspath(os.getenv("DATA_DIR", BASE_DIR))
    GALLERY_JSON_PATH = os.getenv("GALLERY_JSON_PATH")
    CONFIG_JSON_PATH = os.getenv("CONFIG_JSON_PATH")
    GALLERY_FOLDER = os.getenv("GALLERY_FOLDER")

    DATA_FILES = {
        "GALLERY_JSON_PATH": "gallery.json",
        "CONFIG_JSON_PATH": "config.json",
        "GALLERY_FOLDER": "gallery",
    }

    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16 MB

    # Link cards
    LINK_FETCH_TIMEOUT = float(os.getenv("LINK_FETCH_TIMEOUT", "10"))
    LINK_USER_AGENT = os.getenv("LINK_USER_AGENT", "Mozilla/5.0 (compatible; gallery-app/1.0)")

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
    DEBUG = os.getenv("DEBUG", "0").lower() in ("1", "true", "yes")
