from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException
import os

from gallery_app.config import Config
from gallery_app.errors import GalleryError
from gallery_app.services.blob_store import BlobStore
from gallery_app.services.catalog_store import CatalogStore
from gallery_app.services.config_store import ConfigStore
from gallery_app.services.link_resolver import LinkResolver


def store(name):
    """One of the per-app stores: blobs, catalog, config or links."""
    return current_app.extensions["gallery"][name]


def create_app(overrides=None):
    app = Flask(__name__, static_folder=None)

    # CONFIGURATION
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    for key, name in Config.DATA_FILES.items():
        if not app.config.get(key):
            app.config[key] = os.path.join(app.config['DATA_DIR'], name)

    # Create data and gallery folders if missing
    gallery_path = app.config['GALLERY_FOLDER']
    if not os.path.exists(gallery_path):
        os.makedirs(gallery_path)
        app.logger.info("Created gallery folder: %s", gallery_path)
    os.makedirs(os.path.dirname(os.path.abspath(app.config['GALLERY_JSON_PATH'])), exist_ok=True)

    # Stores
    blobs = BlobStore(gallery_path)
    app.extensions['gallery'] = {
        'blobs': blobs,
        'catalog': CatalogStore(app.config['GALLERY_JSON_PATH'], blobs),
        'config': ConfigStore(app.config['CONFIG_JSON_PATH']),
        'links': LinkResolver(
            blobs,
            session=app.config.get('LINK_SESSION'),
            timeout=app.config['LINK_FETCH_TIMEOUT'],
            user_agent=app.config['LINK_USER_AGENT'],
        ),
    }

    # Errors as JSON
    @app.errorhandler(GalleryError)
    def handle_gallery_error(error):
        return jsonify({'success': False, 'message': error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'message': error.description}), error.code

    # Register blueprints
    from gallery_app.routes.public import public_bp
    from gallery_app.routes.auth import auth_bp
    from gallery_app.routes.dashboard import dashboard_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)

    return app
