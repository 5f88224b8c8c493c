from flask import Blueprint, jsonify, request, send_from_directory

from gallery_app import store

public_bp = Blueprint('public', __name__)


@public_bp.route('/api/categories')
def categories():
    return jsonify(store('catalog').list_categories())


@public_bp.route('/api/images')
def images():
    category = request.args.get('category')
    if not category:
        return jsonify([])
    return jsonify([entry.to_json() for entry in store('catalog').list_entries(category)])


@public_bp.route('/api/config')
def get_config():
    return jsonify(store('config').get())


@public_bp.route('/gallery/<path:filename>')
def gallery_file(filename):
    return send_from_directory(store('blobs').root, filename)
