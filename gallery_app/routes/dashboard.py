from flask import Blueprint, current_app, jsonify, request

from gallery_app import store
from gallery_app.errors import ValidationError
from gallery_app.models.entry import PathEntry

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


def _required(data, *names):
    values = [data.get(name) for name in names]
    if not all(isinstance(value, str) and value for value in values):
        raise ValidationError("Missing " + " or ".join(names))
    return values


@dashboard_bp.route("/upload", methods=["POST"])
def upload():
    if request.is_json:
        data = _json_body()
        file = None
    else:
        data = request.form
        file = request.files.get("image")

    category = data.get("category")
    link = data.get("link") or ""
    if not isinstance(link, str):
        raise ValidationError("Link must be a string")
    link = link.strip()
    if file is not None and not file.filename:
        file = None

    if not category:
        raise ValidationError("Missing category")
    if file is None and not link:
        raise ValidationError("Missing file or link")
    if file is not None and link:
        raise ValidationError("Send either an image or a link, not both")

    if file is not None:
        blobs = store("blobs")
        relative_path = blobs.write_uploaded_file(category, file.filename, file)
        file_path = store("catalog").append_entry(category, PathEntry(relative_path))
        current_app.logger.info("Uploaded %s to %s", file_path, category)
    else:
        file_path = store("links").ingest(category, link, store("catalog"))

    return jsonify({"success": True, "filePath": file_path})


@dashboard_bp.route("/image", methods=["DELETE"])
def delete_image():
    category, image_path = _required(_json_body(), "category", "imagePath")
    store("catalog").remove_entry(category, image_path)
    current_app.logger.info("Deleted image %s from %s", image_path, category)
    return jsonify({"success": True})


@dashboard_bp.route("/category", methods=["DELETE"])
def delete_category():
    (category,) = _required(_json_body(), "category")
    store("catalog").remove_category(category)
    current_app.logger.info("Deleted category %s", category)
    return jsonify({"success": True})


@dashboard_bp.route("/config", methods=["POST"])
def set_config():
    data = _json_body()
    saved = store("config").set(data.get("displayMode"))
    return jsonify({"success": True, **saved})
