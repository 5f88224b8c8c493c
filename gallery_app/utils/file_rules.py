import os

IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png'}
DEFAULT_IMAGE_EXTENSION = '.jpg'


def is_image_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in IMAGE_EXTENSIONS


def extension_from_url_path(path):
    """Extension of a URL path component (query already stripped), or the default."""
    ext = os.path.splitext(path.rstrip('/'))[1]
    return ext if ext else DEFAULT_IMAGE_EXTENSION


def is_single_component(name):
    return (
        bool(name)
        and name not in ('.', '..')
        and '/' not in name
        and '\\' not in name
        and '\x00' not in name
    )
