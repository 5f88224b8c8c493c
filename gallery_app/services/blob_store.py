import logging
import os
import shutil

from werkzeug.security import safe_join

from gallery_app.errors import ValidationError
from gallery_app.utils.file_rules import is_single_component

logger = logging.getLogger(__name__)


class BlobStore:
    """Image bytes on disk, one directory per category under ``root``.

    Stored paths are relative and slash separated: ``<prefix>/<category>/<filename>``.
    """

    def __init__(self, root, prefix="gallery"):
        self.root = os.path.abspath(root)
        self.prefix = prefix

    def relative_path(self, category, filename):
        return f"{self.prefix}/{category}/{filename}"

    def category_dir(self, category):
        if not isinstance(category, str) or not is_single_component(category):
            raise ValidationError(f"Invalid category name: {category!r}")
        path = safe_join(self.root, category)
        if path is None:
            raise ValidationError(f"Invalid category name: {category!r}")
        return path

    def resolve(self, relative_path):
        """Absolute location of a stored relative path; never outside ``root``."""
        head = self.prefix + "/"
        if not isinstance(relative_path, str) or not relative_path.startswith(head):
            raise ValidationError(f"Path outside the gallery: {relative_path!r}")
        path = safe_join(self.root, relative_path[len(head):])
        if path is None:
            raise ValidationError(f"Path outside the gallery: {relative_path!r}")
        return path

    def ensure_category_dir(self, category):
        path = self.category_dir(category)
        os.makedirs(path, exist_ok=True)
        return path

    def target_path(self, category, filename):
        if not isinstance(filename, str) or not is_single_component(filename):
            raise ValidationError(f"Invalid file name: {filename!r}")
        path = safe_join(self.category_dir(category), filename)
        if path is None:
            raise ValidationError(f"Invalid file name: {filename!r}")
        return path

    def write_uploaded_file(self, category, filename, source):
        """Persist ``source`` as ``filename`` in the category, overwriting a same-named blob.

        ``source`` is a Werkzeug ``FileStorage`` (anything with ``save``),
        raw ``bytes`` or a binary file object.
        """
        target = self.target_path(category, filename)
        self.ensure_category_dir(category)
        if hasattr(source, "save"):
            source.save(target)
        elif isinstance(source, (bytes, bytearray)):
            with open(target, "wb") as f:
                f.write(source)
        else:
            with open(target, "wb") as f:
                shutil.copyfileobj(source, f)
        logger.info("Stored blob %s", target)
        return self.relative_path(category, filename)

    def delete_file(self, relative_path):
        path = self.resolve(relative_path)
        if not os.path.isfile(path):
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError:
            logger.warning("Could not delete blob %s", path, exc_info=True)
            return False
        return True

    def remove_empty_category_dir(self, category):
        """Drop the category folder only if nothing was written into it."""
        path = self.category_dir(category)
        if not os.path.isdir(path) or os.listdir(path):
            return False
        try:
            os.rmdir(path)
        except FileNotFoundError:
            return False
        except OSError:
            # a concurrent upload landed in it
            logger.info("Category folder %s no longer empty, keeping it", path)
            return False
        return True

    def delete_category_tree(self, category):
        path = self.category_dir(category)
        if not os.path.isdir(path):
            return False
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            return False
        except OSError:
            logger.warning("Could not delete category folder %s", path, exc_info=True)
            return False
        return True
