"""Error taxonomy shared by the stores, the link resolver and the routes.

Every error carries the HTTP status the JSON error handler answers with.
"""


class GalleryError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(GalleryError):
    status_code = 400
    default_message = "Invalid request"


class InvalidArgument(ValidationError):
    default_message = "Invalid argument"


class NotFound(GalleryError):
    status_code = 404
    default_message = "Category not found"


class UpstreamFetchError(GalleryError):
    status_code = 502
    default_message = "Could not fetch remote content"


class MetadataFetchFailed(UpstreamFetchError):
    default_message = "Could not fetch link metadata"


class NoImageFound(UpstreamFetchError):
    default_message = "No image found for link"


class ImageDownloadFailed(UpstreamFetchError):
    default_message = "Could not download link image"


class PersistenceError(GalleryError):
    status_code = 500
    default_message = "Error updating database"
