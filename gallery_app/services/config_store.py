import logging

from gallery_app.errors import InvalidArgument, PersistenceError
from gallery_app.utils.jsonfile import lock_for, read_json, write_json_atomic

logger = logging.getLogger(__name__)

DISPLAY_MODES = (1, 2)
DEFAULT_DISPLAY_MODE = 1


def _valid_mode(value):
    return isinstance(value, int) and not isinstance(value, bool) and value in DISPLAY_MODES


class ConfigStore:
    """Site display settings, one small JSON document overwritten on every change."""

    def __init__(self, path):
        self.path = path
        self._lock = lock_for(path)

    def get(self):
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            return {"displayMode": DEFAULT_DISPLAY_MODE}
        except (OSError, ValueError) as e:
            logger.warning("Config %s unreadable, using defaults: %s", self.path, e)
            return {"displayMode": DEFAULT_DISPLAY_MODE}
        mode = data.get("displayMode") if isinstance(data, dict) else None
        if not _valid_mode(mode):
            mode = DEFAULT_DISPLAY_MODE
        return {"displayMode": mode}

    def set(self, display_mode):
        if not _valid_mode(display_mode):
            raise InvalidArgument("displayMode must be 1 or 2")
        with self._lock:
            try:
                write_json_atomic(self.path, {"displayMode": display_mode})
            except OSError as e:
                logger.error("Error writing config %s", self.path, exc_info=True)
                raise PersistenceError("Error saving config") from e
        logger.info("Display mode set to %s", display_mode)
        return {"displayMode": display_mode}
