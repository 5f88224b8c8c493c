"""Whole-document JSON persistence with atomic replace-on-write."""
import json
import os
import tempfile
import threading

_registry_lock = threading.Lock()
_document_locks = {}


def lock_for(path):
    """One lock per resolved document path, shared by every store opened on it."""
    key = os.path.realpath(path)
    with _registry_lock:
        lock = _document_locks.get(key)
        if lock is None:
            lock = _document_locks[key] = threading.Lock()
        return lock


def read_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json_atomic(path, data):
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix='.' + os.path.basename(path) + '.', suffix='.tmp', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise
