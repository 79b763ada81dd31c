"""
Key-value store for the client-side cache.

One JSON document per key, one directory per origin:

    <root>/<origin>/<key>.json

Reads never raise: a missing, unreadable or unparsable key comes back as the
default. Writes replace the whole document (temp file + rename) and report
failure as False.
"""

import copy
import json
import logging
import os
import re
import tempfile

_UNSAFE = re.compile(r'[^A-Za-z0-9._-]+')


def _slug(value: str) -> str:
    return _UNSAFE.sub('_', value).strip('._') or 'default'


class LocalCache:
    def __init__(self, root: str, origin: str = 'default'):
        self.root = root
        self.origin = origin
        self.directory = os.path.join(root, _slug(origin))

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{_slug(key)}.json")

    def load(self, key: str, default=None):
        """Return the stored value, or a copy of ``default`` on any failure.

        A stored value whose JSON type does not match the default's type
        (e.g. an object where a list is expected) counts as unparsable.
        """
        fallback = copy.deepcopy(default)
        path = self._path(key)
        if not os.path.exists(path):
            return fallback

        try:
            with open(path, 'r', encoding='utf-8') as f:
                value = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Could not load {key}: {e}")
            return fallback

        if default is not None and not isinstance(value, type(default)):
            logging.warning(f"Ignoring {key}: expected {type(default).__name__}, got {type(value).__name__}")
            return fallback
        return value

    def save(self, key: str, value) -> bool:
        try:
            data = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logging.warning(f"Could not serialize {key}: {e}")
            return False

        tmp_path = None
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix='.tmp-', suffix='.json')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(data)
            os.replace(tmp_path, self._path(key))
            return True
        except OSError as e:
            logging.warning(f"Could not save {key}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
            return False

    def remove(self, key: str) -> bool:
        try:
            os.remove(self._path(key))
            return True
        except FileNotFoundError:
            return True
        except OSError as e:
            logging.warning(f"Could not remove {key}: {e}")
            return False
