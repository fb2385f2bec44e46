import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


# ============================================================
# ALMACENAMIENTO LOCAL (equivalente a localStorage del navegador)
# ============================================================

class LocalStorage:
    """
    Claves string -> valores string, guardados en un solo archivo JSON.
    Cada escritura se vuelca al disco antes de retornar.
    """

    def __init__(self, path):
        self.path = path
        self._items = self._read()

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("No se pudo leer %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self):
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=folder, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(self._items, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def get_item(self, key):
        return self._items.get(key)

    def set_item(self, key, value):
        self._items[key] = str(value)
        self._flush()

    def remove_item(self, key):
        if self._items.pop(key, None) is not None:
            self._flush()

    def clear(self):
        self._items = {}
        self._flush()

    def keys(self):
        return list(self._items)


class MemoryStorage(LocalStorage):
    """Misma interfaz sin archivo; guarda la sesión de cada pestaña."""

    def __init__(self, items=None):
        self.path = None
        self._items = dict(items or {})

    def _flush(self):
        pass
