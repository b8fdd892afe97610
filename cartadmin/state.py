"""Small JSON file that survives dashboard restarts (the last active tab)."""
import json
import logging
import os

logger = logging.getLogger(__name__)

TAB_KEY = "activeTab"


class LocalStateStore:
    def __init__(self, path):
        self.path = path

    def _load(self):
        try:
            if os.path.exists(self.path):
                with open(self.path, "r") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        return data
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable state file %s", self.path)
        return {}

    def get(self, key, default=None):
        return self._load().get(key, default)

    def set(self, key, value):
        data = self._load()
        data[key] = value
        try:
            with open(self.path, "w") as f:
                json.dump(data, f)
        except OSError:
            logger.warning("Could not persist %s to %s", key, self.path, exc_info=True)
