"""
Session Store

Persists browser session cookies to disk so a restart can resume an
authenticated session without logging in again.
"""

import os
import json
import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class SessionStore:
    """JSON file holding the list of cookies returned by the browser."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self):
        """
        Read persisted cookies.

        Returns:
            list or None: Cookie dicts, or None if nothing usable is stored
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                cookies = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading cookies from {self.path}: {e}")
            return None

        if not isinstance(cookies, list):
            logger.error(f"Cookie file {self.path} does not contain a list, ignoring")
            return None

        logger.info(f"Loaded {len(cookies)} cookies from disk")
        return cookies

    def save(self, cookies):
        """Overwrite the stored cookies. The file is replaced atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".cookies-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(cookies), f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.info(f"Saved {len(cookies)} cookies to disk")

