"""
Session token persistence for the client.

The client keeps its token between runs the way a browser keeps it in local
storage. `MemoryTokenStorage` is used in tests and short-lived scripts;
`FileTokenStorage` writes a small JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class MemoryTokenStorage:
    """Token storage that lives as long as the process"""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str):
        self._token = token

    def clear(self):
        self._token = None


class FileTokenStorage:
    """Token storage backed by a JSON file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8")).get("token")
        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None

    def save(self, token: str):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self):
        if self.path.exists():
            self.path.unlink()
