"""Access token stores."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pyoilfox.exceptions import OilFoxSinkError

_logger = logging.getLogger(__name__)


class MemoryTokenStore:
    """Token slot that lives as long as the process."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token


class FileTokenStore:
    """Token slot persisted as a small JSON document, surviving restarts."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_token(self) -> str | None:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError):
            _logger.warning("Ignoring unreadable token file %s", self._path, exc_info=True)
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps({"token": token}), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise OilFoxSinkError(f"Could not persist token to {self._path}: {exc}") from exc
