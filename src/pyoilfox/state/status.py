"""In-process health status sink."""

from __future__ import annotations

import logging

from pyoilfox._constants import InstanceStatus

_logger = logging.getLogger(__name__)


class StatusRecorder:
    """Keeps the current status code and the sequence of transitions."""

    def __init__(self) -> None:
        self.status: InstanceStatus | None = None
        self.history: list[InstanceStatus] = []

    def set_status(self, code: InstanceStatus) -> None:
        code = InstanceStatus(code)
        if code != self.status:
            level = logging.INFO if code == InstanceStatus.ACTIVE else logging.WARNING
            _logger.log(level, "Status changed: %s -> %s", self.status.name if self.status else None, code.name)
            self.history.append(code)
        self.status = code
