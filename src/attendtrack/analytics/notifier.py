from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

from .model import StudentStat

logger = logging.getLogger(__name__)


class SimulatedWarningNotifier:
    """Pretends to email attendance warnings: waits, logs, delivers nothing."""

    def __init__(self, *, delay_seconds: float = 1.5, sleep: Callable[[float], None] = time.sleep):
        self._delay = max(float(delay_seconds), 0.0)
        self._sleep = sleep

    def send(self, students: Sequence[StudentStat]) -> int:
        if self._delay:
            self._sleep(self._delay)
        for s in students:
            logger.debug("simulated warning to %s (%s, %d%%)", s.email, s.course_code, s.attendance)
        logger.info("simulated %d attendance warning email(s)", len(students))
        return len(students)
