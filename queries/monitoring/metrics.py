"""
Run Statistics and Metrics
"""

import time
from typing import Dict, Any

from queries.core.utils import get_logger

logger = get_logger(__name__)


def _fresh_stats() -> Dict[str, Any]:
    return {
        "steps_completed": 0,
        "steps_failed": 0,
        "documents_returned": 0,
        "documents_modified": 0,
        "documents_deleted": 0,
        "indexes_created": 0,
        "start_time": time.time()
    }


class RunStatistics:
    """Track counters and timings for one query run"""

    def __init__(self):
        self.runtime_stats = _fresh_stats()
        self.step_durations: Dict[str, float] = {}

    def increment(self, key: str, value: int = 1) -> None:
        """Increment a runtime statistic"""
        if key in self.runtime_stats:
            self.runtime_stats[key] += value

    def record_step(self, name: str, duration: float) -> None:
        """Record a completed step and how long it took"""
        self.step_durations[name] = duration
        self.increment("steps_completed")

    def get_slowest_step(self) -> str:
        if not self.step_durations:
            return "n/a"
        name = max(self.step_durations, key=self.step_durations.get)
        return f"{name} ({self._format_time(self.step_durations[name])})"

    def get_summary(self) -> Dict[str, Any]:
        """Get statistics summary"""
        elapsed = time.time() - self.runtime_stats["start_time"]

        return {
            "elapsed": self._format_time(elapsed),
            "steps_completed": self.runtime_stats["steps_completed"],
            "steps_failed": self.runtime_stats["steps_failed"],
            "documents_returned": self.runtime_stats["documents_returned"],
            "documents_modified": self.runtime_stats["documents_modified"],
            "documents_deleted": self.runtime_stats["documents_deleted"],
            "indexes_created": self.runtime_stats["indexes_created"],
            "slowest_step": self.get_slowest_step(),
        }

    def _format_time(self, seconds: float) -> str:
        """Format time in human readable format"""
        if seconds < 1:
            return f"{seconds * 1000:.0f}ms"
        minutes, seconds = divmod(seconds, 60)
        if minutes:
            return f"{int(minutes)}m {seconds:.1f}s"
        return f"{seconds:.2f}s"

    def reset(self) -> None:
        """Reset all runtime statistics"""
        self.runtime_stats = _fresh_stats()
        self.step_durations.clear()
        logger.debug("Statistics reset")
