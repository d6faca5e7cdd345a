"""Structured JSON logger for analysis requests and errors."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from gdcaudit.constants import ERROR_TRUNCATION_CHARS
from gdcaudit.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["AnalysisLogger", "LOG_FORMAT", "LOG_DATEFMT"]


class AnalysisLogger:
    """One JSON object per line in ``analysis.log``, keyed by request_id."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("gdcaudit.analysis_log")
        self._logger.setLevel(getattr(logging, level.upper()))
        self._logger.propagate = False

        log_path = (log_dir / "analysis.log").resolve()
        # One file handler per process; re-point it if the directory moved
        for existing in list(self._logger.handlers):
            if getattr(existing, "baseFilename", None) == str(log_path):
                return
            self._logger.removeHandler(existing)
            existing.close()

        handler = logging.FileHandler(log_path)
        handler.setFormatter(logging.Formatter("%(message)s"))
        self._logger.addHandler(handler)

    @property
    def log_path(self) -> Path:
        return self._log_dir / "analysis.log"

    def log_analysis(
        self,
        request_id: str,
        requirement_code: str,
        document_name: str,
        status: str,
        confidence: int,
        simulated: bool,
        degraded_reason: str | None,
        duration_ms: float,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "analysis",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "requirement": requirement_code,
                "document": document_name[:ERROR_TRUNCATION_CHARS],
                "status": status,
                "confidence": confidence,
                "simulated": simulated,
                "degraded_reason": degraded_reason,
                "duration_ms": duration_ms,
            })
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )
