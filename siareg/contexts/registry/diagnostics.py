"""
Data-quality diagnostics for register records.

Anomalies (unknown vocabulary, missing fields, unparseable dates) are never
failures. They are handed to a sink so the parsing code stays free of global
output and can be tested without capturing logs.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from dotenv import load_dotenv
from loguru import logger

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

ANOMALY_LOG_NAME = "register_anomalies.txt"


class DiagnosticsSink(Protocol):
    def record_anomaly(self, message: str, **context: Any) -> None: ...


class LoguruDiagnostics:
    """Default sink: report anomalies as loguru warnings."""

    def record_anomaly(self, message: str, **context: Any) -> None:
        if context:
            details = ", ".join(f"{key}={value!r}" for key, value in context.items())
            logger.warning(f"{message} ({details}) - please report this issue")
        else:
            logger.warning(f"{message} - please report this issue")


class AnomalyLogDiagnostics:
    """
    Append anomalies to a JSON Lines file, one event per line.

    Another process can tail the file to spot layout or vocabulary drift on
    the register.
    """

    def __init__(self, log_dir: Path = LOGS_PATH):
        self.log_path = Path(log_dir)
        self.log_path.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_path / ANOMALY_LOG_NAME

    def record_anomaly(self, message: str, **context: Any) -> None:
        event = {
            "timestamp": datetime.now().isoformat(),
            "message": message,
            "context": context,
        }

        with open(self.log_file, "a") as f:
            f.write(json.dumps(event, default=str) + "\n")


_default_sink = LoguruDiagnostics()


def default_diagnostics() -> DiagnosticsSink:
    return _default_sink
