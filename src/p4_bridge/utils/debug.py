"""Debug trace files for p4 invocations."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import threading
import uuid


class DebugLogger:
    """Writes one JSON file per p4 invocation while debug mode is on (singleton pattern).

    Callers are responsible for redacting secrets before handing commands over.
    """

    _enabled: bool = False
    _log_dir: Optional[Path] = None
    _lock = threading.Lock()

    @classmethod
    def configure(cls, enabled: bool = False, log_dir: Optional[Path] = None) -> None:
        """Configure the debug logger.

        Args:
            enabled: Whether debug logging is enabled
            log_dir: Directory for trace files (default: ~/.p4-bridge/logs)
        """
        with cls._lock:
            cls._enabled = enabled
            cls._log_dir = log_dir or Path.home() / ".p4-bridge" / "logs"

            if cls._enabled and cls._log_dir:
                cls._log_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def is_enabled(cls) -> bool:
        """Check if debug mode is enabled."""
        return cls._enabled

    @classmethod
    def log_invocation(
        cls,
        operation: str,
        command: List[str],
        returncode: Optional[int],
        stderr: str = "",
        elapsed: float = 0.0,
        category: str = "p4",
    ) -> Optional[str]:
        """Record a finished p4 invocation.

        Args:
            operation: Subcommand name, used in the trace file name
            command: Redacted command line
            returncode: Process exit code (None if the process never ran)
            stderr: Captured standard error
            elapsed: Wall-clock seconds spent in the process
            category: Subdirectory for the trace file

        Returns:
            The trace id, or None when debug mode is off
        """
        if not cls._enabled:
            return None

        trace_id = str(uuid.uuid4())
        cls._log(operation, {
            "command": command,
            "returncode": returncode,
            "stderr": stderr,
            "elapsed_seconds": round(elapsed, 3),
        }, trace_id, category)
        return trace_id

    @classmethod
    def _log(cls, operation: str, data: Dict[str, Any], trace_id: str, category: str) -> None:
        """Write a single trace file.

        Args:
            operation: Operation name used in the file name
            data: Data to log
            trace_id: Trace ID to include in filename
            category: Category subdirectory
        """
        if not cls._enabled or not cls._log_dir:
            return

        category_dir = cls._log_dir / category
        category_dir.mkdir(parents=True, exist_ok=True)

        # Compact timestamp (e.g., 20251029T054015Z)
        now = datetime.now(timezone.utc)
        timestamp = now.strftime('%Y%m%dT%H%M%SZ')
        filename = f"{operation}_{timestamp}_{trace_id[:4]}.json"
        filepath = category_dir / filename

        log_entry = {
            "timestamp": now.isoformat(),
            "operation": operation,
            "payload": data,
        }

        with cls._lock:
            try:
                with open(filepath, "w", encoding="utf-8") as f:
                    json.dump(log_entry, f, indent=2, default=cls._json_serializer)
            except OSError:
                # Tracing must never break a request
                pass

    @staticmethod
    def _json_serializer(obj: Any) -> str:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Path):
            return str(obj)
        return str(obj)
