import os
import json
from datetime import datetime
from typing import Any, Dict, Optional


class AuditLogger:
    """Append-only JSON-lines audit trail, one file per day.

    Disabled when log_dir is None: nothing touches the disk.
    """

    def __init__(self, log_dir: Optional[str] = None):
        self.log_file: Optional[str] = None
        if log_dir is not None:
            os.makedirs(log_dir, exist_ok=True)
            self.log_file = os.path.join(log_dir, f"audit_{datetime.now().strftime('%Y%m%d')}.log")

    @property
    def enabled(self) -> bool:
        return self.log_file is not None

    def _write(self, payload: dict) -> None:
        if self.log_file is None:
            return
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")

    def log_access(self, action: str, subject_hash: str, user_id: str, details: str = "") -> None:
        self._write({
            "timestamp": datetime.now().isoformat(),
            "action": action,
            "subject_hash": subject_hash,
            "user_id": user_id,
            "details": details
        })

    def log_analysis(self, subject_hash: str, content_fingerprint: str, summary: Dict[str, Any]) -> None:
        self._write({
            "timestamp": datetime.now().isoformat(),
            "action": "REPORT_ANALYSIS",
            "subject_hash": subject_hash,
            "content_fingerprint": content_fingerprint,
            "summary": summary
        })

    def log_error(self, where: str, subject_hash: str, error: str) -> None:
        self._write({
            "timestamp": datetime.now().isoformat(),
            "action": "ERROR",
            "component": where,
            "subject_hash": subject_hash,
            "error": error
        })
