from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


LOG_PATH = Path(os.getenv("STAY_EVENT_LOG_PATH", "stay_events.log"))


def log_event(user_id: str, event: str, data: Dict[str, Any], path: Path | None = None) -> None:
    """
    Append a structured stay event (reconciliation corrections, inserts,
    deletions) as one JSON line.
    """
    target = path or LOG_PATH
    try:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "user_id": user_id,
            "event": event,
            "data": data,
        }
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
    except OSError:
        # Disk errors writing the event log must not fail a request.
        return
