from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping


@dataclass
class TelemetryService:
    """Append-only JSONL log; `seq` orders records written by this service."""

    path: Path
    seq: int = field(default=0, init=False)

    def _record(self, event_type: str, payload: Mapping[str, object]) -> str:
        self.seq += 1
        rec = {
            "seq": self.seq,
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        return json.dumps(rec, ensure_ascii=False)

    def _append(self, lines: list[str]) -> None:
        if not lines:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self._append([self._record(event_type, payload)])

    def log_events(self, events: Iterable[Mapping[str, object]]) -> None:
        """Write a batch of engine events, keyed by their lowercased `type`."""
        lines = []
        for ev in events:
            payload = {k: v for k, v in ev.items() if k != "type"}
            lines.append(self._record(str(ev.get("type", "unknown")).lower(), payload))
        self._append(lines)

    def read_all(self) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]
