"""Hash-chained audit trail of mode change requests."""

import json
import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from logger import base_dir, get_logger

EVENT_FIELDS = ('timestamp', 'building_id', 'from_mode', 'requested', 'outcome')


def default_path() -> Path:
    return base_dir() / 'logs' / 'transition_audit.jsonl'


def _digest(event: Dict[str, Any], prev: str) -> str:
    core = {key: event.get(key) for key in EVENT_FIELDS}
    plain = json.dumps(core, sort_keys=True)
    return hashlib.sha256((plain + prev).encode()).hexdigest()


class AuditLog:
    """Append-only JSONL log where every entry hashes the one before it."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else default_path()
        self.logger = get_logger(__name__)

    def _last_hash(self) -> str:
        if not self.path.exists():
            return ""
        try:
            with open(self.path, 'rb') as f:
                f.seek(0, 2)
                if f.tell() == 0:
                    return ""
                pos = f.tell() - 1
                # skip the trailing newline of the last entry
                f.seek(pos)
                if f.read(1) == b'\n':
                    pos -= 1
                while pos > 0:
                    f.seek(pos)
                    if f.read(1) == b'\n':
                        pos += 1
                        break
                    pos -= 1
                f.seek(max(pos, 0))
                line = f.readline().decode().strip()
            if line:
                return json.loads(line).get('hash', '')
        except (OSError, ValueError) as exc:
            self.logger.warning("Unreadable audit tail in %s: %s", self.path, exc)
        return ""

    def record(self, building_id: str, from_mode: str, requested: str, outcome: str) -> Dict[str, Any]:
        """Append one request to the trail and return the stored entry."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        event: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'building_id': building_id,
            'from_mode': from_mode,
            'requested': requested,
            'outcome': outcome,
        }
        event['hash'] = _digest(event, self._last_hash())
        with open(self.path, 'a') as f:
            f.write(json.dumps(event) + '\n')
        return event

    def entries(self) -> list[Dict[str, Any]]:
        if not self.path.exists():
            return []
        with open(self.path) as f:
            return [json.loads(line) for line in f if line.strip()]

    def verify(self) -> bool:
        """Recompute the chain and report the first broken entry."""
        prev = ''
        try:
            with open(self.path) as f:
                for idx, line in enumerate(f, 1):
                    obj = json.loads(line)
                    if _digest(obj, prev) != obj.get('hash'):
                        self.logger.error("Audit hash mismatch at line %s", idx)
                        return False
                    prev = obj['hash']
        except FileNotFoundError:
            self.logger.error("Audit file not found: %s", self.path)
            return False
        except ValueError as exc:
            self.logger.error("Corrupt audit entry in %s: %s", self.path, exc)
            return False
        return True
