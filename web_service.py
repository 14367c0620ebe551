"""Remote event logging for the building controller."""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from logger import base_dir, get_logger


class WebServiceError(RuntimeError):
    """Raised when an event that must be delivered could not be posted."""


class WebServiceLogger:
    """Send controller events to the building's logging web service."""

    def __init__(
        self,
        url: Optional[str],
        building_id: str = "",
        timeout: float = 5,
        queue_path: Optional[Path] = None,
        retry_delay: float = 1,
    ) -> None:
        self.url = url
        self.building_id = building_id.lower()
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.queue_path = queue_path or base_dir() / "logs" / "web_service_queue.json"
        self.logger = get_logger(__name__)
        self.queue = self._load_queue()

    def _load_queue(self) -> list[Dict[str, Any]]:
        if self.queue_path.exists():
            try:
                with open(self.queue_path, "r") as f:
                    return json.load(f)
            except (OSError, ValueError):
                self.logger.warning("Failed reading web service queue; starting empty")
        return []

    def _save_queue(self) -> None:
        try:
            self.queue_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.queue_path, "w") as f:
                json.dump(self.queue, f)
        except OSError as exc:
            self.logger.error("Failed saving web service queue: %s", exc)

    def _post(self, payload: Dict[str, Any]) -> bool:
        if not self.url:
            return False
        for attempt in range(3):
            try:
                r = requests.post(self.url, json=payload, timeout=self.timeout)
                if r.status_code == 200:
                    return True
                self.logger.warning(
                    "Web service POST failed (%s): status %s", attempt + 1, r.status_code
                )
            except requests.RequestException as exc:
                self.logger.warning("Web service POST failed (%s): %s", attempt + 1, exc)
            if self.retry_delay:
                time.sleep(self.retry_delay)
        return False

    def _payload(self, event_type: str, detail: str) -> Dict[str, Any]:
        return {
            "building_id": self.building_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "detail": detail,
        }

    def _send_or_queue(self, payload: Dict[str, Any]) -> bool:
        # post the new event before retrying the backlog
        if self._post(payload):
            self.flush_queue()
            return True
        self.queue.append(payload)
        self._save_queue()
        return False

    def flush_queue(self) -> None:
        while self.queue:
            if self._post(self.queue[0]):
                self.queue.pop(0)
                self._save_queue()
            else:
                break

    def log_fire_alarm(self, detail: str) -> None:
        if not self.url:
            raise WebServiceError("web service URL not configured")
        if not self._send_or_queue(self._payload("fire_alarm", detail)):
            raise WebServiceError(f"could not log fire alarm to {self.url}")

    def log_engineer_required(self, detail: str) -> None:
        if not self.url:
            return
        self._send_or_queue(self._payload("engineer_required", detail))

    def log_state_change(self, detail: str) -> None:
        if not self.url:
            return
        self._send_or_queue(self._payload("state_change", detail))
