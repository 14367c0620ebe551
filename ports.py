"""Collaborator interfaces consumed by the building controller."""

from typing import Protocol


class DoorPort(Protocol):
    def open_all(self) -> bool:
        """Unlock and open every door. False means the doors did not open."""

    def lock_all(self) -> bool:
        ...

    def open_door(self, door_id: int) -> bool:
        ...

    def lock_door(self, door_id: int) -> bool:
        ...

    def get_status(self) -> str:
        ...


class LightPort(Protocol):
    def set_all(self, on: bool) -> None:
        ...

    def set_light(self, on: bool, light_id: int) -> None:
        ...

    def get_status(self) -> str:
        ...


class FireAlarmPort(Protocol):
    def set_alarm(self, on: bool) -> None:
        ...

    def get_status(self) -> str:
        ...


class ReportingPort(Protocol):
    def log_fire_alarm(self, detail: str) -> None:
        """Record a fire alarm with the remote logging service. May raise."""

    def log_engineer_required(self, detail: str) -> None:
        ...

    def log_state_change(self, detail: str) -> None:
        ...


class AlertPort(Protocol):
    def send_mail(self, to: str, subject: str, body: str) -> None:
        ...
