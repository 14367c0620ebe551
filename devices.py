"""Relay-backed door, light and fire alarm managers.

Each manager reports its status as the device label followed by one
comma-terminated entry per relay, e.g. ``Doors,OPEN,LOCKED,FAULT,``.
Single devices are addressed by their 1-based position in that list.
"""
from logger import get_logger

from hardware import RelayBoard

FAULT = "FAULT"


class _RelayManager:
    label = ""
    on_text = "ON"
    off_text = "OFF"

    def __init__(self, board: RelayBoard):
        self.board = board
        self.logger = get_logger(__name__)

    def get_status(self) -> str:
        entries = [self.label]
        for pin in self.board.pins:
            if self.board.is_faulted(pin):
                entries.append(FAULT)
            elif self.board.energised[pin]:
                entries.append(self.on_text)
            else:
                entries.append(self.off_text)
        return ",".join(entries) + ","

    def _set_device(self, device_id: int, on: bool) -> bool:
        if not 1 <= device_id <= len(self.board.pins):
            self.logger.error("No %s device %s", self.label, device_id)
            return False
        return self.board.set(self.board.pins[device_id - 1], on)


class DoorManager(_RelayManager):
    """Door locks wired so an energised relay holds the door locked."""

    label = "Doors"
    on_text = "LOCKED"
    off_text = "OPEN"

    def open_all(self) -> bool:
        self.logger.info("Opening all doors")
        return self.board.set_all(False)

    def lock_all(self) -> bool:
        self.logger.info("Locking all doors")
        return self.board.set_all(True)

    def open_door(self, door_id: int) -> bool:
        self.logger.info("Opening door %s", door_id)
        return self._set_device(door_id, False)

    def lock_door(self, door_id: int) -> bool:
        self.logger.info("Locking door %s", door_id)
        return self._set_device(door_id, True)


class LightManager(_RelayManager):
    label = "Lights"

    def set_all(self, on: bool) -> None:
        self.logger.info("Switching all lights %s", "on" if on else "off")
        self.board.set_all(on)

    def set_light(self, on: bool, light_id: int) -> None:
        self.logger.info("Switching light %s %s", light_id, "on" if on else "off")
        self._set_device(light_id, on)


class FireAlarmManager(_RelayManager):
    label = "FireAlarm"

    def set_alarm(self, on: bool) -> None:
        self.logger.info("Fire alarm %s", "sounding" if on else "silenced")
        self.board.set_all(on)
