"""Building mode control built on the door, light, alarm and reporting ports."""
from logger import get_logger
from typing import Optional

from audit import AuditLog
from ports import AlertPort, DoorPort, FireAlarmPort, LightPort, ReportingPort
from state_machine import Mode, NORMAL_MODES, EMERGENCY_MODES, parse_mode, resolve_transition

FAULT_MARKER = "FAULT"
ALERT_RECIPIENT = "smartbuilding@uclan.ac.uk"
ALERT_SUBJECT = "failed to log alarm"
FIRE_ALARM_DETAIL = "fire alarm"

_NO_START_MODE = object()


class InvalidInitialMode(ValueError):
    """Raised when a controller is started in anything but a normal mode."""

    def __init__(self, start_mode) -> None:
        super().__init__(
            "BuildingController can only be initialised to 'open', 'closed', 'out of hours'"
            f" (got {start_mode!r})"
        )
        self.start_mode = start_mode


class BuildingController:
    """Hold the building's mode and drive its safety systems on each change."""

    def __init__(
        self,
        building_id: str,
        start_mode=_NO_START_MODE,
        *,
        door_manager: Optional[DoorPort] = None,
        light_manager: Optional[LightPort] = None,
        fire_alarm_manager: Optional[FireAlarmPort] = None,
        web_service: Optional[ReportingPort] = None,
        email_service: Optional[AlertPort] = None,
        audit_log: Optional[AuditLog] = None,
        report_state_changes: bool = False,
        fault_marker: str = FAULT_MARKER,
        alert_recipient: str = ALERT_RECIPIENT,
        alert_subject: str = ALERT_SUBJECT,
    ):
        self.logger = get_logger(__name__)
        self._building_id = building_id.lower()
        self._current = Mode.OUT_OF_HOURS
        self._history: Optional[Mode] = None
        if start_mode is not _NO_START_MODE:
            mode = parse_mode(start_mode)
            if mode not in NORMAL_MODES:
                self.logger.error("Rejected start mode %r for %s", start_mode, self._building_id)
                raise InvalidInitialMode(start_mode)
            self._current = mode
        self.door_manager = door_manager
        self.light_manager = light_manager
        self.fire_alarm_manager = fire_alarm_manager
        self.web_service = web_service
        self.email_service = email_service
        self.audit_log = audit_log
        self.report_state_changes = report_state_changes
        self.fault_marker = fault_marker
        self.alert_recipient = alert_recipient
        self.alert_subject = alert_subject

    @property
    def building_id(self) -> str:
        return self._building_id

    @building_id.setter
    def building_id(self, value: str) -> None:
        self._building_id = value.lower()

    def get_id(self) -> str:
        return self._building_id

    def set_id(self, building_id: str) -> None:
        self.building_id = building_id

    @property
    def current(self) -> Mode:
        return self._current

    @property
    def history(self) -> Optional[Mode]:
        """Normal mode recorded when the building last entered an emergency."""
        return self._history

    def request_mode(self, target) -> bool:
        """
        Move the building to the requested mode.
        Args:
            target: mode name (case-insensitive) or Mode
        Returns:
            bool: True if the building is now in the requested mode
        """
        requested = parse_mode(target)
        if requested is None:
            self.logger.warning("Unknown mode requested for %s: %r", self._building_id, target)
            self._audit(str(target), "illegal")
            return False
        if requested == self._current:
            return True

        destination = resolve_transition(self._current, requested, self._history)
        if destination is None:
            self.logger.warning(
                "Illegal transition for %s: %s -> %s", self._building_id, self._current, requested
            )
            self._audit(requested.value, "illegal")
            return False

        if not self._dispatch(destination):
            self.logger.error(
                "Transition %s -> %s aborted for %s", self._current, destination, self._building_id
            )
            self._audit(requested.value, "aborted")
            return False

        previous = self._current
        if previous in NORMAL_MODES and destination in EMERGENCY_MODES:
            self._history = previous
        self._current = destination
        self.logger.info("Mode changed from %s to %s for %s", previous, destination, self._building_id)
        self._audit(requested.value, "accepted", from_mode=previous)
        if self.report_state_changes and self.web_service is not None:
            self._best_effort(
                "log state change",
                self.web_service.log_state_change,
                f"{previous.value} -> {destination.value}",
            )
        return True

    def _dispatch(self, mode: Mode) -> bool:
        """Run the effects for entering ``mode``. False aborts the transition."""
        if mode == Mode.CLOSED:
            if self.door_manager is not None:
                self._best_effort("lock doors", self.door_manager.lock_all)
            if self.light_manager is not None:
                self._best_effort("lights off", self.light_manager.set_all, False)
        elif mode == Mode.OPEN:
            return self._open_doors()
        elif mode == Mode.FIRE_DRILL:
            if self.light_manager is not None:
                self._best_effort("lights on", self.light_manager.set_all, True)
            if self.door_manager is not None:
                self._best_effort("open doors", self.door_manager.open_all)
        elif mode == Mode.FIRE_ALARM:
            self._raise_fire_alarm()
        return True

    def _open_doors(self) -> bool:
        if self.door_manager is None:
            self.logger.error("No door manager bound; cannot open %s", self._building_id)
            return False
        try:
            opened = self.door_manager.open_all()
        except Exception:
            self.logger.exception("Door manager failed to open doors")
            return False
        if not opened:
            self.logger.error("Door manager reported doors did not open")
            return False
        return True

    def _raise_fire_alarm(self) -> None:
        if self.fire_alarm_manager is not None:
            self._best_effort("sound alarm", self.fire_alarm_manager.set_alarm, True)
        if self.door_manager is not None:
            self._best_effort("open doors", self.door_manager.open_all)
        if self.light_manager is not None:
            self._best_effort("lights on", self.light_manager.set_all, True)
        if self.web_service is None:
            return
        try:
            self.web_service.log_fire_alarm(FIRE_ALARM_DETAIL)
        except Exception as exc:
            self.logger.exception("Fire alarm logging failed; sending alert email")
            if self.email_service is not None:
                self._best_effort(
                    "alert email",
                    self.email_service.send_mail,
                    self.alert_recipient,
                    self.alert_subject,
                    str(exc),
                )

    def _best_effort(self, action: str, func, *args) -> None:
        try:
            func(*args)
        except Exception:
            self.logger.exception("Best-effort action failed: %s", action)

    def _audit(self, requested: str, outcome: str, from_mode: Optional[Mode] = None) -> None:
        if self.audit_log is None:
            return
        source = from_mode or self._current
        try:
            self.audit_log.record(self._building_id, source.value, requested, outcome)
        except OSError:
            self.logger.exception("Audit write failed")

    def status_report(self) -> str:
        """
        Collect device statuses and call out an engineer for any faults.
        Returns:
            str: light, door and alarm statuses concatenated in that order
        """
        sources = (
            ("Lights", self.light_manager),
            ("Doors", self.door_manager),
            ("FireAlarm", self.fire_alarm_manager),
        )
        statuses = []
        faulted = []
        for label, port in sources:
            if port is None:
                continue
            try:
                status = port.get_status()
            except Exception:
                self.logger.exception("%s status unavailable", label)
                continue
            if status is None:
                continue
            statuses.append(status)
            if self.fault_marker in status:
                faulted.append(label)

        if faulted:
            detail = ",".join(faulted) + ","
            self.logger.warning("Engineer required for %s: %s", self._building_id, detail)
            if self.web_service is not None:
                self._best_effort("engineer required", self.web_service.log_engineer_required, detail)
        return "".join(statuses)
