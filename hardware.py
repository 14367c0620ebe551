"""GPIO relay board used by the door, light and fire alarm managers."""
from logger import get_logger
from typing import Iterable

try:
    import RPi.GPIO as GPIO
except Exception:  # pragma: no cover - hardware not present
    GPIO = None


class RelayBoard:
    """Abstraction layer for a bank of relays addressed by BCM pin number."""

    def __init__(self, pins: Iterable[int]):
        self.logger = get_logger(__name__)
        self.pins = list(pins)
        self.energised = {pin: False for pin in self.pins}
        self.faulted: set[int] = set()
        if GPIO:
            GPIO.setwarnings(False)
            GPIO.setmode(GPIO.BCM)
            for pin in self.pins:
                try:
                    GPIO.setup(pin, GPIO.OUT, initial=GPIO.LOW)
                except Exception as exc:  # pragma: no cover - hardware not present
                    self.logger.exception("Failed GPIO setup on %s: %s", pin, exc)
                    self.faulted.add(pin)

    def set(self, pin: int, on: bool) -> bool:
        """Drive one relay. Returns False if the write failed."""
        if pin not in self.energised:
            self.logger.error("Unknown relay pin: %s", pin)
            return False
        self.logger.info("%s relay on GPIO %s", "Energising" if on else "Releasing", pin)
        if GPIO:
            try:
                GPIO.output(pin, GPIO.HIGH if on else GPIO.LOW)
            except Exception as exc:
                self.logger.exception("Failed to drive GPIO %s: %s", pin, exc)
                self.faulted.add(pin)
                return False
        self.faulted.discard(pin)
        self.energised[pin] = on
        return True

    def set_all(self, on: bool) -> bool:
        """Drive every relay; True only if all writes succeeded."""
        results = [self.set(pin, on) for pin in self.pins]
        return all(results)

    def is_faulted(self, pin: int) -> bool:
        return pin in self.faulted

    def cleanup(self) -> None:
        """Clean up GPIO state."""
        self.logger.info("Cleaning up GPIO")
        if GPIO:
            try:
                GPIO.cleanup(self.pins)
            except Exception as exc:  # pragma: no cover - hardware not present
                self.logger.exception("GPIO cleanup failed: %s", exc)
