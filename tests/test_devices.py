import devices
import hardware
from devices import DoorManager, FireAlarmManager, LightManager
from hardware import RelayBoard


class DummyGPIO:
    BCM = 1
    OUT = 0
    HIGH = 1
    LOW = 0
    def __init__(self, broken=()):
        self.state = {}
        self.broken = set(broken)
    def setwarnings(self, flag):
        pass
    def setmode(self, mode):
        pass
    def setup(self, pin, mode, initial=0):
        self.state[pin] = initial
    def output(self, pin, value):
        if pin in self.broken:
            raise RuntimeError(f"GPIO {pin} stuck")
        self.state[pin] = value
    def cleanup(self, pins):
        pass


def test_doors_open_and_lock(monkeypatch):
    gpio = DummyGPIO()
    monkeypatch.setattr(hardware, "GPIO", gpio)
    doors = DoorManager(RelayBoard([17, 27]))
    assert doors.lock_all() is True
    assert gpio.state == {17: 1, 27: 1}
    assert doors.get_status() == "Doors,LOCKED,LOCKED,"
    assert doors.open_all() is True
    assert gpio.state == {17: 0, 27: 0}
    assert doors.get_status() == "Doors,OPEN,OPEN,"


def test_stuck_relay_reports_fault(monkeypatch):
    monkeypatch.setattr(hardware, "GPIO", DummyGPIO(broken={27}))
    doors = DoorManager(RelayBoard([17, 27]))
    assert doors.open_all() is False
    assert doors.get_status() == "Doors,OPEN,FAULT,"
    assert devices.FAULT in doors.get_status()


def test_lights_and_alarm_without_gpio(monkeypatch):
    monkeypatch.setattr(hardware, "GPIO", None)
    lights = LightManager(RelayBoard([5, 6]))
    alarm = FireAlarmManager(RelayBoard([13]))
    assert lights.get_status() == "Lights,OFF,OFF,"
    lights.set_all(True)
    alarm.set_alarm(True)
    assert lights.get_status() == "Lights,ON,ON,"
    assert alarm.get_status() == "FireAlarm,ON,"


def test_unknown_pin_rejected(monkeypatch):
    monkeypatch.setattr(hardware, "GPIO", None)
    board = RelayBoard([5])
    assert board.set(99, True) is False


def test_single_door_open_and_lock(monkeypatch):
    gpio = DummyGPIO()
    monkeypatch.setattr(hardware, "GPIO", gpio)
    doors = DoorManager(RelayBoard([17, 27]))
    assert doors.lock_door(2) is True
    assert gpio.state == {17: 0, 27: 1}
    assert doors.get_status() == "Doors,OPEN,LOCKED,"
    assert doors.open_door(2) is True
    assert doors.get_status() == "Doors,OPEN,OPEN,"


def test_single_door_unknown_id(monkeypatch):
    monkeypatch.setattr(hardware, "GPIO", DummyGPIO())
    doors = DoorManager(RelayBoard([17]))
    assert doors.open_door(0) is False
    assert doors.lock_door(2) is False
    assert doors.get_status() == "Doors,OPEN,"


def test_single_door_stuck_relay(monkeypatch):
    monkeypatch.setattr(hardware, "GPIO", DummyGPIO(broken={27}))
    doors = DoorManager(RelayBoard([17, 27]))
    assert doors.lock_door(1) is True
    assert doors.lock_door(2) is False
    assert doors.get_status() == "Doors,LOCKED,FAULT,"


def test_single_light(monkeypatch):
    gpio = DummyGPIO()
    monkeypatch.setattr(hardware, "GPIO", gpio)
    lights = LightManager(RelayBoard([5, 6, 13]))
    lights.set_light(True, 3)
    assert lights.get_status() == "Lights,OFF,OFF,ON,"
    lights.set_light(True, 1)
    lights.set_light(False, 3)
    lights.set_light(True, 9)
    assert lights.get_status() == "Lights,ON,OFF,OFF,"
    assert gpio.state == {5: 1, 6: 0, 13: 0}
