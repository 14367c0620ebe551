import logging

import log_verifier
from log_verifier import verify
from logger import (
    BuildingIdFilter,
    HashChainingHandler,
    active_log_path,
    configure_logging,
    get_logger,
)


def attach(path, building_id=""):
    handler = HashChainingHandler(str(path), path.parent / "chain.txt", when="midnight")
    handler.setFormatter(logging.Formatter("%(levelname)s [%(building_id)s] %(message)s"))
    handler.addFilter(BuildingIdFilter(building_id))
    log = logging.getLogger("chain-test")
    log.propagate = False
    log.addHandler(handler)
    return log, handler


def detach(log, handler):
    handler.close()
    log.removeHandler(handler)


def test_chain_round_trip(tmp_path):
    path = tmp_path / "app.log"
    log, handler = attach(path)
    log.warning("doors open")
    log.warning("alarm sounding")
    detach(log, handler)
    assert verify(path)
    text = path.read_text().replace("alarm sounding", "alarm silenced")
    path.write_text(text)
    assert not verify(path)


def test_missing_log(tmp_path):
    assert not verify(tmp_path / "absent.log")


def test_building_id_in_records(tmp_path):
    path = tmp_path / "app.log"
    log, handler = attach(path, "Main-Hall")
    log.warning("lights on")
    detach(log, handler)
    assert "[main-hall] lights on" in path.read_text()


def test_chain_continues_after_restart(tmp_path):
    path = tmp_path / "app.log"
    log, handler = attach(path)
    log.warning("first run")
    detach(log, handler)
    log, handler = attach(path)
    log.warning("second run")
    detach(log, handler)
    assert len(path.read_text().splitlines()) == 2
    assert verify(path)
    assert (tmp_path / "chain.txt").read_text().count("\n") == 2


def test_traceback_kept_on_one_line(tmp_path):
    path = tmp_path / "app.log"
    log, handler = attach(path)
    try:
        raise RuntimeError("relay stuck")
    except RuntimeError:
        log.exception("door manager failed")
    detach(log, handler)
    assert len(path.read_text().splitlines()) == 1
    assert verify(path)


def test_configure_logging_moves_log(tmp_path):
    log_path = configure_logging(tmp_path / "logs", "debug", "Annex")
    assert log_path == tmp_path / "logs" / "building_controller.log"
    assert active_log_path() == log_path
    get_logger("controller-test").debug("configured")
    text = log_path.read_text()
    assert "DEBUG [annex] controller-test - configured" in text
    assert log_verifier.verify()
    configure_logging()
