"""Controller-wide logging with a tamper-evident hash chain.

Every line written to ``building_controller.log`` ends in ``| HASH: <sha256>``
computed over the previous line's hash and the line itself. The chain
carries over restarts and starts afresh in each rotated file.
"""
import logging
import hashlib
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_BASE_DIR = "/var/lib/building-controller"
LOG_NAME = "building_controller.log"
_FORMAT = logging.Formatter(
    '[%(asctime)s] %(levelname)s [%(building_id)s] %(name)s - %(message)s'
)

_handler: Optional["HashChainingHandler"] = None


def base_dir() -> Path:
    """Return the data directory for logs and queues."""
    return Path(os.environ.get("SBC_BASE_DIR", DEFAULT_BASE_DIR))


def default_log_dir() -> Path:
    return base_dir() / "logs"


def last_hash(path: Path) -> str:
    """Return the hash ending the last line of ``path``, or '' if none."""
    try:
        with open(path) as f:
            tail = ''
            for line in f:
                if line.strip():
                    tail = line
    except FileNotFoundError:
        return ''
    _, sep, digest = tail.rstrip('\n').rpartition(' | HASH: ')
    return digest if sep else ''


class BuildingIdFilter(logging.Filter):
    """Stamp each record with the building it concerns."""

    def __init__(self, building_id: str = '') -> None:
        super().__init__()
        self.building_id = building_id.lower() or '-'

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, 'building_id'):
            record.building_id = self.building_id
        return True


class HashChainingHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that appends a hash chain to each entry."""

    def __init__(self, filename: str, chain_file: Path, **kwargs) -> None:
        super().__init__(filename, **kwargs)
        self.prev_hash = last_hash(Path(filename))
        self.chain_file = chain_file
        self._recorded = self.prev_hash

    def doRollover(self) -> None:  # type: ignore[override]
        self._record_chain_end()
        super().doRollover()
        self.prev_hash = ''

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            if self.shouldRollover(record):
                self.doRollover()
            if self.stream is None:
                self.stream = self._open()
            # tracebacks are folded onto one line so each entry keeps its hash
            line = self.format(record).replace('\n', '\\n')
            digest = hashlib.sha256((self.prev_hash + line).encode()).hexdigest()
            self.prev_hash = digest
            self.stream.write(f"{line} | HASH: {digest}{self.terminator}")
            self.flush()
        except Exception:
            self.handleError(record)

    def _record_chain_end(self) -> None:
        if not self.prev_hash or self.prev_hash == self._recorded:
            return
        self._recorded = self.prev_hash
        try:
            self.chain_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.chain_file, 'a') as f:
                f.write(self.prev_hash + '\n')
        except OSError:
            pass

    def close(self) -> None:  # type: ignore[override]
        super().close()
        self._record_chain_end()


def configure_logging(
    log_dir: Optional[Path] = None,
    level: str = "INFO",
    building_id: str = "",
) -> Path:
    """
    Install the hash-chained handler on the root logger.
    Calling again replaces the previous handler, so a controller built
    from configuration can move the log and tag it with its building id.
    Returns:
        Path: the active log file
    """
    global _handler
    log_dir = Path(log_dir) if log_dir else default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_NAME
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()
    handler = HashChainingHandler(
        str(log_path), log_dir / "log_chain.txt", when='midnight', backupCount=7
    )
    handler.setFormatter(_FORMAT)
    handler.addFilter(BuildingIdFilter(building_id))
    root.setLevel(level.upper())
    root.addHandler(handler)
    _handler = handler
    return log_path


def active_log_path() -> Optional[Path]:
    return Path(_handler.baseFilename) if _handler is not None else None


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name, configuring defaults on first use."""
    if _handler is None:
        configure_logging()
    return logging.getLogger(name)
