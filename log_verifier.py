"""Verify the hash chain written by ``logger.HashChainingHandler``."""

import hashlib
from pathlib import Path
from typing import Optional

from logger import active_log_path, get_logger

logger = get_logger(__name__)


def verify(path: Optional[Path] = None) -> bool:
    """Return True when every line of the log carries a valid chained hash.

    Defaults to the log file currently being written.
    """
    path = path or active_log_path()
    prev = ''
    try:
        with open(path) as f:
            for idx, line in enumerate(f, 1):
                line = line.rstrip('\n')
                try:
                    content, hash_part = line.rsplit(' | HASH:', 1)
                except ValueError:
                    logger.error('Missing hash on line %s of %s', idx, path)
                    return False
                calc = hashlib.sha256((prev + content).encode()).hexdigest()
                if calc != hash_part.strip():
                    logger.error('Hash mismatch on line %s of %s', idx, path)
                    return False
                prev = calc
    except FileNotFoundError:
        logger.error('Log file not found: %s', path)
        return False
    return True

