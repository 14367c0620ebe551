import os
import tempfile

# Logging and queues write under SBC_BASE_DIR; keep them out of system paths.
os.environ.setdefault("SBC_BASE_DIR", tempfile.mkdtemp(prefix="sbc-tests-"))
