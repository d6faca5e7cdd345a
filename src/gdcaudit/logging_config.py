"""Process-wide logging setup, split around the litellm import.

setup_logging() runs before anything imports litellm: litellm reads
LITELLM_LOG once, at import time, to pick its handler level.

cleanup_third_party_handlers() runs after all imports: litellm attaches
its own StreamHandlers on import, which double every line once root
propagation is also active.

Both are idempotent (guarded by module-level flags).
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# acompletion logs through this logger only
_LITELLM_LOGGERS = ("LiteLLM",)

# Held at WARNING; httpx logs one INFO line per model request
_SUPPRESSED_LOGGERS = (*_LITELLM_LOGGERS, "httpx")

_phase1_done = False
_phase2_done = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger and pin litellm's log level.

    Second call is a no-op.
    """
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    os.environ.setdefault("LITELLM_LOG", "WARNING")

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def cleanup_third_party_handlers() -> None:
    """Drop litellm's own handlers and let records propagate to root.

    Second call is a no-op.
    """
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
