from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [ushering] %(levelname)s: %(message)s"
DATE_FORMAT = "%b %d, %y %I:%M:%S %p"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger("ushering")
    if any(getattr(handler, "_ushering", False) for handler in root.handlers):
        root.setLevel(level.upper())
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._ushering = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())
