from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logging(
        log_dir: Path,
        level: str = "INFO",
        file_name: str = "pdf_compressor.log",
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicated handlers on reloads
    if root.handlers:
        return

    fmt = logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s %(message)s")

    # Console
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    root.addHandler(sh)

    # File with rotation
    fh = RotatingFileHandler(
        filename=str(log_dir / file_name),
        maxBytes=max_bytes,
        backupCount=backup_count,
    )
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.getLogger("pywebview").setLevel(logging.WARNING)
