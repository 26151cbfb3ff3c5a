"""
pdf_compressor/engine_config.py

Parâmetros do motor de compressão.
Valores ajustáveis podem vir do ambiente (PDF_*); valores inválidos caem no default.
"""

# pdf_compressor/engine_config.py
from __future__ import annotations

import os
from typing import Dict, Tuple


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default


MIB = 1024 * 1024

# Limite de upload: 100 MiB exatos (104_857_600 bytes)
MAX_UPLOAD_BYTES = _env_int("PDF_MAX_UPLOAD_BYTES", 100 * MIB)

# Serialização estrutural: object streams ligados, sem página em branco extra
SAVE_FLAGS: Dict[str, bool] = {
    "use_object_streams": True,
    "add_default_page": False,
}

# Caminho alternativo (rasterizar → JPEG → PDF)
RASTER_SCALE = _env_float("PDF_RASTER_SCALE", 0.7)
RASTER_JPEG_QUALITY = _env_int("PDF_RASTER_JPEG_QUALITY", 80)

# Piso do denominador da razão de compressão (em MB)
RATIO_FLOOR_MB = 0.01

# Estágios visíveis na barra de progresso: percent -> texto
PROGRESS_STAGES: Dict[str, Tuple[int, str]] = {
    "load":     (25,  "Loading file..."),
    "start":    (50,  "Starting compression..."),
    "compress": (75,  "Compressing..."),
    "done":     (100, "Compression complete!"),
    "skipped":  (100, "Compression skipped (error occurred)"),
}

RESULTS_DELAY_MS = _env_int("PDF_RESULTS_DELAY_MS", 1000)

LOG_LEVEL = os.getenv("PDF_LOG_LEVEL", "INFO").strip() or "INFO"
LOG_DIR = os.getenv("PDF_LOG_DIR", "logs").strip() or "logs"
