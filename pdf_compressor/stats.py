"""
stats.py

Estatísticas de tamanho mostradas no painel de resultados.
Tudo em MiB com duas casas; a razão usa piso de 0.01 MB no denominador.
"""

from __future__ import annotations

from .engine_config import MIB, RATIO_FLOOR_MB
from .schemas import SizeStats


def to_mb(n_bytes: int) -> float:
    return n_bytes / MIB


def size_stats(original_len: int, compressed_len: int) -> SizeStats:
    original_mb = to_mb(original_len)
    compressed_mb = to_mb(compressed_len)
    if original_len > 0:
        reduction = (1 - compressed_mb / original_mb) * 100
    else:
        reduction = 0.0
    ratio = original_mb / max(compressed_mb, RATIO_FLOOR_MB)
    return SizeStats(
        original_mb=f"{original_mb:.2f}",
        compressed_mb=f"{compressed_mb:.2f}",
        reduction_percent=f"{reduction:.2f}",
        compression_ratio=f"{ratio:.2f}",
        original_bytes=original_len,
        compressed_bytes=compressed_len,
    )


def skipped_stats(original_len: int) -> SizeStats:
    """Compressão falhou: mesmo tamanho, redução "0", razão "1.00"."""
    size_mb = f"{to_mb(original_len):.2f}"
    return SizeStats(
        original_mb=size_mb,
        compressed_mb=size_mb,
        reduction_percent="0",
        compression_ratio="1.00",
        original_bytes=original_len,
        compressed_bytes=original_len,
    )
