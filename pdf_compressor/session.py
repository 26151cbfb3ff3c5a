"""
pdf_compressor/session.py

Estado de UM arquivo em processamento (nome, bytes originais, resultado).
Não há globais: o pipeline guarda a sessão atual e "resetar" é trocar por uma nova.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .pdf_ops import CompressionResult


@dataclass
class Session:
    """Guarda o original e o resultado escolhido até o próximo reset."""
    filename: Optional[str] = None
    original: Optional[bytes] = None
    result: Optional[CompressionResult] = None

    @property
    def loaded(self) -> bool:
        return self.original is not None

    @property
    def selected(self) -> Optional[bytes]:
        """Bytes a oferecer para download (None enquanto não comprimiu)."""
        return self.result.data if self.result is not None else None
