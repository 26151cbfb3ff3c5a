"""
pdf_compressor/jobs.py

Handles transitórios de download (equivalente a uma object URL).
- `create(data, filename) -> handle`: registra bytes e devolve um identificador.
- `revoke(handle)`: apaga; chamar de novo é inofensivo.
- `outstanding()`: quantos handles ainda vivos.

O pipeline revoga cada handle logo após o download, então no máximo um existe por vez.
"""

from __future__ import annotations
import logging
import secrets
from typing import Dict, Tuple

log = logging.getLogger(__name__)


def new_handle() -> str:
    return "blob:" + secrets.token_urlsafe(12)


class DownloadHandles:
    def __init__(self) -> None:
        # handle -> (pdf_bytes, filename)
        self._items: Dict[str, Tuple[bytes, str]] = {}

    def create(self, data: bytes, filename: str) -> str:
        handle = new_handle()
        self._items[handle] = (data, filename)
        log.debug("Download handle created: %s (%d bytes)", handle, len(data))
        return handle

    def get(self, handle: str) -> Tuple[bytes, str] | None:
        return self._items.get(handle)

    def revoke(self, handle: str) -> None:
        if self._items.pop(handle, None) is not None:
            log.debug("Download handle revoked: %s", handle)

    def revoke_all(self) -> None:
        for k in list(self._items.keys()):
            self.revoke(k)

    def outstanding(self) -> int:
        return len(self._items)
