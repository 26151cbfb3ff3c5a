"""
pipeline.py

Sequência vista pelo usuário: carregar → comprimir → comparar → apresentar.

O pipeline não conhece a janela: avisa o progresso por callback e recebe
a função de salvar no download. Um arquivo por vez; `reset()` troca a sessão.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from .backends import FitzOptimizer, StructuralOptimizer
from .engine_config import MAX_UPLOAD_BYTES, PROGRESS_STAGES, RESULTS_DELAY_MS
from .errors import IntakeError, NoDocumentError
from .intake import output_filename, validate_upload
from .jobs import DownloadHandles
from .pdf_ops import compress_pdf
from .schemas import CompressionReport, ProgressEvent
from .session import Session
from .stats import size_stats, skipped_stats

log = logging.getLogger(__name__)

T = TypeVar("T")
ProgressCallback = Callable[[ProgressEvent], None]


class CompressionPipeline:
    def __init__(
        self,
        optimizer: StructuralOptimizer | None = None,
        on_progress: ProgressCallback | None = None,
        handles: DownloadHandles | None = None,
        max_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self.optimizer = optimizer or FitzOptimizer()
        self.on_progress = on_progress
        self.handles = handles or DownloadHandles()
        self.max_bytes = max_bytes
        self.session = Session()
        self.progress = ProgressEvent(percent=0, text="")

    # ---------- helpers ----------
    def _emit(self, percent: int, text: str) -> None:
        self.progress = ProgressEvent(percent=percent, text=text)
        if self.on_progress is not None:
            self.on_progress(self.progress)

    def _stage(self, key: str) -> None:
        percent, text = PROGRESS_STAGES[key]
        self._emit(percent, text)

    # ---------- etapas ----------
    def check(self, filename: str | None, size: int) -> None:
        """Valida nome/tamanho antes de ler o conteúdo; recusa → reset + IntakeError."""
        try:
            validate_upload(filename, size, self.max_bytes)
        except IntakeError as e:
            log.info("Upload rejected (%s, %d bytes): %s", filename, size, e)
            self.reset()
            raise

    def start(self, filename: str, data: bytes, size: int | None = None) -> CompressionReport:
        """Aceita o arquivo, guarda numa sessão nova e comprime."""
        declared = len(data) if size is None else size
        self.check(filename, declared)
        if declared != len(data):
            self.reset()
            raise IntakeError("Error loading PDF: file size does not match its content")

        self.handles.revoke_all()
        self.session = Session(filename=filename)
        self._stage("load")
        self.session.original = bytes(data)
        log.info("Loaded %s (%d bytes)", filename, len(data))

        self._stage("start")
        return self.compress()

    def compress(self) -> CompressionReport:
        s = self.session
        if not s.loaded or s.original is None or s.filename is None:
            log.debug("No PDF bytes found to compress")
            self.reset()
            raise NoDocumentError()

        self._stage("compress")

        def _pages(n: int) -> None:
            self._emit(PROGRESS_STAGES["compress"][0], f"Optimizing {n} page(s)...")

        result = compress_pdf(s.original, self.optimizer, on_pages=_pages)
        s.result = result

        if result.failed:
            stats = skipped_stats(len(s.original))
            self._stage("skipped")
        else:
            stats = size_stats(len(s.original), len(result.data))
            self._stage("done")

        log.info(
            "Compression results: outcome=%s original=%s MB compressed=%s MB reduction=%s%% ratio=%s",
            result.outcome.value, stats.original_mb, stats.compressed_mb,
            stats.reduction_percent, stats.compression_ratio,
        )

        return CompressionReport(
            filename=s.filename,
            download_name=output_filename(s.filename),
            outcome=result.outcome.value,
            status_text=self.progress.text,
            page_count=result.page_count,
            reason=result.reason,
            stats=stats,
            results_delay_ms=RESULTS_DELAY_MS,
        )

    def download(self, save: Callable[[bytes, str], T]) -> T:
        """Entrega o resultado a `save(data, nome_sugerido)` por um handle transitório.

        O handle é revogado logo depois, mesmo se `save` falhar.
        """
        s = self.session
        data: Optional[bytes] = s.selected
        if data is None or s.filename is None:
            raise NoDocumentError()

        name = output_filename(s.filename)
        handle = self.handles.create(data, name)
        try:
            return save(data, name)
        finally:
            self.handles.revoke(handle)

    def reset(self) -> None:
        """Volta ao estado inicial e descarta os bytes em memória."""
        self.handles.revoke_all()
        self.session = Session()
        self._emit(0, "")
