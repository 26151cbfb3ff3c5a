# bridge.py
from __future__ import annotations
import base64
import binascii
import json
import logging
from typing import Any, Dict

import webview
from pydantic import ValidationError

from pdf_compressor.errors import IntakeError, PdfCompressorError
from pdf_compressor.pipeline import CompressionPipeline
from pdf_compressor.schemas import ProgressEvent, UploadIn

log = logging.getLogger(__name__)


class Api:
    """
    Ponte JS <-> Python para o PDF Compressor Desktop (sem servidor).
    Toda resposta é um dict; falhas voltam como {'error': mensagem}.
    """
    def __init__(self, pipeline: CompressionPipeline | None = None) -> None:
        self.pipeline = pipeline or CompressionPipeline()
        self.pipeline.on_progress = self._push_progress

    # ---------- helpers ----------
    def _b64_to_bytes(self, b64: str) -> bytes:
        try:
            return base64.b64decode(b64.encode('ascii'), validate=True)
        except (binascii.Error, UnicodeEncodeError, ValueError) as e:
            raise IntakeError(f'Error loading PDF: {e}') from e

    def _push_progress(self, ev: ProgressEvent) -> None:
        # atualiza a barra na página, se já houver janela
        if not webview.windows:
            return
        js = f'window.updateProgress && window.updateProgress({json.dumps(ev.model_dump())})'
        try:
            webview.windows[0].evaluate_js(js)
        except Exception:
            log.debug('evaluate_js falhou para %s', ev, exc_info=True)

    def _save_dialog(self, data: bytes, filename: str) -> str | None:
        dlg = webview.windows[0].create_file_dialog(
            webview.FileDialog.SAVE,
            save_filename=filename,
        )
        if not dlg:
            return None

        save_path = dlg if isinstance(dlg, str) else dlg[0]
        if not str(save_path).lower().endswith('.pdf'):
            save_path = str(save_path) + '.pdf'

        with open(save_path, 'wb') as f:
            f.write(data)
        log.info('Saved %s (%d bytes)', save_path, len(data))
        return str(save_path)

    # ---------- API: CHECK ----------
    def check(self, name: str, size: int) -> Dict[str, Any]:
        """
        Validação antes de ler o arquivo no JS.
        Retorna: { ok: true } ou { error }
        """
        try:
            self.pipeline.check(name, int(size))
            return {'ok': True}
        except PdfCompressorError as e:
            return {'error': str(e)}
        except Exception as e:
            log.exception('check failed')
            return {'error': str(e)}

    # ---------- API: UPLOAD ----------
    def upload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        payload: { name, size, bytes_b64 }
        Retorna: CompressionReport como dict, ou { error }
        """
        try:
            up = UploadIn.model_validate(payload)
            self.pipeline.check(up.name, up.size)
            data = self._b64_to_bytes(up.bytes_b64)
            report = self.pipeline.start(up.name, data, size=up.size)
            return report.model_dump()
        except ValidationError as e:
            self.pipeline.reset()
            return {'error': f'Error loading PDF: {e.errors()[0].get("msg", "invalid payload")}'}
        except PdfCompressorError as e:
            self.pipeline.reset()
            return {'error': str(e)}
        except Exception as e:
            log.exception('upload failed')
            self.pipeline.reset()
            return {'error': f'Error loading PDF: {e}'}

    # ---------- API: DOWNLOAD ----------
    def download(self) -> Dict[str, Any]:
        """
        Abre o diálogo de salvar com '<nome>_compressed.pdf'.
        Retorna: { saved, path } ou { error }
        """
        try:
            path = self.pipeline.download(self._save_dialog)
            return {'saved': path is not None, 'path': path}
        except PdfCompressorError as e:
            return {'error': str(e)}
        except Exception as e:
            log.exception('download failed')
            return {'error': str(e)}

    # ---------- API: RESET ----------
    def reset(self) -> Dict[str, Any]:
        self.pipeline.reset()
        return {'ok': True}

    def progress(self) -> Dict[str, Any]:
        return self.pipeline.progress.model_dump()
