# main.py
import logging
import sys
from pathlib import Path
import webview
from bridge import Api
from pdf_compressor import engine_config
from pdf_compressor.engine_config import LOG_DIR, LOG_LEVEL
from pdf_compressor.logging_setup import setup_logging

def app_root() -> Path:
    """
    Retorna a pasta dos arquivos estáticos (index.html vive dentro do pacote).
    - Em build PyInstaller one-file: usa a pasta temporária (sys._MEIPASS)/pdf_compressor.
    - Instalado ou em dev: usa a pasta do pacote pdf_compressor.
    """
    meipass = getattr(sys, "_MEIPASS", None)  # evita aviso do type checker
    if meipass:
        return Path(meipass) / "pdf_compressor"
    return Path(engine_config.__file__).resolve().parent


def index_path() -> Path:
    return app_root() / "index.html"


def main() -> None:
    setup_logging(Path(LOG_DIR), level=LOG_LEVEL)
    log = logging.getLogger("pdf_compressor.main")

    index_uri = index_path().as_uri()  # gera "file:///.../index.html"

    api = Api()

    webview.create_window(
        title="PDF Compressor",
        url=index_uri,           # abre via file://
        width=900,
        height=700,
        resizable=True,
        js_api=api,
    )

    log.info("Window created, loading %s", index_uri)
    webview.start(debug=False)


if __name__ == "__main__":
    main()
