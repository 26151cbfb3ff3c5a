"""
pdf_compressor/schemas.py

Modelos trocados com a página via bridge (`Api`).
- `UploadIn`: arquivo escolhido (nome, tamanho declarado, conteúdo em base64).
- `ProgressEvent`: estágio atual da barra (percent + texto).
- `SizeStats`: números do painel de resultados, já formatados.
- `CompressionReport`: resposta de `Api.upload`.
"""

# pdf_compressor/schemas.py
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


class UploadIn(BaseModel):
    name: str
    size: int = Field(ge=0)
    bytes_b64: str


class ProgressEvent(BaseModel):
    percent: int = Field(ge=0, le=100)
    text: str = ""


class SizeStats(BaseModel):
    original_mb: str
    compressed_mb: str
    reduction_percent: str
    compression_ratio: str
    original_bytes: int
    compressed_bytes: int


class CompressionReport(BaseModel):
    filename: str
    download_name: str
    outcome: str
    status_text: str
    page_count: Optional[int] = None
    reason: Optional[str] = None
    stats: SizeStats
    results_delay_ms: int = 0
