from __future__ import annotations

import pytest

from fakes import build_pdf


@pytest.fixture
def plain_pdf() -> bytes:
    return build_pdf()
