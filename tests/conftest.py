import io
import json
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from roofquote.extraction.capability import ExtractionCapability
from roofquote.extraction.client_base import BaseExtractionClient


@pytest.fixture()
def scope_pdf_bytes() -> bytes:
    """Single-page PDF with a short insurance scope text layer."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "State Farm Claim 12-3456")
    c.drawString(72, 700, "Flashing - pipe jack 3 EA")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Roof summary")
    c.showPage()
    c.drawString(72, 720, "Line items")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def scanned_pdf_bytes() -> bytes:
    """Valid PDF without any text layer, as produced by a scanner."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def capability_returning() -> Callable[..., tuple[ExtractionCapability, MagicMock]]:
    """Build a capability whose client answers with the given payloads in order.

    Dicts are JSON-encoded; strings are returned verbatim.
    """

    def _build(*responses: Any) -> tuple[ExtractionCapability, MagicMock]:
        client = MagicMock(spec=BaseExtractionClient)
        client.create_chat_completion.side_effect = [
            json.dumps(response) if isinstance(response, dict) else response
            for response in responses
        ]
        return ExtractionCapability(client=client, model="test-model"), client

    return _build
