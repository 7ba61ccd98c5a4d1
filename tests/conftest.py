"""Shared fixtures: in-process fakes of the remote APIs and sample documents."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx
import pytest


class FakeAssemblyAI:
    """Scripted AssemblyAI upload / transcript / status endpoints.

    ``statuses`` is consumed one entry per status check; the last entry
    repeats forever. An entry is either a JSON body or an ``httpx.Response``
    (or an exception instance, raised as-is).
    """

    def __init__(self, statuses: list[Any]) -> None:
        self.statuses = list(statuses)
        self.calls: list[tuple[str, str]] = []
        self.poll_times: list[float] = []
        self.requests: list[httpx.Request] = []
        self.upload_response: httpx.Response | None = None
        self.create_response: httpx.Response | None = None
        self._next_job = 0

    @property
    def poll_count(self) -> int:
        return len(self.poll_times)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        self.requests.append(request)

        if request.method == "POST" and path == "/v2/upload":
            if self.upload_response is not None:
                return self.upload_response
            return httpx.Response(200, json={"upload_url": "https://cdn.test/audio-1"})

        if request.method == "POST" and path == "/v2/transcript":
            if self.create_response is not None:
                return self.create_response
            self._next_job += 1
            return httpx.Response(200, json={"id": f"job-{self._next_job}", "status": "queued"})

        if request.method == "GET" and path.startswith("/v2/transcript/"):
            self.poll_times.append(time.monotonic())
            entry = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            if isinstance(entry, Exception):
                raise entry
            if isinstance(entry, httpx.Response):
                return entry
            return httpx.Response(200, json={"id": path.rsplit("/", 1)[-1], **entry})

        return httpx.Response(404, json={"error": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def assemblyai_api() -> Callable[[list[Any]], FakeAssemblyAI]:
    """Factory for a scripted AssemblyAI fake."""
    return FakeAssemblyAI


def _make_pdf(text: str) -> bytes:
    """Build a one-page PDF that shows ``text`` in Helvetica."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n%s\nendstream" % (len(stream), stream),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n%s\nendobj\n" % (number, body)

    xref_at = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_at,
    )
    return bytes(out)


@pytest.fixture
def make_pdf() -> Callable[[str], bytes]:
    """Factory for small single-page PDFs."""
    return _make_pdf
