from __future__ import annotations

import hashlib
import re
from pathlib import Path


SHORT_SHA_LEN = 8

_SIDECAR_LINE = re.compile(r"^SHA1: (\w+)$")


def sha1_file(path: Path) -> str:
    h = hashlib.sha1()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def short_sha(sha: str) -> str:
    return sha[:SHORT_SHA_LEN]


def read_sidecar_sha1(sidecar: Path) -> str | None:
    """
    Le o SHA1 publicado ao lado do archive (<archive>.txt).

    Retorna None se o arquivo nao existe, se nao houver exatamente uma linha
    "SHA1:" ou se essa linha nao tiver o formato "SHA1: <hex>".
    """
    if not sidecar.is_file():
        return None

    text = sidecar.read_text(encoding="utf-8", errors="ignore")
    lines = [line for line in text.splitlines() if line.startswith("SHA1:")]
    if len(lines) != 1:
        return None

    m = _SIDECAR_LINE.match(lines[0])
    return m.group(1) if m else None
