from __future__ import annotations

import json
import logging
import os
import secrets
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator


LOGGER_NAME = "nomad_docset_tools"

# Eventos que aparecem no events_<run_id>.jsonl de uma atualizacao
EVENTS = frozenset(
    {
        "run_boot",
        "run_start",
        "manifest_loaded",
        "scan_done",
        "docset_skipped_prerelease",
        "docset_skipped_sha",
        "docset_skipped_shortsha",
        "docset_added",
        "archive_copied",
        "manifest_written",
        "run_end",
    }
)


def _make_run_id() -> str:
    return f"{datetime.now():%Y%m%d_%H%M%S}_{secrets.token_hex(3)}"


@dataclass
class EventLogger:
    """
    Eventos JSONL de uma atualizacao do docset.json.

    Cada linha tem ts_utc, run_id e event; nomes fora de EVENTS sao recusados
    para o arquivo continuar comparavel entre execucoes.
    """

    path: Path
    run_id: str

    def __post_init__(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8")

    def event(self, name: str, **fields: Any) -> None:
        if name not in EVENTS:
            raise ValueError(f"Evento desconhecido: {name}")

        payload = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "event": name,
            **fields,
        }
        self._fh.write(json.dumps(payload, ensure_ascii=False) + "\n")
        self._fh.flush()

    @contextmanager
    def run(self, **fields: Any) -> Iterator[dict[str, Any]]:
        """
        Envolve uma execucao com run_start/run_end.

        O dict devolvido vira campos extras do run_end (ex: added=2). Se a
        execucao falhar, run_end sai com ok=False e o erro, e a excecao segue.
        """
        summary: dict[str, Any] = {}
        self.event("run_start", **fields)
        t0 = time.perf_counter()
        try:
            yield summary
        except Exception as e:
            self.event("run_end", ok=False, duration_s=round(time.perf_counter() - t0, 4), error=str(e))
            raise
        self.event("run_end", ok=True, duration_s=round(time.perf_counter() - t0, 4), **summary)

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()


def setup_logging(logs_dir: Path, docset_name: str, level: int = logging.INFO) -> EventLogger:
    """
    Configura o logger do pacote e o arquivo de eventos da execucao.

    Saidas:
      logs/update_<run_id>.log
      logs/events_<run_id>.jsonl
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    run_id = _make_run_id()

    text_log_path = logs_dir / f"update_{run_id}.log"
    events_path = logs_dir / f"events_{run_id}.jsonl"

    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    log.propagate = False

    # Reconfigurar na mesma sessao substitui os handlers anteriores
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")
    for h in (logging.FileHandler(text_log_path, encoding="utf-8"), logging.StreamHandler()):
        h.setLevel(level)
        h.setFormatter(fmt)
        log.addHandler(h)

    log.info("docset=%s run_id=%s log=%s", docset_name, run_id, text_log_path)

    ev = EventLogger(path=events_path, run_id=run_id)
    ev.event("run_boot", docset=docset_name, text_log=str(text_log_path), cwd=os.getcwd(), pid=os.getpid())
    return ev
