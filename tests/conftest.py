import hashlib
import json
from pathlib import Path

import pytest

from nomad_docset_tools.core.config import AppCfg, DocsetCfg, PathsCfg
from nomad_docset_tools.core.logging_utils import EventLogger


def sha1_bytes(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


@pytest.fixture
def cfg(tmp_path: Path) -> AppCfg:
    return AppCfg(
        paths=PathsCfg(
            dash_user_repo=tmp_path / "dash",
            build_dir=tmp_path / "build",
            logs_dir=tmp_path / "logs",
        ),
        docset=DocsetCfg(name="Nomad", author_name="HashiCorp", author_link="https://www.nomadproject.io"),
    )


@pytest.fixture
def ev(tmp_path: Path):
    logger = EventLogger(path=tmp_path / "logs" / "events_test.jsonl", run_id="test")
    yield logger
    logger.close()


@pytest.fixture
def make_build(cfg: AppCfg):
    def _make(version: str, content: bytes) -> Path:
        p = cfg.paths.build_dir / f"v{version}" / "Nomad.tgz"
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
        return p

    return _make


@pytest.fixture
def write_manifest(cfg: AppCfg):
    def _write(versions: list[dict], version: str = "") -> Path:
        cfg.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "name": "Nomad",
            "aliases": ["hashicorp"],
            "archive": "Nomad.tgz",
            "author": {"name": "HashiCorp", "link": "https://www.nomadproject.io"},
            "version": version,
            "specific_versions": versions,
        }
        cfg.manifest_path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        return cfg.manifest_path

    return _write
