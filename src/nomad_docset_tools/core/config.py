from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

DASH_USER_REPO_ENV = "DASH_USER_REPO"


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        def repl(m: re.Match[str]) -> str:
            return os.environ.get(m.group(1), "")
        return _ENV_PATTERN.sub(repl, value)

    if isinstance(value, list):
        return [_expand_env(v) for v in value]

    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}

    return value


@dataclass(frozen=True)
class PathsCfg:
    dash_user_repo: Path
    build_dir: Path
    logs_dir: Path


@dataclass(frozen=True)
class DocsetCfg:
    name: str
    author_name: str
    author_link: str
    aliases: list[str] = field(default_factory=list)

    @property
    def archive_name(self) -> str:
        return f"{self.name}.tgz"


@dataclass(frozen=True)
class AppCfg:
    paths: PathsCfg
    docset: DocsetCfg

    @property
    def docset_root(self) -> Path:
        return self.paths.dash_user_repo / "docsets" / self.docset.name

    @property
    def manifest_path(self) -> Path:
        return self.docset_root / "docset.json"


def load_config(config_path: Path | None = None) -> AppCfg:
    """
    Monta a configuracao.

    Sem arquivo, tudo vem do ambiente (DASH_USER_REPO) e dos defaults.
    Com arquivo YAML, valores ${VAR} sao expandidos a partir do ambiente.
    """
    raw: dict[str, Any] = {}
    if config_path is not None:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        raw = _expand_env(raw)

    p = raw.get("paths", {}) or {}
    repo = (p.get("dash_user_repo") or os.environ.get(DASH_USER_REPO_ENV) or "").strip()
    if not repo:
        raise RuntimeError(f"{DASH_USER_REPO_ENV} ausente (env var ou paths.dash_user_repo).")

    paths = PathsCfg(
        dash_user_repo=Path(repo),
        build_dir=Path(p.get("build_dir") or "build"),
        logs_dir=Path(p.get("logs_dir") or "logs"),
    )

    d = raw.get("docset", {}) or {}
    docset = DocsetCfg(
        name=d.get("name") or "Nomad",
        author_name=d.get("author_name") or "",
        author_link=d.get("author_link") or "",
        aliases=list(d.get("aliases") or []),
    )

    return AppCfg(paths=paths, docset=docset)
