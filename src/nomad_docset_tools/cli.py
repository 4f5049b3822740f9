from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from nomad_docset_tools.core.config import load_config
from nomad_docset_tools.core.logging_utils import setup_logging
from nomad_docset_tools.core.manifest import empty_manifest, load_manifest
from nomad_docset_tools.core.updater import update_docset_versions

app = typer.Typer(add_completion=False)


@app.command()
def update(
    config: Optional[Path] = typer.Option(None, "--config", exists=True, help="YAML opcional; sem ele usa DASH_USER_REPO."),
) -> None:
    """Adiciona os archives de build/ ao docset.json do Dash-User-Contributions."""
    cfg = load_config(config)
    ev = setup_logging(cfg.paths.logs_dir, cfg.docset.name, level=logging.INFO)
    try:
        result = update_docset_versions(cfg, ev=ev)
    finally:
        ev.close()

    typer.echo(f"{len(result.added)} versao(oes) adicionada(s); version={result.manifest.version}")


@app.command()
def versions(
    config: Optional[Path] = typer.Option(None, "--config", exists=True),
) -> None:
    """Lista as specific_versions do docset.json."""
    cfg = load_config(config)
    if not cfg.manifest_path.exists():
        typer.echo(f"docset.json nao encontrado: {cfg.manifest_path}")
        return

    manifest = load_manifest(cfg.manifest_path, default=empty_manifest(cfg.docset.name))
    typer.echo(f"version: {manifest.version}")
    for v in manifest.specific_versions:
        typer.echo(f"{v.version}\t{v.archive}")


if __name__ == "__main__":
    app()
