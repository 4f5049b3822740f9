from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn

from nomad_docset_tools.core.builds import BuiltDocset, iter_built_docsets
from nomad_docset_tools.core.config import AppCfg
from nomad_docset_tools.core.hashing import sha1_file, short_sha
from nomad_docset_tools.core.logging_utils import EventLogger, setup_logging
from nomad_docset_tools.core.manifest import (
    DocsetManifest,
    DocsetVersion,
    empty_manifest,
    load_manifest,
    save_manifest,
)
from nomad_docset_tools.core.output_layout import archive_path_for, version_for
from nomad_docset_tools.core.versioning import decide_sub_version, versions_for

log = logging.getLogger("nomad_docset_tools.updater")


@dataclass
class UpdateResult:
    manifest: DocsetManifest
    added: list[DocsetVersion] = field(default_factory=list)
    skipped: list[BuiltDocset] = field(default_factory=list)


def _copy_archive(src: Path, docset_root: Path, archive_rel: str, ev: EventLogger) -> None:
    dest = docset_root / archive_rel
    dest.parent.mkdir(parents=True, exist_ok=True)

    if dest.exists():
        return

    shutil.copy(src, dest)
    ev.event("archive_copied", src=str(src), dest=str(dest))


def _add_built_docset(
    manifest: DocsetManifest,
    built: BuiltDocset,
    docset_root: Path,
    archive_name: str,
    ev: EventLogger,
) -> DocsetVersion | None:
    sha = sha1_file(built.archive)
    short = short_sha(sha)

    existing = versions_for(manifest.specific_versions, built.version)
    decision = decide_sub_version(existing, sha, short)

    if decision.skip:
        log.info("Ignorando %s (%s ja publicado)", built.archive, decision.reason)
        ev.event(f"docset_skipped_{decision.reason}", version=built.version, sha1=sha)
        return None

    entry = DocsetVersion(
        version=version_for(built.version, decision.sub_version, short),
        archive=archive_path_for(built.version, decision.sub_version, short, archive_name),
        root=docset_root,
    )

    _copy_archive(built.archive, docset_root, entry.archive, ev)
    manifest.specific_versions.append(entry)

    log.info("Nova versao %s -> %s", entry.version, entry.archive)
    ev.event("docset_added", version=entry.version, archive=entry.archive, sha1=sha)
    return entry


def _finalize(manifest: DocsetManifest) -> None:
    manifest.specific_versions = sorted(manifest.specific_versions, key=lambda v: v.version, reverse=True)

    if not manifest.specific_versions:
        log.warning("Manifest sem specific_versions; version mantida em %r", manifest.version)
        return

    manifest.version = manifest.specific_versions[0].version


def update_docset_versions(cfg: AppCfg, ev: EventLogger | None = None) -> UpdateResult:
    """
    Reconcilia os archives em build/ com o docset.json publicado.

    Archives novos (por SHA1) ganham um sub-version, sao copiados para
    versions/<versao>/<NNN>-<sha curto>/ e entram no manifest, que eh
    reescrito inteiro ao final. Rodar de novo com o mesmo build eh seguro.
    """
    own_ev = ev is None
    if ev is None:
        ev = setup_logging(cfg.paths.logs_dir, cfg.docset.name, level=logging.INFO)

    docset_root = cfg.docset_root
    manifest_path = cfg.manifest_path
    archive_name = cfg.docset.archive_name

    try:
        with ev.run(
            docset_root=str(docset_root),
            manifest_path=str(manifest_path),
            build_dir=str(cfg.paths.build_dir),
        ) as summary:
            manifest = load_manifest(
                manifest_path,
                default=empty_manifest(
                    cfg.docset.name,
                    author_name=cfg.docset.author_name,
                    author_link=cfg.docset.author_link,
                    aliases=cfg.docset.aliases,
                ),
            )
            ev.event(
                "manifest_loaded",
                exists=manifest_path.exists(),
                version=manifest.version,
                entries=len(manifest.specific_versions),
            )

            built = list(iter_built_docsets(cfg.paths.build_dir, archive_name))
            result = UpdateResult(manifest=manifest)

            for b in built:
                if b.is_prerelease:
                    ev.event("docset_skipped_prerelease", version=b.version, archive=str(b.archive))
                    result.skipped.append(b)
            work = [b for b in built if not b.is_prerelease]

            ev.event("scan_done", count=len(built), releases=len(work))

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TimeElapsedColumn(),
            ) as progress:
                task = progress.add_task("Atualizando docset...", total=len(work))
                for b in work:
                    entry = _add_built_docset(manifest, b, docset_root, archive_name, ev)
                    if entry is None:
                        result.skipped.append(b)
                    else:
                        result.added.append(entry)
                    progress.advance(task)

            _finalize(manifest)
            save_manifest(manifest, manifest_path)
            ev.event(
                "manifest_written",
                path=str(manifest_path),
                version=manifest.version,
                entries=len(manifest.specific_versions),
            )
            summary["added"] = len(result.added)
        return result
    finally:
        if own_ev:
            ev.close()
