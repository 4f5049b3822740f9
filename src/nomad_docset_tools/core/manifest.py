from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any

from nomad_docset_tools.core.hashing import read_sidecar_sha1


MANIFEST_FIELDS = ("name", "aliases", "archive", "author", "version", "specific_versions")
VERSION_FIELDS = ("version", "archive")


class ManifestError(ValueError):
    pass


@dataclass
class DocsetVersion:
    version: str
    archive: str
    # diretorio do docset (onde ficam docset.json e versions/); usado so para o sidecar
    root: Path | None = field(default=None, repr=False, compare=False)

    @cached_property
    def sha1sum(self) -> str | None:
        if self.root is None:
            return None
        return read_sidecar_sha1(self.root / f"{self.archive}.txt")

    def to_dict(self) -> dict[str, str]:
        return {"version": self.version, "archive": self.archive}


@dataclass
class DocsetManifest:
    name: str
    aliases: list[str]
    archive: str
    author: Any
    version: str
    specific_versions: list[DocsetVersion] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "aliases": list(self.aliases),
            "archive": self.archive,
            "author": self.author,
            "version": self.version,
            "specific_versions": [v.to_dict() for v in self.specific_versions],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=4)


def _check_keys(obj: Any, expected: tuple[str, ...], what: str) -> None:
    if not isinstance(obj, dict):
        raise ManifestError(f"{what}: esperado objeto JSON, recebido {type(obj).__name__}")

    unknown = sorted(set(obj) - set(expected))
    missing = [k for k in expected if k not in obj]
    if unknown:
        raise ManifestError(f"{what}: campos desconhecidos {unknown}")
    if missing:
        raise ManifestError(f"{what}: campos ausentes {missing}")


def _check_str(obj: dict[str, Any], key: str, what: str) -> str:
    value = obj[key]
    if not isinstance(value, str):
        raise ManifestError(f"{what}: {key} deve ser string, recebido {type(value).__name__}")
    return value


def manifest_from_dict(data: Any, root: Path | None = None) -> DocsetManifest:
    _check_keys(data, MANIFEST_FIELDS, "docset.json")

    for key in ("name", "archive", "version"):
        _check_str(data, key, "docset.json")
    if not isinstance(data["specific_versions"], list):
        raise ManifestError("docset.json: specific_versions deve ser uma lista")
    if not isinstance(data["aliases"], list) or not all(isinstance(a, str) for a in data["aliases"]):
        raise ManifestError("docset.json: aliases deve ser uma lista de strings")
    # Dash aceita {"name", "link"} ou texto simples
    if not isinstance(data["author"], (dict, str)):
        raise ManifestError("docset.json: author deve ser objeto ou string")

    versions: list[DocsetVersion] = []
    for i, sv in enumerate(data["specific_versions"]):
        what = f"docset.json: specific_versions[{i}]"
        _check_keys(sv, VERSION_FIELDS, what)
        versions.append(
            DocsetVersion(
                version=_check_str(sv, "version", what),
                archive=_check_str(sv, "archive", what),
                root=root,
            )
        )

    return DocsetManifest(
        name=data["name"],
        aliases=list(data["aliases"]),
        archive=data["archive"],
        author=data["author"],
        version=data["version"],
        specific_versions=versions,
    )


def empty_manifest(name: str, author_name: str = "", author_link: str = "", aliases: list[str] | None = None) -> DocsetManifest:
    return DocsetManifest(
        name=name,
        aliases=list(aliases or []),
        archive=f"{name}.tgz",
        author={"name": author_name, "link": author_link},
        version="",
    )


def load_manifest(path: Path, default: DocsetManifest) -> DocsetManifest:
    """
    Carrega docset.json. Se nao existir, devolve `default` (manifest vazio).
    JSON invalido ou fora do schema levanta excecao antes de qualquer escrita.
    """
    if not path.exists():
        return default

    data = json.loads(path.read_text(encoding="utf-8"))
    return manifest_from_dict(data, root=path.parent)


def save_manifest(manifest: DocsetManifest, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(manifest.to_json(), encoding="utf-8")
    tmp.replace(path)
