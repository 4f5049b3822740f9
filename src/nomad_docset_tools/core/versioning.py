from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from nomad_docset_tools.core.manifest import DocsetVersion


_SUB_VERSION = re.compile(r"^[0-9.]+/(?P<subversion>\d{3,})-(?P<shortsha>\w+)$")


@dataclass(frozen=True)
class SubVersion:
    number: int
    short_sha: str


@dataclass(frozen=True)
class Decision:
    """
    Resultado da analise de um archive construido.

    sub_version e None quando o archive deve ser ignorado; `reason` diz o motivo
    ("sha" = SHA1 completo ja publicado, "shortsha" = SHA curto ja no manifest).
    """

    sub_version: int | None
    reason: str = ""

    @property
    def skip(self) -> bool:
        return self.sub_version is None


def parse_sub_version(version: str) -> SubVersion | None:
    m = _SUB_VERSION.match(version)
    if not m:
        return None
    return SubVersion(number=int(m.group("subversion")), short_sha=m.group("shortsha"))


def versions_for(entries: Iterable[DocsetVersion], version: str) -> list[DocsetVersion]:
    # prefixo simples de string, igual ao historico do docset.json
    return [e for e in entries if e.version.startswith(version)]


def decide_sub_version(existing: list[DocsetVersion], sha1: str, short_sha: str) -> Decision:
    """
    Escolhe o sub-version de um novo archive dentro de uma versao.

    - SHA1 ja publicado (via sidecar) -> ignora
    - nenhuma entrada -> 1
    - entradas antigas sem o formato NNN-<sha> -> len(entradas) + 1
    - SHA curto ja presente -> ignora; senao maior sub-version + 1
    """
    if sha1 in {e.sha1sum for e in existing if e.sha1sum}:
        return Decision(sub_version=None, reason="sha")

    if not existing:
        return Decision(sub_version=1)

    parsed = [sv for sv in (parse_sub_version(e.version) for e in existing) if sv is not None]

    if not parsed:
        # TODO: pode colidir com uma entrada NNN-<sha> adicionada depois; checar numero ocupado
        return Decision(sub_version=len(existing) + 1)

    if short_sha in {sv.short_sha for sv in parsed}:
        return Decision(sub_version=None, reason="shortsha")

    return Decision(sub_version=max(sv.number for sv in parsed) + 1)
