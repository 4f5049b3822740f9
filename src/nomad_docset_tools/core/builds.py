from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable


_PRERELEASE = re.compile(r"-\w+$")


@dataclass(frozen=True)
class BuiltDocset:
    version: str
    archive: Path

    @property
    def is_prerelease(self) -> bool:
        return is_prerelease(self.version)


def is_prerelease(version: str) -> bool:
    # 1.2.3-beta, 1.2.3-rc1, ...
    return _PRERELEASE.search(version) is not None


def iter_built_docsets(build_dir: Path, archive_name: str) -> Iterable[BuiltDocset]:
    """Varre build/v<versao>/<Nome>.tgz em ordem de glob (ordenada)."""
    for p in sorted(build_dir.glob(f"v*/{archive_name}")):
        if not p.is_file():
            continue
        yield BuiltDocset(version=p.parent.name[1:], archive=p)
