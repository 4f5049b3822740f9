from __future__ import annotations

from pathlib import PurePosixPath


def sub_version_string(sub_version: int, short_sha: str) -> str:
    return f"{sub_version:03d}-{short_sha}"


def version_for(version: str, sub_version: int, short_sha: str) -> str:
    return f"{version}/{sub_version_string(sub_version, short_sha)}"


def archive_path_for(version: str, sub_version: int, short_sha: str, archive_name: str) -> str:
    # relativo ao diretorio do docset, sempre com "/" (vai para o docset.json)
    return str(PurePosixPath("versions") / version / sub_version_string(sub_version, short_sha) / archive_name)
