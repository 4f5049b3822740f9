import json
from pathlib import Path

import pytest

from nomad_docset_tools.core.manifest import (
    DocsetVersion,
    ManifestError,
    empty_manifest,
    load_manifest,
    manifest_from_dict,
    save_manifest,
)


def _data(**overrides):
    data = {
        "name": "Nomad",
        "aliases": [],
        "archive": "Nomad.tgz",
        "author": {"name": "HashiCorp", "link": "https://www.nomadproject.io"},
        "version": "1.0.0",
        "specific_versions": [{"version": "1.0.0", "archive": "versions/1.0.0/Nomad.tgz"}],
    }
    data.update(overrides)
    return data


def test_missing_file_returns_default(tmp_path: Path):
    default = empty_manifest("Nomad")
    assert load_manifest(tmp_path / "docset.json", default=default) is default


def test_unknown_field_fails_fast():
    with pytest.raises(ManifestError, match="desconhecidos"):
        manifest_from_dict(_data(icon="x"))


def test_missing_field_fails_fast():
    data = _data()
    del data["author"]
    with pytest.raises(ManifestError, match="ausentes"):
        manifest_from_dict(data)


def test_bad_version_entry_fails_fast():
    with pytest.raises(ManifestError, match=r"specific_versions\[0\]"):
        manifest_from_dict(_data(specific_versions=[{"version": "1.0.0"}]))


def test_invalid_json_raises(tmp_path: Path):
    p = tmp_path / "docset.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_manifest(p, default=empty_manifest("Nomad"))


def test_serialization_field_order(tmp_path: Path):
    p = tmp_path / "docset.json"
    p.write_text(
        json.dumps(
            {
                "version": "1.0.0",
                "specific_versions": [{"archive": "versions/1.0.0/Nomad.tgz", "version": "1.0.0"}],
                "name": "Nomad",
                "author": {"name": "HashiCorp", "link": "https://www.nomadproject.io"},
                "archive": "Nomad.tgz",
                "aliases": ["hashicorp"],
            }
        ),
        encoding="utf-8",
    )
    m = load_manifest(p, default=empty_manifest("Nomad"))
    save_manifest(m, p)

    text = p.read_text(encoding="utf-8")
    assert list(json.loads(text)) == ["name", "aliases", "archive", "author", "version", "specific_versions"]
    assert list(json.loads(text)["specific_versions"][0]) == ["version", "archive"]
    assert '\n    "name": "Nomad"' in text
    assert not (tmp_path / "docset.tmp").exists()


def test_sha1sum_reads_sidecar(tmp_path: Path):
    (tmp_path / "versions" / "1.0.0").mkdir(parents=True)
    (tmp_path / "versions" / "1.0.0" / "Nomad.tgz.txt").write_text("SHA1: abc123\n", encoding="utf-8")

    m = manifest_from_dict(_data(), root=tmp_path)
    assert m.specific_versions[0].sha1sum == "abc123"


def test_sha1sum_without_root_is_absent():
    assert DocsetVersion(version="1.0.0", archive="versions/1.0.0/Nomad.tgz").sha1sum is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": None},
        {"archive": 1},
        {"version": None},
        {"aliases": ["hashicorp", None]},
        {"author": None},
        {"specific_versions": [{"version": "1.0.0", "archive": None}]},
        {"specific_versions": [{"version": 100, "archive": "versions/1.0.0/Nomad.tgz"}]},
    ],
)
def test_wrong_field_types_fail_fast(overrides):
    with pytest.raises(ManifestError):
        manifest_from_dict(_data(**overrides))


def test_author_may_be_plain_string():
    assert manifest_from_dict(_data(author="HashiCorp")).author == "HashiCorp"
