import json

import pytest

from mealplan.orchestrate.build import build_library, iter_library, load_catalogue


def _make_library(root, raw_record):
    nagi = root / "nagi"
    nagi.mkdir(parents=True)
    (nagi / "piccata.json").write_text(json.dumps(raw_record), encoding="utf-8")
    (nagi / "broken.json").write_text("{not json", encoding="utf-8")
    (nagi / "notes.txt").write_text("ignored", encoding="utf-8")
    jamie = root / "jamie-oliver"
    jamie.mkdir()
    (jamie / "toast.json").write_text(
        json.dumps({"id": "jamie-toast", "chef": "jamie-oliver", "recipe": {"name": "Toast"}}),
        encoding="utf-8",
    )
    (root / "README.md").write_text("not a chef", encoding="utf-8")


def test_iter_library_yields_sorted_keys(tmp_path, raw_record):
    _make_library(tmp_path, raw_record)
    items = list(iter_library(str(tmp_path)))
    assert [k for k, _ in items] == ["jamie-oliver/toast.json", "nagi/broken.json", "nagi/piccata.json"]
    assert items[1][1] is None


def test_build_library_writes_catalogue(tmp_path, raw_record):
    lib = tmp_path / "library"
    _make_library(lib, raw_record)
    out = tmp_path / "out" / "recipes.generated.json"

    result = build_library(str(lib), str(out))

    assert result.succeeded == 2
    assert [f.key for f in result.failures] == ["nagi/broken.json"]
    catalogue = load_catalogue(str(out))
    assert [r["id"] for r in catalogue] == ["jamie-toast", "nagi-chicken-piccata"]
    assert catalogue[0]["source"]["chef"] == {"kind": "known", "slug": "jamie_oliver"}
    assert catalogue[0]["title"] == "Toast"


def test_build_library_requires_library_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_library(str(tmp_path / "missing"), str(tmp_path / "out.json"))


def test_load_catalogue_requires_list(tmp_path):
    path = tmp_path / "cat.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        load_catalogue(str(path))
