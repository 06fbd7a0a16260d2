import json

from typer.testing import CliRunner

from mealplan.cli import app

runner = CliRunner()

FAR_FUTURE_MS = 32_503_680_000_000


def _snapshot(path, products):
    path.write_text(json.dumps({"meta": {"version": "1.0.0"}, "products": products}), encoding="utf8")


def _product(expires_at):
    return {
        "product": {"productName": "Brown Onions 1kg"},
        "quantity": 1,
        "unit": "kg",
        "timestamp": 1,
        "expiresAt": expires_at,
        "searchTerm": "onion",
    }


def test_build_and_validate(tmp_path, raw_record):
    lib = tmp_path / "library" / "nagi"
    lib.mkdir(parents=True)
    (lib / "piccata.json").write_text(json.dumps(raw_record), encoding="utf-8")
    (lib / "broken.json").write_text("[", encoding="utf-8")
    out = tmp_path / "recipes.json"

    result = runner.invoke(app, ["build-library", "--library", str(tmp_path / "library"), "--output", str(out)])
    assert result.exit_code == 0
    assert "nagi/broken.json" in result.output
    assert len(json.loads(out.read_text(encoding="utf-8"))) == 1

    result = runner.invoke(app, ["validate-catalogue", str(out)])
    assert result.exit_code == 0


def test_build_missing_library_fails(tmp_path):
    result = runner.invoke(
        app, ["build-library", "--library", str(tmp_path / "missing"), "--output", str(tmp_path / "o.json")]
    )
    assert result.exit_code == 1


def test_validate_reports_duplicates(tmp_path, raw_record):
    from mealplan.normalize.recipe import CostModel, normalize

    record = normalize(raw_record, CostModel()).to_catalogue_dict()
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps([record, record]), encoding="utf-8")

    result = runner.invoke(app, ["validate-catalogue", str(path)])
    assert result.exit_code == 1
    assert "Duplicate" in result.output


def test_cache_sweep_writes_only_when_asked(tmp_path):
    path = tmp_path / "cache.json"
    _snapshot(path, {"onion": _product(FAR_FUTURE_MS), "garlic": _product(1)})

    result = runner.invoke(app, ["cache-sweep", "--snapshot", str(path)])
    assert result.exit_code == 0
    assert "Removed 1" in result.output
    assert "garlic" in json.loads(path.read_text(encoding="utf8"))["products"]

    result = runner.invoke(app, ["cache-sweep", "--snapshot", str(path), "--write"])
    assert result.exit_code == 0
    assert list(json.loads(path.read_text(encoding="utf8"))["products"]) == ["onion"]


def test_cache_keys_and_stats(tmp_path):
    path = tmp_path / "cache.json"
    _snapshot(path, {"onion": _product(FAR_FUTURE_MS), "garlic": _product(1)})

    result = runner.invoke(app, ["cache-keys", "--snapshot", str(path)])
    assert result.exit_code == 0
    assert result.output.split() == ["onion", "garlic"]

    result = runner.invoke(app, ["cache-stats", "--snapshot", str(path)])
    assert result.exit_code == 0


def test_cache_commands_reject_corrupt_snapshot(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{oops", encoding="utf8")
    result = runner.invoke(app, ["cache-stats", "--snapshot", str(path)])
    assert result.exit_code == 1
