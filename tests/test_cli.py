import io
import json

import pytest

from conftest import COOKIES_TEXT, LASAGNA_TEXT
from recipe_pipeline.cli import main


@pytest.fixture(autouse=True)
def no_ai_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GEMINI_API_KEY", "RECIPE_PIPELINE_USE_AI"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cookies_file(tmp_path):
    path = tmp_path / "cookies.txt"
    path.write_text(COOKIES_TEXT, encoding="utf-8")
    return path


def run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


def test_parse(cookies_file, capsys: pytest.CaptureFixture) -> None:
    assert run(["parse", str(cookies_file)]) == 0
    got = json.loads(capsys.readouterr().out)
    assert got["name"] == "Chocolate Chip Cookies"
    assert got["parsingMethod"] == "heuristic"
    assert len(got["instructions"]) == 3


def test_parse_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(LASAGNA_TEXT))
    assert run(["parse", "-"]) == 0
    got = json.loads(capsys.readouterr().out)
    assert got["yieldQuantity"] == 8
    assert got["cookTimeMinutes"] == 90


def test_parse_forced_ai_without_key(cookies_file) -> None:
    assert run(["parse", str(cookies_file), "--force-ai"]) == 1


def test_scale_text(cookies_file, capsys: pytest.CaptureFixture) -> None:
    assert run(["scale", str(cookies_file), "--multiply", "2"]) == 0
    got = json.loads(capsys.readouterr().out)
    assert got["scaleFactor"] == 2
    assert got["ingredients"][0]["quantity"] == 4.5


def test_scale_json_with_constraint(tmp_path, cookies_file, capsys) -> None:
    output = tmp_path / "parsed.json"
    assert run(["--output", str(output), "parse", str(cookies_file)]) == 0

    assert run(["scale", str(output), "--constrain", "0", "4.5"]) == 0
    got = json.loads(capsys.readouterr().out)
    assert got["scaleFactor"] == 2
    assert got["ingredients"][3]["quantity"] == 4


def test_scale_target_yield_without_yield(cookies_file) -> None:
    assert run(["scale", str(cookies_file), "--target-yield", "6"]) == 1


def test_missing_file(tmp_path) -> None:
    assert run(["parse", str(tmp_path / "missing.txt")]) == 1


def test_bad_constraint(cookies_file) -> None:
    assert run(["scale", str(cookies_file), "--constrain", "first", "2"]) == 2
