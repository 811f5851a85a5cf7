import orjson
import pytest
from typer.testing import CliRunner

from impostor.services import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def default_logging(monkeypatch):
    # Leave structlog unconfigured so no logger caches CliRunner's stdout
    monkeypatch.setattr(cli, "_configured_logging", True)
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.delenv("IMPOSTOR_SEED", raising=False)


@pytest.fixture
def invoke(tmp_path):
    store_path = tmp_path / "store.json"
    config_path = tmp_path / "config.json"

    def run(*args, input=None):
        return runner.invoke(
            cli.app,
            ["--store", str(store_path), "--config", str(config_path), *args],
            input=input,
        )

    run.store_path = store_path
    return run


def test_categories_list_shows_presets(invoke):
    result = invoke("categories", "list")

    assert result.exit_code == 0, result.output
    assert "Frutas" in result.output
    assert "lugares" in result.output


def test_categories_add_and_remove(invoke, tmp_path):
    words_file = tmp_path / "animales.txt"
    words_file.write_text("perro\ngato\n\nloro\n", encoding="utf-8")

    added = invoke("categories", "add", "Animales", "--words-file", str(words_file))
    assert added.exit_code == 0, added.output
    assert "Created Animales (3 words)" in added.output

    stored = orjson.loads(invoke.store_path.read_bytes())["impostor_categories_v3"]
    category_id = stored[-1]["id"]
    assert stored[-1]["words"] == ["perro", "gato", "loro"]

    removed = invoke("categories", "remove", category_id, "--yes")
    assert removed.exit_code == 0, removed.output
    assert "Deleted Animales" in removed.output


def test_categories_add_rejects_empty_file(invoke, tmp_path):
    words_file = tmp_path / "empty.txt"
    words_file.write_text("\n\n", encoding="utf-8")

    result = invoke("categories", "add", "Nada", "--words-file", str(words_file))

    assert result.exit_code == 1
    assert "at least one word" in result.output


def test_remove_unknown_category(invoke):
    result = invoke("categories", "remove", "nope", "--yes")
    assert result.exit_code == 1


def test_history_show_and_reset(invoke):
    shown = invoke("history", "frutas")
    assert shown.exit_code == 0, shown.output
    assert "0 of 50 words used" in shown.output

    reset = invoke("history", "frutas", "--reset")
    assert reset.exit_code == 0, reset.output
    assert orjson.loads(invoke.store_path.read_bytes())["impostor_used_category_frutas"] == []


def test_play_custom_round_then_reset(invoke):
    script = "\n".join([
        "2",            # custom words
        "a",            # add words
        "sol",
        "luna",
        "",             # end of word list
        "g",            # continue
        "p", "4",       # four players
        "s",            # start
        "r",            # player 1 reveals
        "n", "n", "n", "n",
        "m",            # back to menu, resetting everything
        "q",
    ]) + "\n"

    result = invoke("play", input=script)

    assert result.exit_code == 0, result.output
    assert "Between rounds" in result.output
    data = orjson.loads(invoke.store_path.read_bytes())
    assert data["impostor_custom_words_list_v3"] == []
    used = [value for key, value in data.items() if key.startswith("impostor_used_custom_")]
    assert len(used) == 1 and len(used[0]) == 1
    assert used[0][0] in {"sol", "luna"}
