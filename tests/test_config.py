from pathlib import Path

from impostor.config.settings import EngineConfig, load_engine_config


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.delenv("IMPOSTOR_SEED", raising=False)

    assert load_engine_config(tmp_path / "absent.json") == EngineConfig()


def test_file_values_are_applied_and_bad_ones_skipped(tmp_path, monkeypatch):
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.delenv("IMPOSTOR_SEED", raising=False)
    path = tmp_path / "config.json"
    path.write_text(
        '{"default_players": 8, "default_impostors": "two", "first_player_weight": 0.5,'
        ' "store_path": "data/store.json", "key_prefix": "party_", "seed": 11, "max_players": true}'
    )

    config = load_engine_config(path)

    assert config.default_players == 8
    assert config.default_impostors == 1
    assert config.first_player_weight == 0.5
    assert config.store_path == Path("data/store.json")
    assert config.key_prefix == "party_"
    assert config.seed == 11
    assert config.max_players == 20


def test_malformed_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.delenv("IMPOSTOR_SEED", raising=False)
    path = tmp_path / "config.json"
    path.write_text("{oops")

    assert load_engine_config(path) == EngineConfig()


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text('{"store_path": "from-file.json", "seed": 1}')
    monkeypatch.setenv("IMPOSTOR_STORE", str(tmp_path / "from-env.json"))
    monkeypatch.setenv("IMPOSTOR_SEED", "42")

    config = load_engine_config(path)

    assert config.store_path == tmp_path / "from-env.json"
    assert config.seed == 42


def test_bad_seed_in_environment_is_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.setenv("IMPOSTOR_SEED", "abc")

    assert load_engine_config(tmp_path / "absent.json").seed is None


def test_unreadable_path_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.delenv("IMPOSTOR_SEED", raising=False)
    path = tmp_path / "config.json"
    path.mkdir()

    assert load_engine_config(path) == EngineConfig()


def test_out_of_range_counts_are_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.delenv("IMPOSTOR_SEED", raising=False)
    path = tmp_path / "config.json"
    path.write_text('{"min_players": 1, "max_impostors": 0, "first_player_weight": -2, "default_players": 4}')

    config = load_engine_config(path)

    assert config.min_players == 3
    assert config.max_impostors == 10
    assert config.first_player_weight == 0.75
    assert config.default_players == 4


def test_inverted_player_range_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("IMPOSTOR_STORE", raising=False)
    monkeypatch.delenv("IMPOSTOR_SEED", raising=False)
    path = tmp_path / "config.json"
    path.write_text('{"min_players": 25}')

    config = load_engine_config(path)

    assert (config.min_players, config.max_players) == (3, 20)
