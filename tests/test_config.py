import json
from pathlib import Path

from wildebeest.config import Settings, _load_config_file


def test_settings_reads_state_config_json(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps(
            {
                "domain": "social.example",
                "port": 9000,
            }
        )
    )

    settings = _load_config_file(Settings(state_dir=str(tmp_path)))

    assert settings.domain == "social.example"
    assert settings.port == 9000


def test_db_path_lives_in_state_dir(tmp_path: Path) -> None:
    settings = Settings(state_dir=str(tmp_path))

    assert settings.db_path == tmp_path / "wildebeest.db"


def test_state_dir_env_alias(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("WILDEBEEST_STATE", str(tmp_path))

    assert Settings().state_dir == str(tmp_path)


def test_config_json_overrides_env_vars(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "config.json").write_text(json.dumps({"admin_token": "from-file"}))
    monkeypatch.setenv("ADMIN_TOKEN", "from-env")

    settings = _load_config_file(Settings(state_dir=str(tmp_path)))

    assert settings.admin_token == "from-file"


def test_corrupt_config_json_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("not json")

    settings = _load_config_file(Settings(state_dir=str(tmp_path)))

    assert settings.port == 8787


def test_invalid_config_json_values_are_ignored(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps({"domain": "social.example", "port": -1})
    )

    settings = _load_config_file(Settings(state_dir=str(tmp_path)))

    assert settings.port == 8787


def test_unknown_config_json_keys_are_ignored(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps({"domain": "social.example", "custom_emojis_max_age": 0})
    )

    settings = _load_config_file(Settings(state_dir=str(tmp_path)))

    assert settings.domain == "social.example"
    assert not hasattr(settings, "custom_emojis_max_age")
