import pytest

from fuelbase.config import DEFAULTS, default_config, load_config


class TestLoadConfig:

    def test_partial_file_merged_over_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("athlete:\n  body_weight_lbs: 150\nplanning:\n  carb_loading_days: [3, 7]\n")
        config = load_config(path)

        assert config["athlete"]["body_weight_lbs"] == 150
        assert config["athlete"]["goal"] == "maintenance"
        assert config["planning"]["carb_loading_days"] == [3, 7]
        assert config["intervals"]["max_completion_fetches"] == 15

    def test_env_vars_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ICU_KEY", "s3cret")
        path = tmp_path / "config.yaml"
        path.write_text("intervals:\n  athlete_id: i42\n  api_key: $ICU_KEY\n")
        config = load_config(path)
        assert config["intervals"]["api_key"] == "s3cret"
        assert config["intervals"]["athlete_id"] == "i42"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == DEFAULTS

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_defaults_are_copies(self):
        config = default_config()
        config["athlete"]["goal"] = "performance"
        assert DEFAULTS["athlete"]["goal"] == "maintenance"
