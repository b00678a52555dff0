"""Tests for the configuration loader"""

from config.loader import ConfigLoader


class TestConfigLoader:

    def test_default_when_unset(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NOCAPTCHA_TEST_VALUE", raising=False)
        loader = ConfigLoader(str(tmp_path / "missing.env"))
        assert loader.get("NOCAPTCHA_TEST_VALUE", "fallback") == "fallback"

    def test_coerces_by_default_type(self, tmp_path, monkeypatch):
        loader = ConfigLoader(str(tmp_path / "missing.env"))

        monkeypatch.setenv("NOCAPTCHA_TEST_FLOAT", "12.5")
        monkeypatch.setenv("NOCAPTCHA_TEST_INT", "7")
        monkeypatch.setenv("NOCAPTCHA_TEST_BOOL", "yes")

        assert loader.get("NOCAPTCHA_TEST_FLOAT", 30.0) == 12.5
        assert loader.get("NOCAPTCHA_TEST_INT", 1) == 7
        assert loader.get("NOCAPTCHA_TEST_BOOL", False) is True

    def test_invalid_number_falls_back_to_default(self, tmp_path, monkeypatch):
        loader = ConfigLoader(str(tmp_path / "missing.env"))
        monkeypatch.setenv("NOCAPTCHA_TEST_FLOAT", "soon")
        assert loader.get("NOCAPTCHA_TEST_FLOAT", 30.0) == 30.0

    def test_reads_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NOCAPTCHA_TEST_URL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("NOCAPTCHA_TEST_URL=https://verify.example.com\n")

        loader = ConfigLoader(str(env_file))

        assert loader.get("NOCAPTCHA_TEST_URL", "http://localhost:8080") == "https://verify.example.com"
        monkeypatch.delenv("NOCAPTCHA_TEST_URL", raising=False)

    def test_expands_home_in_paths(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NOCAPTCHA_TEST_PATH", raising=False)
        loader = ConfigLoader(str(tmp_path / "missing.env"))
        value = loader.get("NOCAPTCHA_TEST_PATH", "~/.nocaptcha/session.json")
        assert not value.startswith("~")
        assert value.endswith(".nocaptcha/session.json")
