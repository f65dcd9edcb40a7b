"""Settings tests — .env loading and CORS origin parsing."""

from __future__ import annotations

from pathlib import Path

from leavebot.config import Settings


class TestSettings:

    def test_env_file_values_loaded(self, tmp_path: Path, monkeypatch):
        """Policy knobs come from the .env file when the environment is silent."""
        monkeypatch.delenv("ADVANCE_NOTICE_DAYS", raising=False)
        monkeypatch.delenv("CALCULATE_RATE_LIMIT", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("ADVANCE_NOTICE_DAYS=7\nCALCULATE_RATE_LIMIT=5/minute\n")

        loaded = Settings(_env_file=env_file)
        assert loaded.ADVANCE_NOTICE_DAYS == 7
        assert loaded.CALCULATE_RATE_LIMIT == "5/minute"

    def test_defaults_without_env_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("ADVANCE_NOTICE_DAYS", raising=False)
        loaded = Settings(_env_file=tmp_path / "missing.env")
        assert loaded.ADVANCE_NOTICE_DAYS == 14

    def test_cors_origins_parsed(self):
        loaded = Settings(CORS_ORIGINS='["https://a.example", "https://b.example"]')
        assert loaded.cors_origins_list == ["https://a.example", "https://b.example"]

    def test_cors_origins_fallback_on_bad_json(self):
        assert Settings(CORS_ORIGINS="not-json").cors_origins_list == ["http://localhost:3000"]
