"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from dictionary.config import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch) -> None:
        for name in ("PORT", "KAFKA_ENABLED", "KAFKA_QUEUES", "QDRANT_URL", "ALLOWED_ORIGIN"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.port == 7878
        assert settings.kafka_enabled is True
        assert settings.kafka_topics == ["menu", "process", "browser", "window", "form"]
        assert settings.qdrant_url == "http://localhost:6333"
        assert settings.allowed_origin == "*"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("Y", True), ("y", True), ("yes", True), ("true", True), ("N", False), ("no", False)],
    )
    def test_kafka_enabled_flag(self, monkeypatch, value, expected) -> None:
        monkeypatch.setenv("KAFKA_ENABLED", value)

        assert Settings(_env_file=None).kafka_enabled is expected

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("KAFKA_HOST", "kafka-1:9092, kafka-2:9092")
        monkeypatch.setenv("KAFKA_QUEUES", "menu,window")

        settings = Settings(_env_file=None)

        assert settings.port == 9000
        assert settings.kafka_bootstrap_servers == ["kafka-1:9092", "kafka-2:9092"]
        assert settings.kafka_topics == ["menu", "window"]

    def test_frozen(self) -> None:
        settings = Settings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.port = 1  # type: ignore[misc]

    def test_log_defaults_lists_unset_variables(self, monkeypatch) -> None:
        monkeypatch.delenv("QDRANT_TIMEOUT", raising=False)

        missing = Settings(_env_file=None, port=9000).log_defaults()

        assert "QDRANT_TIMEOUT" in missing
        assert "PORT" not in missing
