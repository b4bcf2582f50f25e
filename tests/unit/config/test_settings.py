"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from elastorm.config.settings import Settings


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)  # type: ignore[call-arg]


class TestDefaults:
    def test_defaults(self) -> None:
        settings = _settings()
        assert settings.adapter.concurrency_limit == 100
        assert settings.connections == {}
        assert settings.observability.log_format == "json"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ELASTORM_ADAPTER__CONCURRENCY_LIMIT", "7")
        assert _settings().adapter.concurrency_limit == 7


class TestConnections:
    def test_identity_filled_from_key(self) -> None:
        settings = _settings(connections={"main": {"hosts": "http://es:9200"}})
        (config,) = settings.connection_configs()
        assert config.identity == "main"
        assert config.hosts == ["http://es:9200"]

    def test_hosts_json_string(self) -> None:
        settings = _settings(connections={"main": {"hosts": '["http://a:9200", "http://b:9200"]'}})
        assert settings.connections["main"].hosts == ["http://a:9200", "http://b:9200"]

    def test_collections_bind_to_single_connection(self) -> None:
        settings = _settings(
            connections={"main": {}},
            collections={"user": {"identity": "user"}},
        )
        assert list(settings.collections_for("main")) == ["user"]

    def test_collections_bind_by_name(self) -> None:
        settings = _settings(
            connections={"a": {}, "b": {}},
            collections={
                "user": {"identity": "user", "connection": "a"},
                "post": {"identity": "post", "connection": "b"},
                "orphan": {"identity": "orphan"},
            },
        )
        assert list(settings.collections_for("a")) == ["user"]
        assert list(settings.collections_for("b")) == ["post"]


class TestYaml:
    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "elastorm.yaml"
        path.write_text(
            "adapter:\n"
            "  concurrency_limit: 10\n"
            "connections:\n"
            "  main:\n"
            "    hosts: ['http://localhost:9200']\n"
            "    index: app\n"
            "collections:\n"
            "  user:\n"
            "    primaryKey: id\n"
            "    attributes:\n"
            "      profile:\n"
            "        type: json\n"
            "        restrictAttributes: [bio]\n"
        )
        settings = Settings.from_yaml(path)
        assert settings.adapter.concurrency_limit == 10
        assert settings.connections["main"].index == "app"
        user = settings.collections["user"]
        assert user.identity == "user"
        assert user.primary_key == "id"
        assert user.attributes["profile"].restrict_attributes == ["bio"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "nope.yaml")
