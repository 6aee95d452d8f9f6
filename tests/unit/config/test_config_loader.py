"""Unit tests for the layered TOML loader."""

import tomllib
from pathlib import Path

import pytest

from export_worker.config.loader import (
    config_layers,
    find_config_dir,
    load_config,
    merge_tables,
)


class TestMergeTables:
    """Tests for merge_tables."""

    def test_nested_tables_merge(self) -> None:
        base = {"storage": {"postgres": {"backend": "postgres", "max_pool_size": 10}}, "x": 1}
        override = {"storage": {"postgres": {"backend": "inmemory"}}}

        assert merge_tables(base, override) == {
            "storage": {"postgres": {"backend": "inmemory", "max_pool_size": 10}},
            "x": 1,
        }

    def test_scalar_replaces_table(self) -> None:
        assert merge_tables({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_lists_are_replaced_not_extended(self) -> None:
        base = {"jobs": {"batch_export": {"queue_keys": ["a", "b"]}}}
        override = {"jobs": {"batch_export": {"queue_keys": ["c"]}}}

        assert merge_tables(base, override)["jobs"]["batch_export"]["queue_keys"] == ["c"]

    def test_inputs_unmodified(self) -> None:
        base = {"a": {"x": 1}}
        override = {"a": {"y": 2}}

        merge_tables(base, override)

        assert base == {"a": {"x": 1}}
        assert override == {"a": {"y": 2}}


class TestFindConfigDir:
    """Tests for find_config_dir."""

    def test_uses_env_var_when_set(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_dir = tmp_path / "custom_config"
        config_dir.mkdir()
        monkeypatch.setenv("EXPORT_WORKER_CONFIG_DIR", str(config_dir))

        assert find_config_dir() == config_dir

    def test_raises_for_missing_env_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EXPORT_WORKER_CONFIG_DIR", str(tmp_path / "missing"))

        with pytest.raises(FileNotFoundError):
            find_config_dir()

    def test_finds_config_in_parent_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Walks up from the working directory to find config/."""
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        monkeypatch.delenv("EXPORT_WORKER_CONFIG_DIR", raising=False)
        monkeypatch.chdir(nested)

        assert find_config_dir() == config_dir


class TestConfigLayers:
    """Tests for config_layers."""

    def test_default_then_environment(self, test_config_dir: Path) -> None:
        (test_config_dir / "production.toml").write_text("")
        (test_config_dir / "default.toml").write_text("")

        assert config_layers(test_config_dir, "production") == [
            test_config_dir / "default.toml",
            test_config_dir / "production.toml",
        ]

    def test_missing_files_skipped(self, test_config_dir: Path) -> None:
        (test_config_dir / "staging.toml").write_text("")

        assert config_layers(test_config_dir, "staging") == [test_config_dir / "staging.toml"]


class TestLoadConfig:
    """Tests for load_config."""

    def test_environment_overrides_default(self, test_config_dir: Path) -> None:
        (test_config_dir / "default.toml").write_text(
            "[storage.postgres]\nbackend = 'postgres'\nmax_pool_size = 10\n"
        )
        (test_config_dir / "development.toml").write_text(
            "[storage.postgres]\nbackend = 'inmemory'\n"
        )

        result = load_config(test_config_dir, "development")

        assert result == {"storage": {"postgres": {"backend": "inmemory", "max_pool_size": 10}}}

    def test_reads_environment_variables(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (test_config_dir / "staging.toml").write_text(
            "[jobs.batch_export]\nworkflow_name = 'exports'"
        )
        monkeypatch.setenv("EXPORT_WORKER_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("EXPORT_WORKER_ENV", "staging")

        assert load_config() == {"jobs": {"batch_export": {"workflow_name": "exports"}}}

    def test_environment_defaults_to_development(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (test_config_dir / "development.toml").write_text(
            "[observability.logging]\nformat = 'console'"
        )
        monkeypatch.delenv("EXPORT_WORKER_ENV", raising=False)

        assert load_config(test_config_dir) == {"observability": {"logging": {"format": "console"}}}

    def test_empty_config_dir_yields_empty_config(self, test_config_dir: Path) -> None:
        """No TOML files at all leaves everything to the model defaults."""
        assert load_config(test_config_dir, "production") == {}

    def test_invalid_toml_raises(self, test_config_dir: Path) -> None:
        (test_config_dir / "default.toml").write_text("invalid = [unclosed")

        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(test_config_dir, "production")

    def test_shipped_config_disables_queue_length(self) -> None:
        """The repository's default.toml keeps the Redis queue gauge off."""
        config_dir = Path(__file__).resolve().parents[3] / "config"

        config = load_config(config_dir, "production")

        assert config["storage"]["redis"]["enabled"] is False
