"""Tests for mermend.config — models and YAML loader."""

import pytest
from pydantic import ValidationError

from mermend.config.loader import DEFAULT_CONFIG_TEMPLATE, _expand_env_vars, load_config
from mermend.config.models import (
    EngineConfig,
    FlowchartConfig,
    MermendConfig,
    RenderSettings,
    WatchConfig,
)


# ── MermendConfig defaults ──────────────────────────────────────────


class TestMermendConfigDefaults:
    def test_default_log_level(self, sample_config):
        assert sample_config.log_level == "info"

    def test_default_log_format(self, sample_config):
        assert sample_config.log_format == "text"

    def test_default_engine_provider(self, sample_config):
        assert sample_config.engine.provider == "mmdc"

    def test_default_render_settings(self, sample_config):
        assert sample_config.render.prime_engine is True
        assert sample_config.render.topic_keywords == ["Water"]
        assert sample_config.render.scratch == "memory"

    def test_default_export_dir(self, sample_config):
        assert sample_config.export.output_dir == "."


# ── Individual config model validations ─────────────────────────────


class TestEngineConfig:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.theme == "default"
        assert cfg.security_level == "loose"
        assert cfg.deterministic_ids is True
        assert cfg.timeout == 30.0

    def test_invalid_provider_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(provider="graphviz")

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(timeout=0)

    def test_mermaid_config_shape(self):
        cfg = EngineConfig(flowchart=FlowchartConfig(curve="basis", html_labels=False))
        mc = cfg.mermaid_config()
        assert mc["securityLevel"] == "loose"
        assert mc["fontFamily"] == "sans-serif"
        assert mc["deterministicIds"] is True
        assert mc["flowchart"] == {"htmlLabels": False, "curve": "basis", "useMaxWidth": False}

    def test_independent_instances(self):
        a = EngineConfig(theme="dark")
        b = EngineConfig()
        assert a.mermaid_config()["theme"] == "dark"
        assert b.mermaid_config()["theme"] == "default"


class TestRenderSettings:
    def test_invalid_scratch_rejected(self):
        with pytest.raises(ValidationError):
            RenderSettings(scratch="nfs")

    def test_custom_keywords(self):
        assert RenderSettings(topic_keywords=["Cell"]).topic_keywords == ["Cell"]


class TestWatchConfig:
    def test_negative_debounce_rejected(self):
        with pytest.raises(ValidationError):
            WatchConfig(debounce_seconds=-1)


# ── _expand_env_vars ────────────────────────────────────────────────


class TestExpandEnvVars:
    def test_expands_string_variable(self, monkeypatch):
        monkeypatch.setenv("MERMEND_THEME", "dark")
        assert _expand_env_vars("${MERMEND_THEME}") == "dark"

    def test_missing_var_becomes_empty(self, monkeypatch):
        monkeypatch.delenv("NOPE_NOT_SET", raising=False)
        assert _expand_env_vars("x${NOPE_NOT_SET}y") == "xy"

    def test_expands_nested_structures(self, monkeypatch):
        monkeypatch.setenv("KROKI", "https://kroki.local")
        result = _expand_env_vars({"engine": {"urls": ["${KROKI}"]}})
        assert result == {"engine": {"urls": ["https://kroki.local"]}}

    def test_fallback_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("MERMEND_KROKI", raising=False)
        assert _expand_env_vars("${MERMEND_KROKI:-https://kroki.io}") == "https://kroki.io"

    def test_set_var_wins_over_fallback(self, monkeypatch):
        monkeypatch.setenv("MERMEND_KROKI", "http://kroki.internal")
        assert _expand_env_vars("${MERMEND_KROKI:-https://kroki.io}") == "http://kroki.internal"

    def test_non_string_passthrough(self):
        assert _expand_env_vars(42) == 42
        assert _expand_env_vars(None) is None


# ── load_config ─────────────────────────────────────────────────────


class TestLoadConfig:
    def test_returns_defaults_when_no_file_exists(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        config = load_config()
        assert config.engine.provider == "mmdc"
        assert config.log_level == "info"

    def test_loads_valid_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text(
            "engine:\n  provider: kroki\n  theme: neutral\nlog_level: debug\n"
        )
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        config = load_config()
        assert config.engine.provider == "kroki"
        assert config.engine.theme == "neutral"
        assert config.log_level == "debug"

    def test_raises_on_invalid_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("  bad:\nyaml: [unterminated")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_raises_on_invalid_config_values(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("engine:\n  provider: badengine\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_raises_on_non_mapping(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("- just\n- a list\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config()

    def test_cli_path_takes_priority(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("engine:\n  provider: kroki\n")
        cli_file = tmp_path / "custom.yaml"
        cli_file.write_text("engine:\n  provider: mmdc\n  mmdc_path: /opt/mmdc\n")

        config = load_config(cli_path=str(cli_file))
        assert config.engine.provider == "mmdc"
        assert config.engine.mmdc_path == "/opt/mmdc"

    def test_user_global_config_used_as_fallback(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        fake_home = tmp_path / "fakehome"
        (fake_home / ".mermend").mkdir(parents=True)
        (fake_home / ".mermend" / "config.yaml").write_text("log_level: debug\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)

        assert load_config().log_level == "debug"

    def test_env_vars_expanded_in_loaded_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("KROKI_URL", "http://localhost:8000")
        (tmp_path / "mermend.yaml").write_text(
            "engine:\n  provider: kroki\n  kroki_url: ${KROKI_URL}\n"
        )
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        assert load_config().engine.kroki_url == "http://localhost:8000"

    def test_empty_yaml_file_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        assert load_config() == MermendConfig()

    def test_default_template_loads(self, tmp_path, monkeypatch):
        template = tmp_path / "template.yaml"
        template.write_text(DEFAULT_CONFIG_TEMPLATE)
        assert load_config(cli_path=str(template)) == MermendConfig()

    def test_env_var_path_used_before_project_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("log_level: error\n")
        env_file = tmp_path / "from-env.yaml"
        env_file.write_text("log_level: debug\n")
        monkeypatch.setenv("MERMEND_CONFIG", str(env_file))
        assert load_config().log_level == "debug"

    def test_cli_path_beats_env_var(self, tmp_path, monkeypatch):
        env_file = tmp_path / "from-env.yaml"
        env_file.write_text("log_level: debug\n")
        cli_file = tmp_path / "cli.yaml"
        cli_file.write_text("log_level: warn\n")
        monkeypatch.setenv("MERMEND_CONFIG", str(env_file))
        assert load_config(cli_path=str(cli_file)).log_level == "warn"

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Config file not found"):
            load_config(cli_path=str(tmp_path / "nope.yaml"))

    def test_empty_explicit_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("log_level: error\n")
        cli_file = tmp_path / "empty.yaml"
        cli_file.write_text("")
        assert load_config(cli_path=str(cli_file)) == MermendConfig()

    def test_empty_project_file_falls_through_to_user_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mermend.yaml").write_text("")
        fake_home = tmp_path / "fakehome"
        (fake_home / ".mermend").mkdir(parents=True)
        (fake_home / ".mermend" / "config.yaml").write_text("log_format: json\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)
        assert load_config().log_format == "json"
