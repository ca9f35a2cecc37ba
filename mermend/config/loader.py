"""YAML config loading with env var expansion."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import MermendConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MERMEND_CONFIG"

# ${VAR} or ${VAR:-fallback}
_ENV_REF_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def load_config(cli_path: str | None = None) -> MermendConfig:
    """Load config with resolution order: CLI > $MERMEND_CONFIG > project-local > user-global > defaults.

    An explicitly named file (CLI or env var) must exist. Discovered files
    that are empty are skipped in favour of the next candidate.
    """
    explicit = cli_path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        return _parse(path, _read_mapping(path) or {})

    for path in (Path("./mermend.yaml"), Path.home() / ".mermend" / "config.yaml"):
        if not path.is_file():
            continue
        raw = _read_mapping(path)
        if raw is not None:
            return _parse(path, raw)

    logger.debug("No config file found, using defaults")
    return MermendConfig()


def _read_mapping(path: Path) -> dict | None:
    """Parse a YAML file into a dict; None for an empty document."""
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping")
    return raw


def _parse(path: Path, raw: dict) -> MermendConfig:
    try:
        config = MermendConfig(**_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e
    logger.debug("Loaded config from %s", path)
    return config


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} and ${VAR:-fallback} references in strings."""
    if isinstance(obj, str):
        return _ENV_REF_RE.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `mermend config init`
DEFAULT_CONFIG_TEMPLATE = """\
# mermend.yaml
# Strings may reference environment variables as ${VAR} or ${VAR:-fallback}.

# Render engine
engine:
  provider: "mmdc"             # mmdc | kroki
  mmdc_path: "mmdc"
  kroki_url: "${MERMEND_KROKI_URL:-https://kroki.io}"
  timeout: 30
  theme: "default"             # default | neutral | dark | forest | base
  security_level: "loose"
  font_family: "sans-serif"
  deterministic_ids: true
  flowchart:
    html_labels: true
    curve: "linear"
    use_max_width: false

# Fallback behaviour
render:
  prime_engine: true           # render a known-good canary before each request
  topic_keywords: ["Water"]    # subject label for the simplified fallback
  scratch: "memory"            # memory | filesystem
  # scratch_dir: "/tmp/mermend"

# Export
export:
  output_dir: "."

# Watch mode
watch:
  debounce_seconds: 0.5

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
