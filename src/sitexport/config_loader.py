"""Load ExportConfig from sitexport.yaml / sitexport.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from sitexport._errors import ConfigError
from sitexport.config import ExportConfig, ExportOptions, ProjectOptions

_OPTION_KEYS = frozenset(f.name for f in fields(ExportOptions))
_PROJECT_KEYS = frozenset(f.name for f in fields(ProjectOptions))
_TOP_KEYS = frozenset(
    {"output", "site_name", "asset_base_url", "fetch_timeout_ms"}
)


def load_config(root: Path, **overrides: object) -> ExportConfig:
    """Load ExportConfig from root, optionally merging sitexport.yaml.

    Looks for sitexport.yaml, sitexport.yml, or sitexport.toml in root. If
    found, loads and merges with overrides. Overrides take precedence;
    overrides whose value is ``None`` are ignored so unset CLI flags do not
    mask file values.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.

    """
    file_config = _read_config_file(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}

    unknown = set(merged) - _TOP_KEYS - _OPTION_KEYS - _PROJECT_KEYS
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    options = ExportOptions(**{k: _as_bool(k, merged[k]) for k in _OPTION_KEYS if k in merged})
    project = ProjectOptions(**{k: str(merged[k]) for k in _PROJECT_KEYS if k in merged})
    top = {k: merged[k] for k in _TOP_KEYS if k in merged}
    if "output" in top and not isinstance(top["output"], Path):
        top["output"] = Path(str(top["output"]))
    if "fetch_timeout_ms" in top:
        try:
            top["fetch_timeout_ms"] = int(top["fetch_timeout_ms"])  # type: ignore[call-overload]
        except (TypeError, ValueError) as exc:
            msg = f"fetch_timeout_ms must be an integer, got {top['fetch_timeout_ms']!r}"
            raise ConfigError(msg) from exc

    return ExportConfig(root=root, options=options, project=project, **top)  # type: ignore[arg-type]


def _read_config_file(root: Path) -> dict[str, object]:
    """Read config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("sitexport.yaml", "sitexport.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "sitexport.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Cannot parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping at the top level"
        raise ConfigError(msg)
    return _flatten_sections(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Cannot parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_sections(data)


def _flatten_sections(data: dict[str, object]) -> dict[str, object]:
    """Lift ``sitexport``, ``options`` and ``project`` sections into flat keys."""
    result: dict[str, object] = {}
    section = data.get("sitexport")
    source = section if isinstance(section, dict) else data
    for k, v in source.items():
        if k in ("options", "project") and isinstance(v, dict):
            result.update(v)
        elif k != "sitexport":
            result[k] = v
    return result


def _as_bool(key: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "yes", "1", "false", "no", "0"):
        return value.lower() in ("true", "yes", "1")
    msg = f"{key} must be a boolean, got {value!r}"
    raise ConfigError(msg)
