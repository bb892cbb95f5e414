"""
Build Configuration Store.

The active mode is derived from a set of named boolean build flags. Flags come
from the ``[tool.bisuffix]`` table of the nearest ``pyproject.toml`` and can
be overridden from the command line::

    [tool.bisuffix]
    features = ["async"]      # or: features = { async = true, blocking = false }
    suffix = "_async"
    marker = "suffix"
    verify_roundtrip = false
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from bisuffix.core.mode import resolve_mode
from bisuffix.core.nodes import validate_suffix
from bisuffix.enums import Mode

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "bisuffix"


def _normalize_features(v: Any) -> Dict[str, bool]:
  """
  Accepts either a list of enabled flag names or a name -> bool table.

  Args:
      v (Any): Raw value from TOML, the CLI or the constructor.

  Returns:
      Dict[str, bool]: Lowercased flag names mapped to their state.
  """
  if v is None:
    return {}
  if isinstance(v, (list, tuple, set)):
    return {str(name).strip().lower(): True for name in v}
  if isinstance(v, dict):
    return {str(k).strip().lower(): bool(val) for k, val in v.items()}
  raise ValueError(f"features must be a list of names or a table of booleans, got {type(v).__name__}")


class BuildConfig(BaseModel):
  """
  Snapshot of the ambient build configuration for one expansion.
  """

  features: Dict[str, bool] = Field(default_factory=dict, description="Named build flags, e.g. {'async': True}.")
  suffix: Optional[str] = Field(None, description="Default suffix when an invocation does not carry one.")
  marker: str = Field("suffix", description="Name of the marker function expanded in modules.")
  verify_roundtrip: bool = Field(False, description="Re-parse emitted code and compare trees.")

  @field_validator("features", mode="before")
  @classmethod
  def normalize_features(cls, v: Any) -> Dict[str, bool]:
    return _normalize_features(v)

  @field_validator("suffix")
  @classmethod
  def check_suffix(cls, v: Optional[str]) -> Optional[str]:
    if v is None:
      return v
    return validate_suffix(v)

  @field_validator("marker")
  @classmethod
  def check_marker(cls, v: str) -> str:
    if not v.isidentifier():
      raise ValueError(f"marker must be an identifier, got {v!r}")
    return v

  @property
  def mode(self) -> Mode:
    """
    Resolves the active mode from `features`.

    Returns:
        Mode: The selected mode.

    Raises:
        ConfigError: If the flags select no mode or both modes.
    """
    return resolve_mode(self.features)

  @classmethod
  def load(
    cls,
    features: Optional[Dict[str, bool]] = None,
    suffix: Optional[str] = None,
    marker: Optional[str] = None,
    verify_roundtrip: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "BuildConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    CLI feature flags are merged over the TOML flags key by key, so
    ``--features blocking=false`` can switch off a flag set in the file.

    Args:
        features (Optional[Dict]): Flag overrides.
        suffix (Optional[str]): Override for the default suffix.
        marker (Optional[str]): Override for the marker function name.
        verify_roundtrip (Optional[bool]): Override for round-trip checking.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        BuildConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    final_features = _normalize_features(toml_config.get("features"))
    final_features.update(_normalize_features(features))

    if verify_roundtrip is not None:
      final_verify = verify_roundtrip
    else:
      final_verify = toml_config.get("verify_roundtrip", False)

    return cls(
      features=final_features,
      suffix=suffix if suffix is not None else toml_config.get("suffix"),
      marker=marker if marker is not None else toml_config.get("marker", "suffix"),
      verify_roundtrip=final_verify,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for 'pyproject.toml'.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The ``[tool.bisuffix]`` table and the
      directory it was found in. The first pyproject.toml found wins, even
      if it has no such table.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get(TOOL_SECTION, {}), parent

  return {}, None


def parse_feature_flags(items: Optional[List[str]]) -> Dict[str, bool]:
  """
  Parses CLI flag strings into a flag mapping.

  ``"async"`` enables a flag, ``"blocking=false"`` sets it explicitly.
  Accepted values are true/false, yes/no, on/off and 1/0.

  Args:
      items (Optional[List[str]]): Raw CLI values.

  Returns:
      Dict[str, bool]: Flag name to state.

  Raises:
      ValueError: If a value is not a recognizable boolean.
  """
  if not items:
    return {}

  result: Dict[str, bool] = {}
  for item in items:
    if "=" not in item:
      result[item.strip().lower()] = True
      continue
    key, raw = item.split("=", 1)
    result[key.strip().lower()] = _parse_bool(raw)
  return result


def _parse_bool(raw: str) -> bool:
  val = raw.strip().lower()
  if val in ("true", "yes", "on", "1"):
    return True
  if val in ("false", "no", "off", "0"):
    return False
  raise ValueError(f"Not a boolean flag value: {raw!r}")


def config_summary(config: BuildConfig) -> Dict[str, Union[str, bool, None]]:
  """
  Flattens a config for display. The mode is not resolved here.
  """
  enabled = sorted(k for k, v in config.features.items() if v)
  return {
    "features": ", ".join(enabled) or "(none)",
    "suffix": config.suffix,
    "marker": config.marker,
    "verify_roundtrip": config.verify_roundtrip,
  }
