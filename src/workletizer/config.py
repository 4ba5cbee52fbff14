"""
Runtime Configuration Store.

Configuration is an explicit value constructed once and passed to the engine,
never a process-wide mutable registry. Sources, lowest priority first:

1.  Built-in defaults (`workletizer.semantics.ambient`).
2.  `[tool.workletizer]` in the nearest `pyproject.toml`.
3.  Explicit arguments (CLI flags, plugin options).
"""

import sys
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from workletizer.semantics.ambient import DEFAULT_AMBIENT_NAMES

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the worklet transformer.
  """

  globals: List[str] = Field(
    default_factory=list, description="Extra ambient names, appended to the built-in set. Never captured."
  )
  root: Optional[Path] = Field(None, description="Base directory for relative file names in location strings.")

  model_config = {"frozen": True}

  @field_validator("globals")
  @classmethod
  def validate_globals(cls, v: List[str]) -> List[str]:
    """
    Strips whitespace and rejects empty names.

    Args:
        v (List[str]): Raw names.

    Returns:
        List[str]: Cleaned names, order preserved.

    Raises:
        ValueError: If a name is empty.
    """
    cleaned = []
    for name in v:
      name = name.strip()
      if not name:
        raise ValueError("Ambient names must be non-empty strings")
      cleaned.append(name)
    return cleaned

  @property
  def ambient_names(self) -> FrozenSet[str]:
    """
    The names never captured by a worklet.

    Returns:
        FrozenSet[str]: Default ambient set united with the configured globals.
    """
    return DEFAULT_AMBIENT_NAMES | frozenset(self.globals)

  @property
  def effective_root(self) -> Path:
    return self.root if self.root is not None else Path.cwd()

  def relative_filename(self, filename: str) -> str:
    """
    Renders a file name relative to the configured root.

    Names outside the root (or not resolvable as paths) are returned unchanged.

    Args:
        filename (str): Absolute or relative path of the source file.

    Returns:
        str: POSIX-style path used in location strings.
    """
    path = Path(filename)
    if not path.is_absolute():
      return path.as_posix()
    try:
      return path.relative_to(self.effective_root.resolve()).as_posix()
    except ValueError:
      return path.as_posix()

  @classmethod
  def from_plugin_options(cls, options: Optional[Mapping[str, Any]]) -> "RuntimeConfig":
    """
    Builds a configuration from a plugin-style options mapping.

    Args:
        options: e.g. `{"globals": ["myHelper"]}`. Unknown keys are ignored.

    Returns:
        RuntimeConfig: The validated configuration.

    Raises:
        ValueError: If `globals` is not a list of strings.
    """
    options = options or {}
    raw = options.get("globals", [])
    if not isinstance(raw, (list, tuple)) or not all(isinstance(g, str) for g in raw):
      raise ValueError(f"Plugin option 'globals' must be a list of strings, got {raw!r}")
    try:
      return cls(globals=list(raw), root=options.get("root"))
    except ValidationError as e:
      raise ValueError(f"Plugin configuration validation failed: {e}")

  @classmethod
  def load(
    cls,
    globals: Optional[List[str]] = None,
    root: Optional[Path] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        globals (Optional[List[str]]): Extra ambient names, appended to the TOML ones.
        root (Optional[Path]): Override for the location root.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    final_globals = list(toml_config.get("globals", [])) + list(globals or [])

    final_root = root
    if final_root is None and "root" in toml_config and toml_dir is not None:
      final_root = (toml_dir / Path(toml_config["root"])).resolve()
    elif final_root is None and toml_dir is not None:
      final_root = toml_dir

    return cls(globals=final_globals, root=final_root)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches parents for 'pyproject.toml' and extracts the `[tool.workletizer]` table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("workletizer", {}), parent

  return {}, None
