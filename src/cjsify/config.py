"""
Runtime Configuration Store.

Describes the legacy corpus being converted: the namespace root identifier,
the special files (root module, shader chunk table), the file extensions of
both input categories, and output formatting. Values come from the nearest
``pyproject.toml`` (``[tool.cjsify]``) and are overridden by CLI flags.
"""

import posixpath
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cjsify.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

DEFAULT_NATIVE_TYPES = [
  "Array",
  "ArrayBuffer",
  "Uint32Array",
  "Uint16Array",
  "String",
  "Function",
  "RegExp",
  "Number",
  "PositionSensorVRDevice",
  "HMDVRDevice",
]


def normalize_unit_path(path: str) -> str:
  """
  Normalizes a corpus-relative path to the ``./dir/file.ext`` form.

  Example:
    >>> normalize_unit_path("math\\\\Vector3.js")
    './math/Vector3.js'
  """
  cleaned = posixpath.normpath(path.replace("\\", "/"))
  if cleaned.startswith("/") or cleaned.startswith("../"):
    raise ValueError(f"Path must be relative to the input root: '{path}'")
  return f"./{cleaned}" if cleaned != "." else "./"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the conversion engine.
  """

  model_config = ConfigDict(extra="forbid")

  namespace: str = Field("THREE", description="Identifier of the shared namespace root object.")
  root_module_path: str = Field("./Three.js", description="File that creates the namespace object.")
  root_module_alias: str = Field("Three", description="Local name importers bind the root module to.")
  root_extra_provides: List[str] = Field(
    default_factory=lambda: ["REVISION"],
    description="Names the root module defines inside its object literal.",
  )
  shader_chunk_path: str = Field(
    "./renderers/shaders/ShaderChunk.js", description="File holding the shader chunk lookup table."
  )
  code_extension: str = Field(".js", description="Extension of code files.")
  shader_extension: str = Field(".glsl", description="Extension of raw shader chunk files.")
  native_instanceof_types: List[str] = Field(
    default_factory=lambda: list(DEFAULT_NATIVE_TYPES),
    description="Built-in types whose instanceof checks become tag comparisons.",
  )
  index_path: str = Field("./index.js", description="Aggregate entry point written to the output root.")
  template_dir: Path = Field(Path("dist"), description="Directory holding passthrough manifest files.")
  passthrough_files: List[str] = Field(
    default_factory=lambda: ["package.json", "README.md"],
    description="Files copied verbatim from template_dir into the output root.",
  )
  indent: str = Field("\t", description="Indentation unit of generated code.")

  @field_validator("namespace", "root_module_alias")
  @classmethod
  def validate_identifier(cls, v: str) -> str:
    """
    Ensures the value is usable as a JavaScript identifier.

    Raises:
        ValueError: If the value contains characters outside ``[A-Za-z0-9_$]``.
    """
    v = v.strip()
    if not v or v[0].isdigit() or not all(c.isalnum() or c in "_$" for c in v):
      raise ValueError(f"Not a valid identifier: '{v}'")
    return v

  @field_validator("root_module_path", "shader_chunk_path", "index_path")
  @classmethod
  def validate_unit_path(cls, v: str) -> str:
    """Normalizes special file paths to the ``./dir/file.ext`` form."""
    return normalize_unit_path(v)

  @field_validator("code_extension", "shader_extension")
  @classmethod
  def validate_extension(cls, v: str) -> str:
    """Ensures extensions carry their leading dot."""
    v = v.strip()
    return v if v.startswith(".") else f".{v}"

  @field_validator("root_extra_provides", "native_instanceof_types", "passthrough_files", mode="before")
  @classmethod
  def split_list(cls, v: Any) -> Any:
    """Accepts comma separated strings (as given on the CLI) for list options."""
    if isinstance(v, str):
      return [item.strip() for item in v.split(",") if item.strip()]
    return v

  @classmethod
  def load(
    cls,
    search_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        search_path (Optional[Path]): Directory to start searching for TOML config.
        overrides (Optional[Dict]): Values taking precedence over the TOML table.

    Returns:
        RuntimeConfig: The fully resolved configuration object.

    Raises:
        ValueError: If a value fails validation or a key is unknown.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    merged = {**toml_config, **(overrides or {})}

    # template_dir in the TOML file is relative to that file
    if toml_dir and "template_dir" in toml_config and "template_dir" not in (overrides or {}):
      merged["template_dir"] = (toml_dir / Path(toml_config["template_dir"])).resolve()

    return cls.model_validate(merged)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for 'pyproject.toml' and extracts config.

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
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        log_warning(f"Ignoring unreadable [path]{toml_path}[/path]: {e}")
        return {}, None

      return data.get("tool", {}).get("cjsify", {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Booleans and integers are inferred; everything else stays a string.

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config: Dict[str, Any] = {}
  for item in items:
    if "=" not in item:
      log_warning(f"Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str
    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    elif val_str.isdigit():
      final_val = int(val_str)

    config[key] = final_val

  return config
