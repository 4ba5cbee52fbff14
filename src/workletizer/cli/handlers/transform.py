"""
Transform Command Handler.

This module implements the logic for the `workletizer transform` command.
It orchestrates:
1. Configuration loading (`pyproject.toml` plus CLI overrides).
2. Discovery of JavaScript sources.
3. Worklet transformation via the Engine.
4. Output writing and the batch summary.
"""

from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from workletizer.config import RuntimeConfig
from workletizer.core.conversion_result import TransformResult
from workletizer.core.engine import WorkletEngine
from workletizer.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
)

SOURCE_SUFFIXES = (".js", ".jsx", ".mjs", ".cjs")


def collect_sources(directory: Path) -> List[Path]:
  """
  Finds the JavaScript sources below a directory, sorted by path.

  `node_modules` directories are not searched.
  """
  return sorted(
    p
    for p in directory.rglob("*")
    if p.is_file() and p.suffix in SOURCE_SUFFIXES and "node_modules" not in p.relative_to(directory).parts
  )


def handle_transform(
  input_path: Path,
  output_path: Optional[Path],
  globals: List[str],
  root: Optional[Path] = None,
) -> int:
  """
  Handles the 'transform' command execution.

  Args:
      input_path: Path to the source file or directory.
      output_path: Destination file or directory. A single file is printed to
          stdout when omitted.
      globals: Extra ambient names.
      root: Base directory for file names in location strings.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = RuntimeConfig.load(
    globals=globals,
    root=root,
    search_path=input_path if input_path.is_dir() else input_path.parent,
  )
  engine = WorkletEngine(config)
  batch_results: Dict[str, TransformResult] = {}

  if input_path.is_file():
    result = _transform_single_file(input_path, output_path, engine)
    batch_results[input_path.name] = result
    if not result.success:
      _print_batch_summary(batch_results)
      return 1
    return 0

  if not output_path:
    log_error("Directory transformation requires --out destination directory.")
    return 1

  sources = collect_sources(input_path)
  if not sources:
    log_warning(f"No JavaScript files found in {input_path}")
    return 0

  log_info(f"Processing {len(sources)} files from {input_path}...")
  for src_file in sources:
    rel_path = src_file.relative_to(input_path)
    result = _transform_single_file(src_file, output_path / rel_path, engine)
    batch_results[rel_path.as_posix()] = result

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _transform_single_file(input_path: Path, output_path: Optional[Path], engine: WorkletEngine) -> TransformResult:
  """
  Transforms one file and writes (or prints) the result.

  A file with failed worklets is still written: the failing worklets keep
  their original text.

  Args:
      input_path: Source file path.
      output_path: Destination file path, stdout when None.
      engine: Configured engine.

  Returns:
      TransformResult: Result object containing status and code.
  """
  try:
    with open(input_path, "rt", encoding="utf-8") as f:
      code = f.read()
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {input_path}: {e}")
    return TransformResult(success=False, errors=[str(e)])

  result = engine.run(code, str(input_path.resolve()))

  if output_path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wt", encoding="utf-8") as f:
      f.write(result.code)
    if result.worklets:
      log_success(
        f"Transformed {len(result.worklets)} worklet(s): [path]{input_path}[/path] -> [path]{output_path}[/path]"
      )
  else:
    print(result.code, end="")

  return result


def _print_batch_summary(results: Dict[str, TransformResult]) -> None:
  """
  Renders a summary table of transformation results to the console.

  Args:
      results: Dictionary mapping filenames to results.
  """
  total = len(results)
  successes = sum(1 for r in results.values() if r.success and not r.has_errors)
  failures = total - successes

  if failures == 0:
    log_success(f"Batch Complete: {successes}/{total} files transformed.")
    return

  table = Table(title="Transformation Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success and not res.has_errors:
      continue
    issues = escape("; ".join(res.errors)) if res.errors else "Unknown Error"
    table.add_row(escape(filename), "❌ Failed", issues)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {successes} Passed, {failures} with Issues.")
