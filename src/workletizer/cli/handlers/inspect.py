"""
Inspect Command Handler.

Lists the worklets of a file or directory without writing anything: name,
kind, location, hash, captured names and outputs.
"""

from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.table import Table

from workletizer.cli.handlers.transform import collect_sources
from workletizer.config import RuntimeConfig
from workletizer.core.engine import WorkletEngine
from workletizer.utils.console import console, log_error, log_warning


def handle_inspect(input_path: Path, globals: List[str], root: Optional[Path] = None) -> int:
  """
  Handles the 'inspect' command execution.

  Args:
      input_path: Source file or directory.
      globals: Extra ambient names.
      root: Base directory for file names in location strings.

  Returns:
      int: 0 when every worklet could be built, 1 otherwise.
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
  sources = [input_path] if input_path.is_file() else collect_sources(input_path)

  table = Table(title="Worklets")
  table.add_column("Name", style="cyan")
  table.add_column("Kind")
  table.add_column("Location", style="blue")
  table.add_column("Hash", justify="right")
  table.add_column("Captured", style="magenta")
  table.add_column("Outputs", style="green")

  errors: List[str] = []
  for src_file in sources:
    with open(src_file, "rt", encoding="utf-8") as f:
      code = f.read()
    result = engine.run(code, str(src_file.resolve()))
    errors.extend(result.errors)
    for record in result.worklets:
      table.add_row(
        escape(record.name),
        record.kind,
        escape(record.location),
        str(record.hash) if record.hash is not None else "",
        ", ".join(record.captured),
        ", ".join(record.outputs),
      )

  console.print(table)
  for error in errors:
    log_warning(escape(error))
  return 1 if errors else 0
