"""
Main Entry Point for workletizer CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `workletizer.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from workletizer.cli import commands
from workletizer import __version__


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, 1 when any worklet failed).
  """
  parser = argparse.ArgumentParser(description="workletizer: JavaScript worklet transformer")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: TRANSFORM ---
  cmd_tr = subparsers.add_parser("transform", help="Transform the worklets of a file or directory")
  cmd_tr.add_argument("path", type=Path, help="Input source file or directory")
  cmd_tr.add_argument("--out", type=Path, help="Output destination (file or dir)")
  cmd_tr.add_argument("--globals", nargs="+", default=[], help="Extra ambient names that are never captured")
  cmd_tr.add_argument("--root", type=Path, default=None, help="Base directory for file names in locations")

  # --- Command: INSPECT ---
  cmd_ins = subparsers.add_parser("inspect", help="List the worklets of a file or directory")
  cmd_ins.add_argument("path", type=Path, help="Input source file or directory")
  cmd_ins.add_argument("--globals", nargs="+", default=[], help="Extra ambient names that are never captured")
  cmd_ins.add_argument("--root", type=Path, default=None, help="Base directory for file names in locations")

  args = parser.parse_args(argv)

  if args.command == "transform":
    return commands.handle_transform(args.path, args.out, args.globals, args.root)

  elif args.command == "inspect":
    return commands.handle_inspect(args.path, args.globals, args.root)

  return 0


if __name__ == "__main__":
  sys.exit(main())
