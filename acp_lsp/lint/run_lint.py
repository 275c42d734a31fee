# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI entry point for linting ACP annotations and JSON artifacts."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from ..languages import language_from_path
from ..schema import detect_schema_type
from . import LintResult, lint_files

# Directories that never hold project sources
SKIPPED_DIRECTORIES = {'.git', '.hg', '.svn', 'node_modules', '__pycache__', '.venv', 'venv', 'target', 'dist', 'build'}


def is_lintable(path: Path) -> bool:
    """Check if a file is annotated source or an ACP JSON artifact."""
    return language_from_path(str(path)) is not None or detect_schema_type(str(path)) is not None


def find_lint_files(paths: List[str]) -> List[Path]:
    """Find all lintable files in given paths."""
    files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            print(f"Warning: Path does not exist: {path}", file=sys.stderr)
            continue

        if path.is_file():
            if is_lintable(path):
                files.append(path)
            else:
                print(f"Warning: Not a supported source file or ACP artifact: {path}", file=sys.stderr)
        elif path.is_dir():
            for candidate in path.rglob('*'):
                if SKIPPED_DIRECTORIES.intersection(candidate.relative_to(path).parts[:-1]):
                    continue
                if candidate.is_file() and is_lintable(candidate):
                    files.append(candidate)
        else:
            print(f"Warning: Path is neither file nor directory: {path}", file=sys.stderr)

    return sorted(set(files))


def add_lint_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='File paths or directories to lint (default: current directory)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )


def print_results(results: List[LintResult], output_format: str):
    """Print results in the requested format."""
    if output_format == 'json':
        output = {
            'files': len(results),
            'errors': sum(len(r.errors) for r in results),
            'warnings': sum(len(r.warnings) for r in results),
            'results': [
                {
                    'file': str(r.file_path),
                    'errors': r.errors,
                    'warnings': r.warnings,
                }
                for r in results
            ]
        }
        print(json.dumps(output, indent=2))
    elif output_format == 'github-actions':
        for result in results:
            for error in result.errors:
                print(f"::error file={result.file_path},line={error.get('line', 1)},col={error.get('column', 1)}::{error['message']}")
            for warning in result.warnings:
                print(f"::warning file={result.file_path},line={warning.get('line', 1)},col={warning.get('column', 1)}::{warning['message']}")
    else:  # human-readable
        for result in results:
            for severity, entries in (('error', result.errors), ('warning', result.warnings)):
                for entry in entries:
                    code = f" [{entry['code']}]" if 'code' in entry else ""
                    print(
                        f"{result.file_path}:{entry.get('line', 1)}:{entry.get('column', 1)}: "
                        f"{severity}: {entry['message']}{code}"
                    )


def run(args: argparse.Namespace) -> int:
    """Lint the requested paths and return the process exit code."""
    paths = args.paths or ['.']

    files = find_lint_files(paths)
    if not files:
        print("No supported files found.", file=sys.stderr)
        return 1

    results = lint_files(files)
    print_results(results, args.format)

    # Exit with error code if any errors found
    total_errors = sum(len(r.errors) for r in results)
    if total_errors > 0:
        return 1
    if args.format == 'human':
        print(f"Lint succeeded with no errors ({len(results)} files).")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the linter CLI."""
    parser = argparse.ArgumentParser(
        description='Lint ACP annotations and ACP JSON files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_lint_arguments(parser)
    sys.exit(run(parser.parse_args(argv)))


if __name__ == '__main__':
    main()
