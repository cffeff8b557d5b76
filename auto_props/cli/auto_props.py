"""
Command line interface: transform TypeScript modules or inspect their resolved component metadata.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tqdm import tqdm

from auto_props.core.config import AutoPropsConfig, load_config
from auto_props.core.models import ResolvedModule
from auto_props.core.program import SourceProgram
from auto_props.core.renderer import DOC_MODES
from auto_props.core.transform import TransformResult, transform_source
from auto_props.core.utils import discover_sources


def _resolve_config(args: argparse.Namespace) -> AutoPropsConfig:
    cli_overrides: Dict[str, Any] = {}
    if getattr(args, "hide_warnings", False):
        cli_overrides["hide_warnings"] = True
    if getattr(args, "include_docs", None):
        cli_overrides["include_docs"] = args.include_docs
    return load_config(config_path=getattr(args, "config", None), cli_args=cli_overrides)


def _process(paths: List[str], config: AutoPropsConfig) -> Tuple[List[Tuple[Path, TransformResult]], int]:
    files = discover_sources(paths, config)
    program = SourceProgram()
    results: List[Tuple[Path, TransformResult]] = []
    failures = 0
    for file_path in tqdm(files, desc="Resolving components", unit="file", disable=len(files) < 2):
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logging.error(f"Could not read {file_path}: {e}")
            failures += 1
            continue
        results.append((file_path, transform_source(program, str(file_path), source, config)))
    return results, failures


def _output_path(file_path: Path, output_dir: Path) -> Path:
    try:
        relative = file_path.relative_to(Path.cwd())
    except ValueError:
        relative = Path(file_path.name)
    return output_dir / relative


def _run_transform(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    results, failures = _process(args.paths, config)

    for file_path, result in results:
        if args.in_place:
            if result.changed:
                file_path.write_text(result.code, encoding="utf-8")
                print(f"Patched {file_path} ({', '.join(result.components)})")
        elif args.output_dir:
            target = _output_path(file_path, Path(args.output_dir))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(result.code, encoding="utf-8")
        else:
            if len(results) > 1:
                print(f"// ==> {file_path} <==")
            sys.stdout.write(result.code)

    return 1 if failures else 0


def _run_inspect(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    results, failures = _process(args.paths, config)

    report = {
        str(file_path): ResolvedModule(components=result.components, diagnostics=result.diagnostics).to_dict()
        for file_path, result in results
    }
    text = json.dumps(report, indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"Component metadata written to {args.output}")
    else:
        print(text)

    return 1 if failures else 0


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("paths", nargs="+", help="TypeScript files or directories to process.")
    parser.add_argument("--config", help="Path to configuration YAML file (default: autoprops.config.yaml)")
    parser.add_argument("--hide-warnings", action="store_true",
                        help="Do not log warnings about types that could not be resolved.")
    parser.add_argument("--include-docs", choices=list(DOC_MODES),
                        help="Embed property documentation comments in the generated code.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="auto-props: generate runtime prop and event declarations from component types."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    transform = subparsers.add_parser("transform", help="Append runtime declarations to TypeScript modules")
    _add_common_flags(transform)
    destination = transform.add_mutually_exclusive_group()
    destination.add_argument("--output-dir", help="Write transformed modules under this directory.")
    destination.add_argument("--in-place", action="store_true", help="Rewrite modules that contain components.")
    transform.set_defaults(func=_run_transform)

    inspect = subparsers.add_parser("inspect", help="Print resolved component metadata as JSON")
    _add_common_flags(inspect)
    inspect.add_argument("--output", help="Write the JSON report to a file instead of stdout.")
    inspect.set_defaults(func=_run_inspect)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for the auto-props CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = args.func(args)
        sys.exit(exit_code)
    except Exception as e:
        print(f"\nAn unexpected error occurred: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
