"""rust-project CLI: load workspace sources from a project document or a Cargo manifest."""

import argparse
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Optional


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return value


def main():
    """Main CLI entry point for rust-project commands."""
    try:
        package_version = get_version("rust-project-loader")
    except PackageNotFoundError:
        package_version = "dev"

    parser = argparse.ArgumentParser(
        prog="rust-project",
        description="Resolve workspace crates to source roots and load their files in parallel"
    )
    parser.add_argument("--version", action="version", version=f"rust-project {package_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    load_parent = argparse.ArgumentParser(add_help=False)
    load_parent.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Worker threads (defaults to $RUST_PROJECT_WORKERS or the CPU count)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    json_parser = subparsers.add_parser(
        "json",
        help="Load sources for every crate in a rust-project.json document",
        parents=[parent_parser, load_parent]
    )
    json_parser.add_argument(
        "path",
        type=Path,
        help="Path to rust-project.json"
    )
    json_parser.add_argument(
        "--honor-source",
        action="store_true",
        help="Read only files selected by each crate's source include/exclude dirs"
    )

    cargo_parser = subparsers.add_parser(
        "cargo",
        help="Load sources for every target reported by cargo metadata",
        parents=[parent_parser, load_parent]
    )
    cargo_parser.add_argument(
        "path",
        type=Path,
        help="Path to Cargo.toml"
    )

    verify_parser = subparsers.add_parser(
        "verify",
        help="Check a rust-project.json document against the producer contract",
        parents=[parent_parser]
    )
    verify_parser.add_argument(
        "path",
        type=Path,
        help="Path to rust-project.json"
    )
    verify_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory for verify_project.json"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    def _print_load_report(report) -> None:
        if args.quiet:
            return
        for skipped in report.skipped:
            print(
                f"  Skipped crate {skipped.crate_index} ({skipped.root_module}): {skipped.reason.value}",
                file=sys.stderr,
            )
        for name, error in sorted(report.failed.items()):
            print(f"  Failed {name}: {error}", file=sys.stderr)
        print(f"Loaded units: {report.loaded_names}", file=sys.stderr)
        print(
            f"[OK] {len(report.results)} units, {len(report.failed)} failed, "
            f"{len(report.skipped)} skipped, {report.file_count} files",
            file=sys.stderr,
        )

    def _reporter():
        from .kernel.timing import NullTimingReporter, StderrTimingReporter
        return NullTimingReporter() if args.quiet else StderrTimingReporter()

    if args.command == "json":
        try:
            from .api import load_project_sources

            report = load_project_sources(
                args.path.resolve(),
                reporter=_reporter(),
                max_workers=args.workers,
                honor_source=args.honor_source,
            )
            _print_load_report(report)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            import traceback
            traceback.print_exc()
            sys.exit(1)
    elif args.command == "cargo":
        try:
            from .api import load_cargo_sources

            report = load_cargo_sources(
                args.path.resolve(),
                reporter=_reporter(),
                max_workers=args.workers,
            )
            _print_load_report(report)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            import traceback
            traceback.print_exc()
            sys.exit(1)
    elif args.command == "verify":
        try:
            from .api import verify_project
            from ._internal.canonical_json import canonical_dumps

            result = verify_project(args.path.resolve())
            output_dir: Optional[Path] = args.output_dir.resolve() if args.output_dir else None
            if output_dir is not None:
                output_dir.mkdir(parents=True, exist_ok=True)
                report_out = output_dir / "verify_project.json"
                report_out.write_text(canonical_dumps(result.model_dump()) + "\n", encoding="utf-8")
                if not args.quiet:
                    print(f"  Report: {report_out}")
            if not args.quiet:
                status = "OK" if result.ok else "FAILED"
                print(f"[{status}] Verification complete")
                print(f"  Status: {status}")
                print(f"  Errors: {len(result.errors)}")
                print(f"  Warnings: {len(result.warnings)}")
                for issue in result.errors + result.warnings:
                    print(f"  {issue.code}: {issue.message}")
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            import traceback
            traceback.print_exc()
            sys.exit(1)
        if not result.ok:
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
