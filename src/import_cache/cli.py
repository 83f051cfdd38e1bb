"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TextIO

from import_cache.config import CliOverrides
from import_cache.engine import BuildDatabaseSchemaError, BuildFailedError, NoRuleError
from import_cache.imports import ALL_KINDS, ImportCache, create_cache
from import_cache.paths import DIRECT_IMPORTS, TRANSITIVE_IMPORTS, PathOutsideRootError

_KIND_CHOICES = {
    "direct": (DIRECT_IMPORTS,),
    "transitive": (TRANSITIVE_IMPORTS,),
    "all": ALL_KINDS,
}


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for cache commands."""
    parser = argparse.ArgumentParser(prog="import-cache")
    parser.add_argument("--project-root", required=False, default=".")
    parser.add_argument("--output-root", required=False, default=None)
    parser.add_argument("--module-root", action="append", default=None)
    parser.add_argument("--native-root", action="append", default=None)
    parser.add_argument("--module-enabled", choices=("true", "false"), default=None)
    parser.add_argument("--native-enabled", choices=("true", "false"), default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="bring import artifacts up to date")
    build.add_argument("sources", nargs="+")
    build.add_argument("--kind", choices=tuple(_KIND_CHOICES), default="all")
    build.add_argument("--force", action="store_true")

    for name in ("direct", "transitive"):
        query = subparsers.add_parser(name, help=f"print {name} imports of a source file")
        query.add_argument("source")
        query.add_argument("--force", action="store_true")

    subparsers.add_parser("status", help="print effective config and database status")

    log = subparsers.add_parser("log", help="print recent build events")
    log.add_argument("--since", default=None)
    log.add_argument("--limit", type=int, default=50)
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    """Translate parsed arguments into config overrides."""
    return CliOverrides(
        output_root=args.output_root,
        module_roots=tuple(args.module_root) if args.module_root is not None else None,
        native_roots=tuple(args.native_root) if args.native_root is not None else None,
        module_enabled=_optional_bool(args.module_enabled),
        native_enabled=_optional_bool(args.native_enabled),
    )


def run_command(cache: ImportCache, args: argparse.Namespace, out_stream: TextIO) -> None:
    """Execute one parsed command against a cache."""
    if args.command == "build":
        report = cache.build(args.sources, kinds=_KIND_CHOICES[args.kind], force=args.force)
        out_stream.write(f"{json.dumps(report.to_dict(), sort_keys=True)}\n")
        return
    if args.command == "direct":
        _write_lines(out_stream, cache.direct_imports(args.source, force=args.force))
        return
    if args.command == "transitive":
        _write_lines(out_stream, cache.transitive_imports(args.source, force=args.force))
        return
    if args.command == "status":
        status = cache.database.status()
        payload = {
            "config": cache.config.to_public_dict(),
            "database": {
                "status": status.status,
                "last_build_timestamp": status.last_build_timestamp,
                "target_count": status.target_count,
            },
            "rules": list(cache.rules.names()),
        }
        out_stream.write(f"{json.dumps(payload, sort_keys=True)}\n")
        return
    if args.command == "log":
        for event in cache.audit_logger.read(since=args.since, limit=args.limit):
            out_stream.write(f"{json.dumps(event, sort_keys=True)}\n")
        return
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the import-cache command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        cache = create_cache(
            project_root=str(Path(args.project_root)),
            cli_overrides=overrides_from_args(args),
        )
        run_command(cache, args, sys.stdout)
    except (
        BuildFailedError,
        BuildDatabaseSchemaError,
        NoRuleError,
        PathOutsideRootError,
        ValueError,
    ) as exc:
        print(f"import-cache: {describe_error(exc)}", file=sys.stderr)
        return 1
    return 0


def describe_error(exc: Exception) -> str:
    """Return a one-line human readable error description."""
    if isinstance(exc, BuildDatabaseSchemaError):
        return (
            f"build database schema {exc.found} is not supported (expected {exc.expected}); "
            "rerun with --force"
        )
    if isinstance(exc, BuildFailedError):
        cause = exc.__cause__
        if cause is not None:
            return f"{exc}; caused by {type(cause).__name__}"
        return str(exc)
    return str(exc)


def _write_lines(out_stream: TextIO, paths: list[str]) -> None:
    for path in paths:
        out_stream.write(f"{path}\n")


def _optional_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    return value == "true"


if __name__ == "__main__":
    raise SystemExit(main())
