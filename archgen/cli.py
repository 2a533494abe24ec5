"""Command-line interface for archgen.

Subcommands::

    archgen generate order.yaml -o ./Shop
    archgen customize ./Shop customer.json
    archgen crud ./Shop --entity Order --pattern cqrs
    archgen endpoint ./Shop orders-endpoint.yaml
    archgen analyze ./Shop
    archgen folders ./Shop --pattern "Service Repository"
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import yaml

from archgen import __version__
from archgen.analyzer import ProjectAnalyzer
from archgen.config import Config
from archgen.exceptions import ScaffoldError
from archgen.log import configure_logging
from archgen.models import CrudDetails, EndpointDetails, GenerationResult
from archgen.scaffolder import CrudGenerator, EndpointGenerator
from archgen.utils import console, print_error, print_success, print_summary_table, print_warning
from archgen.workflow import customize_project, scaffold_entity


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archgen",
        description="archgen -- multi-pattern .NET artifact generator and project analyzer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  archgen generate order.yaml -o ./Shop\n"
            "  archgen crud ./Shop --entity Order --pattern cqrs\n"
            "  archgen analyze ./Shop\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--templates",
        default=None,
        help="Template root directory (default: the packaged templates)",
    )
    parser.add_argument(
        "--transactional",
        action="store_true",
        help="Roll back every file of a failed generation run",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Scaffold an entity from a JSON/YAML descriptor")
    gen.add_argument("descriptor", help="Path to the entity descriptor")
    gen.add_argument("--output", "-o", default=".", help="Project root to write into (default: .)")

    cust = sub.add_parser("customize", help="Add an entity to an existing project")
    cust.add_argument("project", help="Path to the existing project")
    cust.add_argument("descriptor", help="Path to the entity descriptor")

    crud = sub.add_parser("crud", help="Generate the CRUD artifact set for a bare entity name")
    crud.add_argument("project", help="Path to the project")
    crud.add_argument("--entity", required=True, help="Entity name, e.g. Order")
    crud.add_argument("--pattern", required=True, help="Pattern tag, e.g. cqrs")
    crud.add_argument(
        "--entity-location",
        default="",
        help="Existing entity file to keep instead of generating one",
    )

    endpoint = sub.add_parser("endpoint", help="Add a single API endpoint from a JSON/YAML descriptor")
    endpoint.add_argument("project", help="Path to the project")
    endpoint.add_argument("descriptor", help="Path to the endpoint descriptor")
    endpoint.add_argument("--namespace", default=None, help="Root namespace (default: from the project dir name)")

    analyze = sub.add_parser("analyze", help="Classify files and detect patterns")
    analyze.add_argument("project", help="Path to the project")

    folders = sub.add_parser("folders", help="Resolve a pattern's logical folders")
    folders.add_argument("project", help="Path to the project")
    folders.add_argument("--pattern", required=True, help="Pattern tag or label")

    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    if args.templates:
        config.templates_dir = Path(args.templates)
    if args.transactional:
        config.transactional = True
    if args.verbose:
        config.verbose = True
    if args.log_file:
        config.log_file = Path(args.log_file)
    return config


def _load_descriptor(path: str, model: type[CrudDetails] | type[EndpointDetails] = CrudDetails):
    try:
        return model.load(path)
    except FileNotFoundError:
        print_error(f"Descriptor not found: {path}")
    except (ValueError, yaml.YAMLError) as exc:
        print_error(f"Invalid descriptor {path}: {exc}")
    return None


def _report(result: GenerationResult) -> int:
    if result.success:
        for path in result.written:
            console.print(f"  [dim]{path}[/dim]")
        print_success(f"Generated {len(result.written)} file(s) ({result.pattern})")
        return 0
    print_error(f"Generation failed: {result.error}")
    if result.details.get("detected"):
        print_warning("Detected patterns: " + ", ".join(result.details["detected"]))
    if result.rolled_back:
        print_warning("Partial output was rolled back")
    return 1


async def _run(args: argparse.Namespace, config: Config) -> int:
    if args.command == "generate":
        details = _load_descriptor(args.descriptor)
        if details is None:
            return 1
        return _report(await scaffold_entity(details, Path(args.output), config))

    if args.command == "customize":
        details = _load_descriptor(args.descriptor)
        if details is None:
            return 1
        return _report(await customize_project(Path(args.project), details, config))

    if args.command == "crud":
        ok = await CrudGenerator(config).generate_crud_operations(
            args.entity, args.pattern, Path(args.project), args.entity_location
        )
        if ok:
            print_success(f"CRUD operations generated for {args.entity}")
            return 0
        print_error(f"CRUD generation failed for {args.entity}")
        return 1

    if args.command == "endpoint":
        endpoint = _load_descriptor(args.descriptor, EndpointDetails)
        if endpoint is None:
            return 1
        try:
            written = await EndpointGenerator(config).generate_endpoint(
                Path(args.project), endpoint, args.namespace
            )
        except (ScaffoldError, OSError) as exc:
            print_error(f"Endpoint generation failed: {exc}")
            return 1
        for path in written:
            console.print(f"  [dim]{path}[/dim]")
        print_success(f"Generated {len(written)} file(s) for {endpoint.verb} {endpoint.route}")
        return 0

    analyzer = ProjectAnalyzer(config.source_extensions)
    if args.command == "analyze":
        structure = await analyzer.analyze(Path(args.project))
        print_summary_table(
            {
                "Controllers": len(structure.controller_files),
                "Services": len(structure.service_files),
                "Repositories": len(structure.repository_files),
                "CQRS": len(structure.cqrs_files),
                "Entities / models": len(structure.entity_files),
                "Patterns": ", ".join(structure.patterns) or "none",
            },
            title=f"Structure of {structure.root}",
        )
        return 0

    folder_map = await analyzer.identify_project_folders(Path(args.project), args.pattern)
    if not folder_map:
        print_error(f"Unknown pattern: {args.pattern}")
        return 1
    print_summary_table(
        {name: path or "(unresolved)" for name, path in folder_map.items()},
        title=f"Folders for {args.pattern}",
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``archgen`` and ``python -m archgen``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _config_from_args(args)
    configure_logging(verbose=config.verbose, log_file=config.log_file)
    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    sys.exit(main())
