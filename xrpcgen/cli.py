"""Command line entry point: ``xrpcgen generate|validate|targets``."""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from xrpcgen.core.config import settings
from xrpcgen.core.errors import XrpcError
from xrpcgen.core.logging import configure_logging
from xrpcgen.core.workflow import GenerationStage
from xrpcgen.extractor.loader import extract_contract_from_file
from xrpcgen.extractor.pydantic_extractor import endpoint_names
from xrpcgen.registry import TargetRegistry
from xrpcgen.writer import write_files

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="xrpcgen", description="Generate typed RPC servers and clients")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate code for one or more targets")
    generate.add_argument("contract", help="Python file exporting a `router`")
    generate.add_argument(
        "--targets", nargs="+", default=None,
        help=f"Targets to generate (default: {' '.join(settings.default_targets)})",
    )
    generate.add_argument("--output", default=None, help=f"Output directory (default: {settings.output_dir})")
    generate.add_argument("--package", default=None, help="Python package name for python-server")
    generate.add_argument("--go-package", default=None, help="Go package name for go-server")
    generate.add_argument(
        "--strict", action="store_true", default=settings.strict,
        help="Treat warnings as errors",
    )

    validate = sub.add_parser("validate", help="Check a contract against target capabilities")
    validate.add_argument("contract", help="Python file exporting a `router`")
    validate.add_argument("--targets", nargs="+", default=None)

    sub.add_parser("targets", help="List available targets")
    return parser


def cmd_generate(args: argparse.Namespace, registry: TargetRegistry) -> int:
    contract = extract_contract_from_file(args.contract)
    out_dir = Path(args.output or settings.output_dir)
    options = {"package_name": args.package, "go_package_name": args.go_package}
    exit_code = 0

    for name in args.targets or settings.default_targets:
        generator = registry.get(name)
        result = generator.generate(contract, str(out_dir), options)
        for diagnostic in result.diagnostics:
            print(f"[{name}] {diagnostic}")
        if not result.ok or (args.strict and result.warnings):
            print(f"❌ {name}: generation failed, no files written")
            exit_code = 1
            continue
        written = write_files(result.files, out_dir)
        log.info(
            "wrote %d file(s) to %s", len(written), out_dir,
            extra={"target": name, "stage": GenerationStage.WRITE.value},
        )
        print(f"✅ {name}: {len(written)} file(s) written to {out_dir}")
    return exit_code


def cmd_validate(args: argparse.Namespace, registry: TargetRegistry) -> int:
    contract = extract_contract_from_file(args.contract)
    print(f"Endpoints: {', '.join(endpoint_names(contract))}")
    exit_code = 0
    for name in args.targets or registry.names():
        diagnostics = registry.get(name).validate_contract(contract)
        errors = [d for d in diagnostics if d.severity == "error"]
        for diagnostic in diagnostics:
            print(f"[{name}] {diagnostic}")
        if errors:
            exit_code = 1
        else:
            print(f"✅ {name}: supported ({len(diagnostics)} warning(s))")
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    registry = TargetRegistry.default()

    try:
        if args.command == "generate":
            return cmd_generate(args, registry)
        if args.command == "validate":
            return cmd_validate(args, registry)
        for name in registry.names():
            print(name)
        return 0
    except XrpcError as exc:
        print(f"❌ Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
