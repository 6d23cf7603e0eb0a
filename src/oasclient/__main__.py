from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import CompilerOptions, ResourceGrouping
from .errors import OasClientError
from .generation import GenerationProfile
from .generator import PackageSpec, generate_package
from .ir import build_ir
from .loader import load_openapi


def _python_version(value: str) -> GenerationProfile:
    try:
        return GenerationProfile.from_version(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oasclient",
        description="Generate typed models and an httpx client package from an OpenAPI spec.",
    )
    parser.add_argument("spec", help="Path or URL of the OpenAPI spec (JSON/YAML)")
    parser.add_argument("-n", "--package-name", required=True, help="Generated package name")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Output directory")
    parser.add_argument(
        "--python-version",
        dest="profile",
        type=_python_version,
        default="3.10",
        help="Target Python version (e.g. 3.10)",
    )
    parser.add_argument(
        "--group-by",
        choices=[grouping.value for grouping in ResourceGrouping],
        default=ResourceGrouping.PATH.value,
        help="How operations are grouped into client classes",
    )
    parser.add_argument(
        "--default-media-type",
        default=CompilerOptions.default_media_type,
        help="Media type used for request bodies that declare none",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for debug)")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    options = CompilerOptions(
        default_media_type=args.default_media_type,
        resource_grouping=ResourceGrouping(args.group_by),
    )
    try:
        document = load_openapi(args.spec)
        ir = build_ir(document)
        package = PackageSpec(package_name=args.package_name, output_dir=args.output_dir)
        generate_package(package, ir, args.profile, options)
    except OasClientError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
