"""Command line interface for zonemapper."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from zonemapper.config.loader import configure_from_cli
from zonemapper.config.settings import set_settings, Settings
from zonemapper.domain.exceptions import (
    ConfigurationError,
    DirectoryError,
    zonemapperError,
)
from zonemapper.encoding.checksum import checksum
from zonemapper.encoding.decoder import is_serviceable
from zonemapper.processing.claims import ClaimParser, normalize_pincode
from zonemapper.processing.validation import DocumentValidator
from zonemapper.runners.pipeline import EncodePipeline
from zonemapper.utils.logging import setup_logging


def _add_directory_options(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument(
        "-d",
        "--directory",
        required=required,
        help="Master pincode directory: a JSON file of {pincode, zone, state, city} rows or an http(s) URL.",
    )
    cache_group = p.add_argument_group("Directory Cache Options")
    cache_group.add_argument(
        "-p",
        "--cache-path",
        help="Path to the directory snapshot SQLite DB. If omitted, a default is chosen.",
    )
    cache_group.add_argument(
        "-f",
        "--fresh-cache",
        action="store_true",
        help="Discard any existing snapshot and reload the directory from its source.",
    )
    cache_group.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write a directory snapshot.",
    )
    cache_group.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="HTTP timeout when the directory is a URL (default: 30).",
    )


def _add_debug_options(p: argparse.ArgumentParser) -> None:
    debug_group = p.add_argument_group("Debug Options")
    debug_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with verbose logging.",
    )
    debug_group.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Also write logs to a timestamped file in this file's directory.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the zonemapper CLI."""
    parser = argparse.ArgumentParser(
        prog="zonemapper",
        description=(
            "Encode vendor serviceability claims into compact UTSF documents "
            "relative to a master pincode directory."
        ),
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    # encode
    enc = sub.add_parser("encode", help="Encode one or more vendor JSON files")
    enc.add_argument("vendors", nargs="+", help="Vendor JSON files ({meta, pricing, serviceability, selectedZones})")
    enc.add_argument(
        "-o",
        "--output-dir",
        help="Directory for <vendor>.utsf.json outputs (default: next to each vendor file).",
    )
    _add_directory_options(enc, required=True)

    encoder_group = enc.add_argument_group("Encoder Options")
    encoder_group.add_argument(
        "--range-threshold",
        type=int,
        metavar="N",
        help="Minimum run length stored as a range (default: 3).",
    )
    encoder_group.add_argument(
        "--coverage-threshold",
        type=float,
        metavar="PERCENT",
        help="Coverage above which a zone is stored as full-minus-exceptions (default: 50).",
    )
    enc.add_argument(
        "--no-warnings",
        action="store_true",
        help="Do not write <vendor>.warnings.json sidecars.",
    )
    enc.add_argument(
        "--dry-run",
        action="store_true",
        help="Encode but do not write any output.",
    )
    _add_debug_options(enc)

    # checksum
    chk = sub.add_parser("checksum", help="Print the serviceability checksum of a vendor JSON file")
    chk.add_argument("vendor", help="Vendor JSON file")
    _add_directory_options(chk, required=False)
    _add_debug_options(chk)

    # validate
    val = sub.add_parser("validate", help="Check an encoded .utsf.json document")
    val.add_argument("document", help="Encoded UTSF JSON document")
    _add_debug_options(val)

    # check
    look = sub.add_parser("check", help="Look up whether a document serves a pincode")
    look.add_argument("document", help="Encoded UTSF JSON document")
    look.add_argument("pincode", help="Six-digit pincode")
    _add_directory_options(look, required=True)
    _add_debug_options(look)

    return parser


def _read_json(path: str):
    with Path(path).open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _cmd_encode(args, settings: Settings, logger) -> int:
    pipeline = EncodePipeline(settings)
    result = pipeline.encode_many(list(args.vendors))

    for run in result.results:
        if run.ok:
            target = run.output_path or "(dry run)"
            print(f"{run.vendor_file} -> {target} checksum={run.checksum} warnings={len(run.warnings)}")
        else:
            print(f"{run.vendor_file} FAILED: {run.error}", file=sys.stderr)

    logger.info("Encoded %d/%d vendor files", result.n_succeeded, result.n_inputs)
    return 0 if result.n_failed == 0 else 1


def _cmd_checksum(args, settings: Settings, logger) -> int:
    payload = EncodePipeline.load_vendor(args.vendor)
    parsed = ClaimParser().parse(payload.get("serviceability") or [])
    if settings.directory.source:
        directory = EncodePipeline(settings).directory
        entries = EncodePipeline.checksum_entries(parsed.claims, directory)
    else:
        entries = parsed.claims
    print(checksum(entries))
    return 0


def _cmd_validate(args, settings: Settings, logger) -> int:
    report = DocumentValidator.validate(_read_json(args.document))
    if report.is_valid:
        print(f"{args.document}: valid")
        return 0
    print(f"{args.document}: {len(report.errors)} problem(s)")
    for error in report.errors:
        print(f"  - {error}")
    return 1


def _cmd_check(args, settings: Settings, logger) -> int:
    pincode = normalize_pincode(args.pincode)
    if pincode is None:
        raise ConfigurationError(
            f"Not a valid pincode: {args.pincode}",
            config_field="pincode"
        ).add_suggestion("Pincodes are 6 digits starting with 1-8")

    document = _read_json(args.document)
    directory = EncodePipeline(settings).directory
    result = is_serviceable(document, pincode, directory)
    print(json.dumps({
        "pincode": result.pincode,
        "zone": result.zone,
        "serviceable": result.is_serviceable,
        "oda": result.is_oda,
        "reason": result.reason,
    }))
    return 0


COMMANDS = {
    "encode": _cmd_encode,
    "checksum": _cmd_checksum,
    "validate": _cmd_validate,
    "check": _cmd_check,
}


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the zonemapper CLI."""
    args = build_parser().parse_args(argv)

    handler = COMMANDS.get(args.cmd)
    if handler is None:
        logging.error("Unknown command: %s", args.cmd)
        sys.exit(2)

    settings = None
    try:
        settings = configure_from_cli(args)
        set_settings(settings)

        log_level = "DEBUG" if settings.debug_mode else "WARNING"
        logger, _ = setup_logging(
            log_dir=str(settings.logging.file_path.parent)
            if settings.logging.file_path
            else None,
            console=settings.logging.console_output,
            level=log_level,
        )

        if settings.debug_mode:
            logger.debug("Configuration details:")
            for section, values in settings.to_dict().items():
                logger.debug("  %s: %s", section, values)

        sys.exit(handler(args, settings, logger))

    except (ConfigurationError, DirectoryError) as e:
        logging.error("%s: %s", type(e).__name__, e.message)
        if getattr(e, "suggestions", None):
            logging.error("Suggestions:")
            for suggestion in e.suggestions:
                logging.error("  - %s", suggestion)
        sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(130)

    except (zonemapperError, OSError, ValueError) as e:
        logging.error("Command failed: %s", e)
        if settings is not None and settings.debug_mode:
            logging.exception("Full traceback:")
        sys.exit(1)


if __name__ == "__main__":
    main()
