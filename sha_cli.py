"""Command-line front end for the digest engine.

Usage:
    python sha_cli.py "message"                    # SHA-256 of a UTF-8 string
    python sha_cli.py -a sha1 "message"
    python sha_cli.py -a sha512 -f path/to/file
    python sha_cli.py --check vectors/sha_kat.yaml --report report.yaml

Digests are printed as lowercase hex, or as a YAML mapping with
``--format yaml``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import yaml

import kat
from errors import ShaError
from sha_engine import HashContext, available_algorithms


READ_BLOCKS = 1024


def _setup_logging(verbose: int) -> None:
    log_fmt = "| %(funcName)24s:%(lineno)-4d| %(levelname)-8s| %(message)s"
    if not verbose:
        log_fmt = "| %(name)-16s| %(levelname)-8s| %(message)s"
        log_level = logging.ERROR
    elif verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG
    logging.basicConfig(format=log_fmt, level=log_level)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute SHA-1 / SHA-2 digests or validate known-answer vectors"
    )
    parser.add_argument(
        "message",
        nargs="?",
        help="Text to hash (UTF-8)",
    )
    parser.add_argument(
        "-a",
        "--algorithm",
        default="sha256",
        help=f"Digest algorithm: {', '.join(available_algorithms())} (default: SHA-256)",
    )
    parser.add_argument(
        "-f",
        "--file",
        help="Hash the raw bytes of this file instead of a message",
    )
    parser.add_argument(
        "--check",
        metavar="VECTORS",
        help="Validate the engine against a YAML known-answer file",
    )
    parser.add_argument(
        "--report",
        help="With --check, write a YAML report to this path",
    )
    parser.add_argument(
        "--format",
        choices=["hex", "yaml"],
        default="hex",
        help="Output format (default: hex)",
    )
    parser.add_argument(
        "--strategy",
        default=None,
        help="Transform strategy: auto, unrolled or portable "
        "(default: $SHA_ENGINE_STRATEGY or auto)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity",
    )
    return parser


def _hash_file(ctx: HashContext, filename: str) -> None:
    with open(filename, "rb") as f:
        while True:
            chunk = f.read(ctx.block_size * READ_BLOCKS)
            if not chunk:
                break
            ctx.update(chunk)


def _check(args) -> int:
    vectors = kat.load_vectors(args.check)
    results = kat.run_vectors(vectors, strategy=args.strategy)
    if args.report:
        kat.write_report(results, args.report)

    failed = [r for r in results if not r.passed]
    print(f"{len(results)} vectors, {len(results) - len(failed)} passed, {len(failed)} failed")
    return 1 if failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse has already printed usage or help
        return 1 if e.code else 0
    _setup_logging(args.verbose)

    try:
        if args.check:
            return _check(args)

        if (args.message is None) == (args.file is None):
            sys.stderr.write("Give exactly one of a message or -f path/to/file\n")
            return 1

        ctx = HashContext(args.algorithm, strategy=args.strategy)
        if args.file is not None:
            _hash_file(ctx, args.file)
            source = args.file
        else:
            ctx.update(args.message.encode("utf-8"))
            source = args.message
        digest = ctx.finalize()
    except OSError as e:
        sys.stderr.write(f"Error reading file: {e}\n")
        return 1
    except ShaError as e:
        sys.stderr.write(f"Error: {e.message}\n")
        return 1

    if args.format == "yaml":
        yaml.dump(
            {"algorithm": ctx.name, "source": source, "digest": digest.hex()},
            sys.stdout,
            default_flow_style=False,
            sort_keys=False,
        )
    else:
        print(digest.hex())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
