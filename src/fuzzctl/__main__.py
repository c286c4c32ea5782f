"""CLI for fuzzy-selecting kubectl resources, kustomize overlays and terraform workspaces."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .commands import CustomCommand, NativeCommand
from .config import load_settings
from .dispatch import dispatch
from .errors import FuzzctlError
from .runtime import build_tools

log = logging.getLogger("fuzzctl")

GLOBAL_SWITCHES = ("-h", "--help", "-v", "--verbose")

EPILOG = """\
resource commands: {native}
  fuzzctl <command> <resource-type> [-n NS | -A] [options...] [-- extra...]
composite commands: {custom}
  fuzzctl kb|ka|kd|kbv|kav|kdv [root] [-- extra...]
  fuzzctl tp|ta|td|twd [dir] [-- extra...]
anything else is passed through to kubectl unchanged.
"""


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fuzzctl",
        usage="fuzzctl [-h] [-v] [--config CONFIG] command [args ...]",
        allow_abbrev=False,
        description="Fuzzy selection on top of kubectl, kustomize and terraform",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG.format(
            native=", ".join(c.value for c in NativeCommand),
            custom=", ".join(c.value for c in CustomCommand),
        ),
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every external command"
    )
    parser.add_argument("--config", help="Path to a YAML config file")
    return parser


def split_global_args(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split leading fuzzctl flags from the command tokens.

    Parsing stops at the first token that is not one of fuzzctl's own flags,
    so ``fuzzctl -n kube-system get pods`` reaches kubectl unchanged.
    """
    index = 0
    while index < len(argv):
        token = argv[index]
        if token in GLOBAL_SWITCHES or token.startswith("--config="):
            index += 1
        elif token == "--config":
            index += 2
        else:
            break
    return list(argv[:index]), list(argv[index:])


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    global_args, tokens = split_global_args(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(global_args)

    try:
        settings = load_settings(args.config)
    except FuzzctlError as exc:
        configure_logging(args.verbose)
        log.error("%s", exc)
        return exc.exit_code

    configure_logging(args.verbose or settings.verbose)

    if not tokens:
        log.error("Missing command")
        parser.print_usage(sys.stderr)
        return 1

    try:
        return dispatch(build_tools(settings), tokens)
    except FuzzctlError as exc:
        log.error("%s", exc)
        return exc.exit_code
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
