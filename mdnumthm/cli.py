"""Command line entry point speaking the mdBook preprocessor protocol."""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from typing import IO

from mdnumthm.preprocessor import NAME, NumThmPreprocessor, preprocessor_from_config

MDBOOK_VERSION = "0.4.35"
_VERSION = "0.2.0"

_VERSION_RE = re.compile(
    r"^\s*(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?\s*$"
)
_REQ_RE = re.compile(
    r"^\s*(?P<op>\^|~|=)?\s*(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+)(?:\.(?P<patch>\d+)(?:-(?P<pre>[0-9A-Za-z.-]+))?)?)?\s*$"
)


def _pre_key(pre: str) -> tuple:
    return tuple(
        (0, int(ident), "") if ident.isdigit() else (1, 0, ident)
        for ident in pre.split(".")
    )


def version_matches(requirement: str, version: str) -> bool:
    """Tell whether ``version`` satisfies ``requirement`` (bare versions are caret)."""
    vm = _VERSION_RE.match(version)
    if vm is None:
        raise ValueError(f"invalid version: {version!r}")
    rm = _REQ_RE.match(requirement)
    if rm is None:
        raise ValueError(f"invalid version requirement: {requirement!r}")

    triple = tuple(int(vm.group(i)) for i in (1, 2, 3))
    pre = vm.group(4)

    op = rm.group("op") or "^"
    major = int(rm.group("major"))
    minor = None if rm.group("minor") is None else int(rm.group("minor"))
    patch = None if rm.group("patch") is None else int(rm.group("patch"))
    req_pre = rm.group("pre")
    lower = (major, minor or 0, patch or 0)

    if op == "^":
        if major > 0 or minor is None:
            upper = (major + 1, 0, 0)
        elif minor > 0 or patch is None:
            upper = (0, minor + 1, 0)
        else:
            upper = (0, 0, patch + 1)
    elif op == "~":
        upper = (major + 1, 0, 0) if minor is None else (major, minor + 1, 0)
    elif patch is not None:
        upper = (major, minor, patch + 1)
    elif minor is not None:
        upper = (major, minor + 1, 0)
    else:
        upper = (major + 1, 0, 0)

    if pre is not None:
        return req_pre is not None and triple == lower and _pre_key(pre) >= _pre_key(req_pre)
    return lower <= triple < upper


def handle_preprocessing(stdin: IO[str], stdout: IO[str]) -> None:
    """Read ``[context, book]`` as JSON, process the book and write it back as JSON."""
    ctx, book = json.load(stdin)
    pre = preprocessor_from_config(ctx.get("config", {}))

    book_version = ctx["mdbook_version"]
    if not version_matches(MDBOOK_VERSION, book_version):
        print(
            f"Warning: The {NAME} plugin was built against version {MDBOOK_VERSION} "
            f"of mdbook, but we're being called from version {book_version}",
            file=sys.stderr,
        )

    processed = pre.run(book)
    json.dump(processed, stdout, separators=(",", ":"), ensure_ascii=False)


def handle_supports(renderer: str) -> None:
    """Raise if the renderer is not supported."""
    pre = NumThmPreprocessor()
    if not pre.supports_renderer(renderer):
        raise RuntimeError(
            f"The {NAME} preprocessor does not support the '{renderer}' renderer"
        )


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdbook-numthm",
        description="An mdbook preprocessor that provides numbered theorems, lemmas, etc..",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {_VERSION}")
    commands = parser.add_subparsers(dest="command")
    supports = commands.add_parser(
        "supports", help="Check whether a renderer is supported by this preprocessor"
    )
    supports.add_argument("renderer")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the preprocessor; return the process exit status."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    args = _make_parser().parse_args(argv)
    try:
        if args.command == "supports":
            handle_supports(args.renderer)
        else:
            handle_preprocessing(sys.stdin, sys.stdout)
    except (ValueError, KeyError, TypeError, RuntimeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())