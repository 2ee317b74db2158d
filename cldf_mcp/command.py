"""
Command line builder for the cldf program.

Commands are built as argument vectors and handed straight to the process
executor, so values never pass through a shell. `render` produces the
human-readable form used in logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

DEFAULT_CLI = "cldf"


def build_flags(args: Mapping[str, Any]) -> list[str]:
    """
    Turn a flat argument map into ``--flag [value]`` tokens.

    Keys are emitted in insertion order. ``None`` and ``False`` are dropped,
    ``True`` becomes a bare flag, anything else becomes ``--key <str(value)>``.
    """
    tokens: list[str] = []
    for key, value in args.items():
        if value is None or value is False:
            continue
        if value is True:
            tokens.append(f"--{key}")
        else:
            tokens += [f"--{key}", str(value)]
    return tokens


def build_args(
    base: str,
    args: Mapping[str, Any] | None = None,
    *,
    positional: Sequence[str] = (),
    cli_path: str = DEFAULT_CLI,
) -> list[str]:
    """
    Build the full argv for one cldf invocation.

    Example:
        build_args("query", {"select": "all", "json": "json"}, positional=["a.cldf"])
        -> ["cldf", "query", "a.cldf", "--select", "all", "--json", "json"]
    """
    argv = [cli_path, base]
    argv += [str(p) for p in positional]
    if args:
        argv += build_flags(args)
    return argv


def render(argv: Sequence[str]) -> str:
    """Render an argv for display, double-quoting positionals and flag values."""
    parts = list(argv[:2])
    for token in argv[2:]:
        parts.append(token if token.startswith("--") else f'"{token}"')
    return " ".join(parts)
