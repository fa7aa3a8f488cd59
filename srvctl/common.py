"""Helpers shared by commands: hooks, labels, JSON input and environment."""

from __future__ import annotations

import json
import os
import platform
import re
import sys
from typing import (
    IO,
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    MutableMapping,
    NamedTuple,
    Optional,
    Sequence,
)

from .listing import ENDPOINT

OUTPUT_FORMATS = ("json", "text", "yaml")


class CommandError(Exception):
    """A command failed with a message meant for the user."""


class _Flag(NamedTuple):
    name: str
    kind: type
    default: Any
    help: str
    short: Optional[str] = None
    repeated: bool = False


GLOBAL_FLAGS = (
    _Flag("config", str, "", "config file path"),
    _Flag("context", str, "", "context name"),
    _Flag("proxy", str, "", "proxy url"),
    _Flag("http-timeout", int, 30, "HTTP timeout ( seconds )"),
    _Flag("verbose", bool, False, "verbose output", "v"),
    _Flag("output", str, "text", "output format (text/json/yaml)", "o"),
    _Flag("help", bool, False, "Print usage"),
    _Flag("no-header", bool, False, "print output without headers", "h"),
)

FORMAT_FLAGS = (
    _Flag("field", str, (), "output only these fields, can be specified multiple times", "f", True),
    _Flag("field-list", bool, False, "list available fields"),
    _Flag("page-view", bool, False, "use page view format"),
    _Flag("template", str, "", "go template string to output in specified format", "t"),
)

_ARCHITECTURES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}

_TEMPLATE_ESCAPES = re.compile(r"\\[tn]")


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def combine_hooks(*hooks: Callable[..., Any]) -> Callable[..., None]:
    """Return one hook that runs ``hooks`` in order, stopping at the first error."""

    def run(*args: Any, **kwargs: Any) -> None:
        for hook in hooks:
            hook(*args, **kwargs)

    return run


def parse_labels(labels: Iterable[str]) -> Dict[str, str]:
    """Parse ``key=value`` strings into a dict, trimming spaces around both parts."""
    result: Dict[str, str] = {}
    for label in labels:
        key, sep, value = label.partition("=")
        if not sep:
            raise CommandError(f"invalid label format: {label}")
        result[key.strip()] = value.strip()
    return result


def read_input_json(path: Optional[str], stream: Optional[IO[Any]] = None) -> Any:
    """Read one JSON value from ``path``, or from ``stream`` when path is empty or ``-``."""
    if path and path != "-":
        try:
            with open(path, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            raise CommandError(f"failed to open file: {exc}") from exc
    else:
        source = sys.stdin if stream is None else stream
        text = source.read()
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    try:
        value, _ = json.JSONDecoder().raw_decode(text.lstrip())
    except ValueError as exc:
        raise CommandError(f"could not parse JSON: {exc}") from exc
    return value


def user_agent(version: str) -> str:
    """Return the User-Agent string sent with API requests."""
    system = platform.system().lower() or "unknown"
    machine = platform.machine().lower()
    arch = _ARCHITECTURES.get(machine, machine or "unknown")
    return f"srvctl/{version} ({system} {arch})"


def find_entity(command_chain: Sequence[str], entities: Mapping[str, Any]) -> Any:
    """Find the entity for a command.

    ``command_chain`` holds command names from the root down to the running
    command; the nearest name with an entity wins.
    """
    for name in reversed(list(command_chain)):
        if name in entities:
            return entities[name]
    return None


def setup_proxy(
    proxy: Optional[str], environ: Optional[MutableMapping[str, str]] = None
) -> Optional[str]:
    """Export ``proxy`` as HTTPS_PROXY or HTTP_PROXY; return the variable set."""
    if not proxy:
        return None
    env = os.environ if environ is None else environ
    name = "HTTPS_PROXY" if proxy.startswith("https") else "HTTP_PROXY"
    env[name] = proxy
    return name


def check_no_args(command_path: str, args: Sequence[str]) -> None:
    """Reject positional arguments for commands that take none."""
    if args:
        help_text = f"Run '{command_path} --help' for usage."
        raise CommandError(
            f"unknown command {_quote(args[0])} for {_quote(command_path)}\n{help_text}"
        )


def check_output_format(output: str) -> str:
    """Return ``output`` if it names a supported format."""
    if output not in OUTPUT_FORMATS:
        raise CommandError(
            f"invalid output {_quote(output)}, allowed values: json, text, yaml"
        )
    return output


def normalize_template(template: str) -> str:
    """Trim spaces and turn literal ``\\t`` and ``\\n`` into tab and newline."""
    trimmed = template.strip(" ")
    return _TEMPLATE_ESCAPES.sub(
        lambda match: "\t" if match.group()[1] == "t" else "\n", trimmed
    )


def config_from_environment(
    environ: Optional[Mapping[str, str]] = None, context: str = ""
) -> Optional[Dict[str, Any]]:
    """Build a config from SC_TOKEN/SC_ENDPOINT when no context is requested.

    Returns ``None`` when the config file should be used instead.
    """
    env = os.environ if environ is None else environ
    token = env.get("SC_TOKEN", "")
    endpoint = env.get("SC_ENDPOINT", "")
    if not token or context:
        return None
    contexts: List[Dict[str, Any]] = [
        {"name": "default", "token": token, "endpoint": endpoint or ENDPOINT}
    ]
    return {"default_context": "default", "contexts": contexts}