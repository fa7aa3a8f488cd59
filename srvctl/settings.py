"""Configuration commands: config options, the final config and context deletion."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from .common import CommandError

KNOWN_CONFIG_FLAGS = ("proxy", "http-timeout", "verbose", "output")

_DISABLE_PREFIX = "no-"

_ZERO_VALUES: Dict[type, Any] = {bool: False, int: 0, str: ""}


def _kind_of(kind: Any) -> type:
    """Map a flag type (a Python type or its flag-library name) to a type."""
    if isinstance(kind, type):
        return kind if kind in (bool, int) else str
    return {"bool": bool, "int": int}.get(str(kind), str)


def _coerce(kind: type, value: Any) -> Any:
    if kind is bool:
        return bool(value)
    if kind is int:
        return int(value)
    return "" if value is None else str(value)


def disable_flag_names() -> Dict[str, str]:
    """Return the ``no-<option>`` flags of the update command with their help."""
    return {
        f"{_DISABLE_PREFIX}{name}": f"Disable {name} configuration"
        for name in KNOWN_CONFIG_FLAGS
    }


def fill_config_options(changed: Mapping[str, Any]) -> Dict[str, Any]:
    """Turn the flags given on the command line into config options.

    ``changed`` maps the name of every flag that was set to its value. A
    ``no-<option>`` flag maps ``<option>`` to ``None`` (remove it); other flags
    are kept only if they are known config options. Flags are visited in name
    order, so an explicit value wins over its ``no-`` flag.
    """
    options: Dict[str, Any] = {}
    for name in sorted(changed):
        if name.startswith(_DISABLE_PREFIX):
            options[name[len(_DISABLE_PREFIX):]] = None
            continue
        if name not in KNOWN_CONFIG_FLAGS:
            continue
        value = changed[name]
        if isinstance(value, bool):
            options[name] = value
        elif isinstance(value, int):
            options[name] = value
        else:
            options[name] = "" if value is None else str(value)
    return options


def build_final_config(
    flag_types: Mapping[str, Any], resolve: Callable[[str, type], Any]
) -> Dict[str, Any]:
    """Resolve every known config option among ``flag_types``.

    ``flag_types`` maps flag names to their type; ``resolve(name, kind)``
    returns the value after merging global, context and command-line levels.
    A value that cannot be resolved falls back to the type's zero value.
    """
    final: Dict[str, Any] = {}
    for name in sorted(flag_types):
        if name not in KNOWN_CONFIG_FLAGS:
            continue
        kind = _kind_of(flag_types[name])
        try:
            final[name] = _coerce(kind, resolve(name, kind))
        except (LookupError, TypeError, ValueError, CommandError):
            final[name] = _ZERO_VALUES[kind]
    return final


def check_context_deletable(context_name: str, is_default: bool, force: bool) -> str:
    """Return ``context_name`` if it may be deleted.

    The default context is only deleted with ``force``.
    """
    if is_default and not force:
        raise CommandError("cannot delete default context without --force flag")
    return context_name