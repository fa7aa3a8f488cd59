import pytest

from srvctl.common import CommandError
from srvctl.settings import (
    KNOWN_CONFIG_FLAGS,
    build_final_config,
    check_context_deletable,
    disable_flag_names,
    fill_config_options,
)

FLAG_TYPES = {
    "config": str,
    "context": str,
    "proxy": str,
    "http-timeout": int,
    "verbose": bool,
    "output": str,
    "no-header": bool,
}


def _resolver(context_config, cli=None, defaults=None):
    defaults = defaults or {"proxy": "", "http-timeout": 30, "verbose": False, "output": "text"}
    cli = cli or {}

    def resolve(name, kind):
        for level in (cli, context_config, defaults):
            if name in level:
                return level[name]
        raise KeyError(name)

    return resolve


def test_disable_flag_names():
    assert disable_flag_names() == {
        "no-proxy": "Disable proxy configuration",
        "no-http-timeout": "Disable http-timeout configuration",
        "no-verbose": "Disable verbose configuration",
        "no-output": "Disable output configuration",
    }


def test_fill_config_options_update_case():
    options = fill_config_options({"http-timeout": 100, "no-proxy": True})
    assert options == {"http-timeout": 100, "proxy": None}


def test_fill_config_options_ignores_unknown_flags():
    options = fill_config_options({"config": "/tmp/x", "verbose": True, "output": "json"})
    assert options == {"verbose": True, "output": "json"}


def test_fill_config_options_value_wins_over_disable():
    options = fill_config_options({"proxy": "http://proxy.example.com", "no-proxy": True})
    assert options == {"proxy": "http://proxy.example.com"}


def test_fill_config_options_any_no_flag_disables():
    assert fill_config_options({"no-header": True}) == {"header": None}


def test_build_final_config_from_context():
    resolve = _resolver({"http-timeout": 99, "proxy": "https://test-proxy.com"})
    assert build_final_config(FLAG_TYPES, resolve) == {
        "http-timeout": 99,
        "output": "text",
        "proxy": "https://test-proxy.com",
        "verbose": False,
    }


def test_build_final_config_with_flag_override():
    resolve = _resolver(
        {"http-timeout": 99, "proxy": "https://test-proxy.com"}, cli={"http-timeout": 100}
    )
    final = build_final_config(FLAG_TYPES, resolve)
    assert final["http-timeout"] == 100
    assert final["proxy"] == "https://test-proxy.com"


def test_build_final_config_only_known_flags():
    final = build_final_config(FLAG_TYPES, _resolver({}))
    assert set(final) == set(KNOWN_CONFIG_FLAGS)


def test_build_final_config_unresolved_uses_zero_value():
    def resolve(name, kind):
        raise KeyError(name)

    assert build_final_config({"http-timeout": "int", "verbose": "bool", "proxy": "string"}, resolve) == {
        "http-timeout": 0,
        "proxy": "",
        "verbose": False,
    }


def test_delete_non_default_context():
    assert check_context_deletable("test", False, False) == "test"


def test_delete_default_context_without_force():
    with pytest.raises(CommandError, match="without --force"):
        check_context_deletable("default", True, False)


def test_delete_default_context_with_force():
    assert check_context_deletable("default", True, True) == "default"