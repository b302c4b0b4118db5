"""
Configuration dataclass for a single block wait.

Values are layered, later sources win:
    defaults -> environment -> TOML file -> key=value assignments -> CLI flags
"""

import math
import os
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any

import toml

from blockawait.config.constants import (
    DEFAULT_DEADLINE,
    DEFAULT_OFFSET,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RPC_TIMEOUT,
    DEFAULT_RPC_URL,
    ENV_NODE_KIND,
    ENV_RPC_URL,
    NodeKind,
)
from blockawait.request import AwaitRequest

TOML_TABLE = "await"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when a configuration value cannot be parsed or is out of range."""


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def _parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(f"{key}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key}: expected an integer, got {value!r}") from e


def _parse_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{key}: expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key}: expected a number, got {value!r}") from e


def _parse_positive_float(key: str, value: Any) -> float:
    number = _parse_float(key, value)
    if not (number > 0 and math.isfinite(number)):
        raise ConfigError(f"{key}: expected a positive number, got {value!r}")
    return number


def _parse_timeout(key: str, value: Any) -> float | None:
    # An empty or zero timeout means "wait forever", same as leaving it unset.
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    timeout = _parse_float(key, value)
    if math.isnan(timeout):
        raise ConfigError(f"{key}: expected a number, got {value!r}")
    return timeout if timeout > 0 else None


def _parse_node_kind(key: str, value: Any) -> NodeKind:
    try:
        return NodeKind(str(value).strip().lower())
    except ValueError as e:
        choices = ", ".join(k.value for k in NodeKind)
        raise ConfigError(f"{key}: unknown node kind {value!r} (expected one of {choices})") from e


_PARSERS = {
    "offset": _parse_int,
    "sleep_interval": _parse_float,
    "timeout": _parse_timeout,
    "emit_log": _parse_bool,
    "rpc_url": lambda _key, value: str(value),
    "node_kind": _parse_node_kind,
    "rpc_timeout": _parse_positive_float,
}


@dataclass
class AwaitConfig:
    offset: int = field(default=DEFAULT_OFFSET)
    sleep_interval: float = field(default=DEFAULT_POLL_INTERVAL)
    timeout: float | None = field(default=DEFAULT_DEADLINE)
    emit_log: bool = field(default=True)
    rpc_url: str = field(default=DEFAULT_RPC_URL)
    node_kind: NodeKind = field(default=NodeKind.Casper)
    rpc_timeout: float = field(default=DEFAULT_RPC_TIMEOUT)

    def merge(self, values: Mapping[str, Any]) -> "AwaitConfig":
        """
        Return a copy with the recognised keys of `values` parsed and applied.

        Unknown keys are ignored and `None` values are treated as "not given".
        """
        known = {f.name for f in fields(self)}
        updates = {}
        for key, value in values.items():
            if key not in known or value is None:
                continue
            updates[key] = _PARSERS[key](key, value)
        return replace(self, **updates)

    def merge_env(self, environ: Mapping[str, str] | None = None) -> "AwaitConfig":
        environ = os.environ if environ is None else environ
        return self.merge(
            {
                "rpc_url": environ.get(ENV_RPC_URL),
                "node_kind": environ.get(ENV_NODE_KIND),
            }
        )

    def merge_toml_file(self, path: str) -> "AwaitConfig":
        try:
            with open(path) as f:
                doc = toml.load(f)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"cannot read config file {path}: {e}") from e

        table = doc.get(TOML_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigError(f"{path}: [{TOML_TABLE}] must be a table")
        return self.merge(table)

    def merge_assignments(self, assignments: Iterable[str]) -> "AwaitConfig":
        return self.merge(parse_assignments(assignments))

    def to_request(self) -> AwaitRequest:
        """Build the immutable request consumed by the awaiter."""
        try:
            return AwaitRequest(
                offset=self.offset,
                poll_interval=self.sleep_interval,
                deadline=self.timeout,
                emit_log=self.emit_log,
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def as_toml_string(self) -> str:
        d = asdict(self)
        d["node_kind"] = str(self.node_kind)
        # Remove None values (optional configs)
        d = {k: v for k, v in d.items() if v is not None}
        return toml.dumps({TOML_TABLE: d})


def parse_assignments(assignments: Iterable[str]) -> dict[str, str]:
    """
    Split `key=value` tokens into a dict.

    Tokens without `=` are skipped. The value is everything after the first `=`.
    """
    out = {}
    for arg in assignments:
        key, sep, value = arg.partition("=")
        if not sep:
            continue
        out[key.strip()] = value.strip()
    return out


def load_config(
    config_file: str | None = None,
    assignments: Iterable[str] = (),
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> AwaitConfig:
    cfg = AwaitConfig().merge_env(environ)
    if config_file:
        cfg = cfg.merge_toml_file(config_file)
    cfg = cfg.merge_assignments(assignments)
    if overrides:
        cfg = cfg.merge(overrides)
    return cfg
