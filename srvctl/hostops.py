"""Per-host-type operations: get, power, reinstall, update and release."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from .common import CommandError, parse_labels
from .dedicated import build_network_input

POWER_ACTIONS = ("on", "off", "cycle")


@dataclass(frozen=True)
class _KindSpec:
    entity_name: str
    short_desc: str
    type_flag: str
    suffix: str
    power_feeds: Optional[str] = None
    reinstall: Optional[str] = None
    release: Optional[str] = None
    abort_release: Optional[str] = None


class HostKind(Enum):
    """A host type with its own set of API operations.

    The value is the sub-command name of the type. ``client`` arguments are
    API clients exposing one method per operation, named after the operation
    and the host type (``get_dedicated_server``, ``power_on_sbm_server``...).
    """

    DEDICATED_SERVER = "ds"
    KUBERNETES_BAREMETAL_NODE = "kbm"
    SBM_SERVER = "sbm"

    @property
    def _spec(self) -> _KindSpec:
        return _SPECS[self]

    @property
    def use(self) -> str:
        return self.value

    @property
    def entity_name(self) -> str:
        return self._spec.entity_name

    @property
    def short_desc(self) -> str:
        return self._spec.short_desc

    @property
    def type_flag(self) -> str:
        return self._spec.type_flag

    @property
    def can_reinstall(self) -> bool:
        return self._spec.reinstall is not None

    @property
    def can_release(self) -> bool:
        return self._spec.release is not None

    def _call(self, client: Any, method: Optional[str], operation: str, *args: Any) -> Any:
        if method is None:
            raise CommandError(f"{operation} is not supported for {self.entity_name}")
        return getattr(client, method)(*args)

    def get(self, client: Any, host_id: str) -> Any:
        """Fetch one host by id."""
        return self._call(client, f"get_{self._spec.suffix}", "get", host_id)

    def power(self, client: Any, host_id: str, action: str) -> Any:
        """Send a power command: ``on``, ``off`` or ``cycle``."""
        if action not in POWER_ACTIONS:
            raise CommandError(f"unsupported power action: {action}")
        return self._call(client, f"power_{action}_{self._spec.suffix}", "power", host_id)

    def list_power_feeds(self, client: Any, host_id: str) -> Any:
        """List power feeds; ``None`` for types the API has no feeds for."""
        method = self._spec.power_feeds
        if method is None:
            return None
        return getattr(client, method)(host_id)

    def reinstall(self, client: Any, host_id: str, payload: Any) -> Any:
        """Reinstall the operating system with the given input document."""
        if not self.can_reinstall:
            raise CommandError(f"reinstall is not supported for {self.entity_name}")
        if not isinstance(payload, Mapping):
            raise CommandError(f"invalid input type for {self.entity_name.lower()}")
        return self._call(client, self._spec.reinstall, "reinstall", host_id, dict(payload))

    def update(self, client: Any, host_id: str, labels: Iterable[str]) -> Any:
        """Replace the host labels with ``key=value`` strings."""
        body: Dict[str, Any] = {"labels": parse_labels(labels)}
        return self._call(client, f"update_{self._spec.suffix}", "update", host_id, body)

    def release(self, client: Any, host_id: str) -> Any:
        """Release the host (scheduled release for dedicated servers)."""
        return self._call(client, self._spec.release, "release", host_id)

    def abort_release(self, client: Any, host_id: str) -> Any:
        """Abort a scheduled release."""
        return self._call(client, self._spec.abort_release, "abort-release", host_id)


_SPECS: Dict[HostKind, _KindSpec] = {
    HostKind.DEDICATED_SERVER: _KindSpec(
        entity_name="Dedicated servers",
        short_desc="Manage dedicated servers",
        type_flag="dedicated_server",
        suffix="dedicated_server",
        power_feeds="dedicated_server_power_feeds",
        reinstall="reinstall_operating_system_for_dedicated_server",
        release="schedule_release_for_dedicated_server",
        abort_release="abort_release_for_dedicated_server",
    ),
    HostKind.KUBERNETES_BAREMETAL_NODE: _KindSpec(
        entity_name="Kubernetes baremetal nodes",
        short_desc="Manage kubernetes baremetal nodes",
        type_flag="kubernetes_baremetal_node",
        suffix="kubernetes_baremetal_node",
    ),
    HostKind.SBM_SERVER: _KindSpec(
        entity_name="Scalable baremetal servers",
        short_desc="Manage scalable baremetal servers",
        type_flag="sbm_server",
        suffix="sbm_server",
        reinstall="reinstall_operating_system_for_sbm_server",
        release="release_sbm_server",
    ),
}


def add_network(
    client: Any,
    host_id: str,
    network_type: str,
    distribution_method: str = "gateway",
    mask: int = 0,
) -> Any:
    """Validate and add a public or private IPv4 network to a dedicated server."""
    body = build_network_input(network_type, distribution_method, mask)
    if network_type == "public":
        return client.add_dedicated_server_public_ipv4_network(host_id, body)
    return client.add_dedicated_server_private_ipv4_network(host_id, body)