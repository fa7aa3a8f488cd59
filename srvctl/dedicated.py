"""Dedicated server creation input, network and PTR record request building."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .common import CommandError
from .layout import (
    LayoutInput,
    apply_partitions,
    merge_layouts,
    parse_drive_slots,
    parse_layout,
    parse_partitions,
)

NETWORK_TYPES = ("public", "private")


@dataclass
class AddDSFlags:
    """Flags of the dedicated server ``add`` command.

    A field left as ``None`` was not given on the command line and leaves the
    input untouched.
    """

    input_path: Optional[str] = None
    location_id: Optional[int] = None
    server_model_id: Optional[int] = None
    operating_system_id: Optional[int] = None
    features: Optional[List[str]] = None
    ram_size: Optional[int] = None
    public_uplink_id: Optional[int] = None
    public_bandwidth_id: Optional[int] = None
    private_uplink_id: Optional[int] = None
    drive_slots: Optional[Mapping[str, int]] = None
    layout: Optional[List[str]] = None
    partitions: Optional[List[str]] = None
    ipv6: Optional[bool] = None
    user_data_file: Optional[str] = None
    user_data: Optional[str] = None
    labels: Optional[Mapping[str, str]] = None


def _section(payload: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = payload.get(name)
    if not isinstance(value, dict):
        value = {}
        payload[name] = value
    return value


def _public_uplink(payload: Dict[str, Any]) -> Dict[str, Any]:
    uplinks = _section(payload, "uplink_models")
    public = uplinks.get("public")
    if not isinstance(public, dict):
        public = {}
        uplinks["public"] = public
    return public


def apply_flags_to_input(
    payload: Optional[Mapping[str, Any]], flags: AddDSFlags
) -> Dict[str, Any]:
    """Return a copy of the create input with the given flags applied on top."""
    result: Dict[str, Any] = copy.deepcopy(dict(payload or {}))

    if flags.location_id is not None:
        result["location_id"] = int(flags.location_id)
    if flags.server_model_id is not None:
        result["server_model_id"] = int(flags.server_model_id)
    if flags.operating_system_id is not None:
        result["operating_system_id"] = int(flags.operating_system_id)
    if flags.features is not None:
        result["features"] = list(flags.features)
    if flags.ram_size is not None:
        result["ram_size"] = int(flags.ram_size)
    if flags.public_uplink_id is not None:
        _public_uplink(result)["id"] = int(flags.public_uplink_id)
    if flags.public_bandwidth_id is not None:
        _public_uplink(result)["bandwidth_model_id"] = int(flags.public_bandwidth_id)
    if flags.private_uplink_id is not None:
        uplinks = _section(result, "uplink_models")
        private = uplinks.get("private")
        if not isinstance(private, dict):
            private = {}
            uplinks["private"] = private
        private["id"] = int(flags.private_uplink_id)

    if flags.drive_slots is not None:
        slots = parse_drive_slots(flags.drive_slots)
        _section(result, "drives")["slots"] = [slot.to_dict() for slot in slots]

    if flags.layout is not None:
        drives = _section(result, "drives")
        current = [LayoutInput.from_dict(item) for item in drives.get("layout") or []]
        merged = merge_layouts(current, parse_layout(flags.layout))
        drives["layout"] = [layout.to_dict() for layout in merged]

    if flags.partitions is not None:
        drives = _section(result, "drives")
        raw_layouts = drives.get("layout") or []
        if not raw_layouts:
            raise CommandError("partition given but layout is empty")
        layouts = [LayoutInput.from_dict(item) for item in raw_layouts]
        apply_partitions(layouts, parse_partitions(flags.partitions))
        drives["layout"] = [layout.to_dict() for layout in layouts]

    if flags.ipv6 is not None:
        result["ipv6"] = bool(flags.ipv6)

    if flags.user_data is not None and flags.user_data_file is not None:
        raise CommandError("'user-data' and 'user-data-file' can't be used together")
    if flags.user_data_file is not None:
        try:
            with open(flags.user_data_file, encoding="utf-8") as handle:
                result["user_data"] = handle.read()
        except OSError as exc:
            raise CommandError(f"can't read user-data-file: {exc}") from exc
    if flags.user_data is not None:
        result["user_data"] = flags.user_data

    if flags.labels is not None:
        for host in result.get("hosts") or []:
            labels = host.get("labels")
            if not isinstance(labels, dict):
                labels = {}
                host["labels"] = labels
            labels.update(flags.labels)

    return result


def build_create_input(
    hostnames: Sequence[str],
    payload: Optional[Mapping[str, Any]] = None,
    flags: Optional[AddDSFlags] = None,
) -> Dict[str, Any]:
    """Build the create input from an input document, hostnames and flags."""
    result: Dict[str, Any] = copy.deepcopy(dict(payload or {}))
    hosts = list(result.get("hosts") or [])
    if not hosts and not hostnames:
        raise CommandError(
            "no hosts found from positional args and no hosts found from input, "
            "can't continue"
        )
    hosts.extend({"hostname": name, "labels": {}} for name in hostnames)
    result["hosts"] = hosts
    return apply_flags_to_input(result, flags or AddDSFlags())


def is_valid_mask(mask: int) -> bool:
    """Return whether ``mask`` is allowed for a gateway network."""
    return 26 <= mask <= 29


def validate_network_args(network_type: str, distribution_method: str, mask: int) -> None:
    """Check the type, distribution method and mask of a new IPv4 network."""
    if network_type not in NETWORK_TYPES:
        raise CommandError("--type must be 'public' or 'private'")

    if network_type == "private":
        if distribution_method != "gateway":
            raise CommandError(
                "--distribution-method for private network can only be 'gateway'"
            )
        if not is_valid_mask(mask):
            raise CommandError("--mask for private network must be: 26, 27, 28, or 29")
        return

    if distribution_method == "gateway":
        if not is_valid_mask(mask):
            raise CommandError(
                "--mask for public network (gateway) must be: 26, 27, 28, or 29"
            )
    elif distribution_method == "route":
        if mask != 32:
            raise CommandError(
                "--mask for public network with distribution-method='route' must be 32"
            )
    else:
        raise CommandError(
            "--distribution-method for public network must be 'gateway' or 'route'"
        )


def build_network_input(
    network_type: str, distribution_method: str = "gateway", mask: int = 0
) -> Dict[str, Any]:
    """Validate the arguments and return the network request body."""
    validate_network_args(network_type, distribution_method, mask)
    return {"distribution_method": distribution_method, "mask": mask}


def build_ptr_input(
    ip: str, domain: str, ttl: Optional[int] = None, priority: Optional[int] = None
) -> Dict[str, Any]:
    """Return a PTR record request body; TTL and priority only when given."""
    body: Dict[str, Any] = {"ip": ip, "domain": domain}
    if ttl is not None:
        body["ttl"] = ttl
    if priority is not None:
        body["priority"] = priority
    return body