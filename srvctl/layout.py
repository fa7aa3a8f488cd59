"""Drive slot, layout and partition parsing for dedicated server creation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .common import CommandError

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _atoi(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(text)
    return int(text)


def _pairs(spec: str) -> Iterator[Tuple[str, str]]:
    for part in spec.split(","):
        key, sep, value = part.partition("=")
        if sep:
            yield key, value


def _format_ints(values: Sequence[int]) -> str:
    return "[" + " ".join(str(value) for value in values) + "]"


@dataclass
class SlotInput:
    """A drive model placed in one slot."""

    position: int
    drive_model_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position, "drive_model_id": self.drive_model_id}


@dataclass
class LayoutPartition:
    """One partition of a drive layout."""

    target: str = ""
    size: int = 0
    fs: Optional[str] = None
    fill: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"target": self.target, "size": self.size, "fill": self.fill}
        if self.fs is not None:
            data["fs"] = self.fs
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutPartition":
        return cls(
            target=data.get("target", "") or "",
            size=int(data.get("size") or 0),
            fs=data.get("fs"),
            fill=bool(data.get("fill", False)),
        )


@dataclass
class LayoutInput:
    """A RAID layout over a set of slots, with its partitions."""

    slot_positions: List[int] = field(default_factory=list)
    raid: Optional[int] = None
    partitions: List[LayoutPartition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot_positions": list(self.slot_positions),
            "raid": self.raid,
            "partitions": [partition.to_dict() for partition in self.partitions],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutInput":
        return cls(
            slot_positions=[int(slot) for slot in data.get("slot_positions") or []],
            raid=data.get("raid"),
            partitions=[
                LayoutPartition.from_dict(item) for item in data.get("partitions") or []
            ],
        )


@dataclass
class ParsedPartition:
    """A partition together with the slots of the layout it belongs to."""

    slots: List[int] = field(default_factory=list)
    partition: LayoutPartition = field(default_factory=LayoutPartition)


def parse_drive_slots(drive_slots: Mapping[str, int]) -> List[SlotInput]:
    """Turn a ``position -> drive model id`` mapping into slot inputs."""
    slots = []
    for position, model_id in drive_slots.items():
        try:
            number = _atoi(position)
        except ValueError:
            raise CommandError(
                f"can't parse drive slot position '{position}' as integer"
            ) from None
        slots.append(SlotInput(position=number, drive_model_id=int(model_id)))
    return slots


def parse_layout(layouts: Sequence[str]) -> List[LayoutInput]:
    """Parse ``slot=N,...,raid=N`` strings into layouts."""
    result = []
    for spec in layouts:
        layout = LayoutInput()
        for key, value in _pairs(spec):
            if key == "slot":
                try:
                    layout.slot_positions.append(_atoi(value))
                except ValueError:
                    raise CommandError(
                        f"can't parse layout slot '{value}' as integer"
                    ) from None
            elif key == "raid":
                try:
                    layout.raid = _atoi(value)
                except ValueError:
                    raise CommandError(
                        f"can't parse layout raid '{value}' as integer"
                    ) from None
        if not layout.slot_positions:
            raise CommandError(f"slots not passed for layout '{spec}")
        if layout.raid is None:
            raise CommandError(f"raid not passed for layout '{spec}'")
        result.append(layout)
    return result


def parse_partitions(partitions: Sequence[str]) -> List[ParsedPartition]:
    """Parse ``slot=N,target=...,size=N,fs=...,fill=...`` strings."""
    result = []
    for spec in partitions:
        parsed = ParsedPartition()
        for key, value in _pairs(spec):
            if key == "slot":
                try:
                    parsed.slots.append(_atoi(value))
                except ValueError:
                    raise CommandError(f"invalid slot value: {value}") from None
            elif key == "target":
                parsed.partition.target = value
            elif key == "size":
                try:
                    parsed.partition.size = _atoi(value)
                except ValueError:
                    raise CommandError(f"invalid size: {value}") from None
            elif key == "fs":
                parsed.partition.fs = value
            elif key == "fill":
                parsed.partition.fill = value.lower() == "true"
        if not parsed.slots:
            raise CommandError(f"no slot specified for partition: {spec}")
        parsed.slots.sort()
        result.append(parsed)
    return result


def merge_layouts(
    existing: List[LayoutInput], new: Sequence[LayoutInput]
) -> List[LayoutInput]:
    """Merge ``new`` into ``existing``.

    A new layout sharing a slot with an existing one adds its slots to it and
    replaces its RAID level; otherwise it is appended. ``existing`` is updated
    in place and returned.
    """
    for layout in new:
        for current in existing:
            known = set(current.slot_positions)
            if not known.intersection(layout.slot_positions):
                continue
            current.slot_positions.extend(
                slot for slot in layout.slot_positions if slot not in known
            )
            current.slot_positions.sort()
            current.raid = layout.raid
            break
        else:
            existing.append(layout)
    return existing


def apply_partitions(
    layouts: List[LayoutInput], parsed: Sequence[ParsedPartition]
) -> List[LayoutInput]:
    """Add each partition to the layout with exactly its slots.

    A partition with the same target as an existing one replaces it.
    """
    for item in parsed:
        wanted = sorted(item.slots)
        for layout in layouts:
            if sorted(layout.slot_positions) != wanted:
                continue
            for index, current in enumerate(layout.partitions):
                if current.target == item.partition.target:
                    layout.partitions[index] = item.partition
                    break
            else:
                layout.partitions.append(item.partition)
            break
        else:
            raise CommandError(
                f"can't apply partition: no layout found with slots: {_format_ints(item.slots)}"
            )
    return layouts