"""List command building blocks: collections, filter options and paging."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

ENDPOINT = "https://api.servers.com/v1"

PageFetcher = Callable[[Dict[str, str]], Sequence[Any]]


class Collection:
    """A paged API resource collection with query parameters.

    ``fetch_page`` receives the full query (filters plus paging) and returns
    the items of one page.
    """

    def __init__(self, fetch_page: PageFetcher) -> None:
        self._fetch_page = fetch_page
        self.params: Dict[str, str] = {}
        self.per_page: Optional[int] = None
        self.page: Optional[int] = None

    def set_param(self, name: str, value: str) -> "Collection":
        self.params[name] = value
        return self

    def set_per_page(self, per_page: int) -> "Collection":
        self.per_page = per_page
        return self

    def set_page(self, page: int) -> "Collection":
        self.page = page
        return self

    def query(self, page: Optional[int] = None) -> Dict[str, str]:
        """Return the query sent for ``page`` (or the configured page)."""
        query = dict(self.params)
        current = page if page is not None else self.page
        if current is not None:
            query["page"] = str(current)
        if self.per_page is not None:
            query["per_page"] = str(self.per_page)
        return query

    def list(self) -> List[Any]:
        """Fetch the configured page only."""
        return list(self._fetch_page(self.query()))

    def pages(self) -> Iterator[List[Any]]:
        """Yield pages from the first one until an empty or short page."""
        page = 1
        while True:
            items = list(self._fetch_page(self.query(page)))
            if not items:
                return
            yield items
            if self.per_page is not None and len(items) < self.per_page:
                return
            page += 1

    def collect(self) -> List[Any]:
        """Fetch every page and return all items."""
        return [item for items in self.pages() for item in items]


@dataclass(frozen=True)
class FilterOption:
    """A command-line filter that maps onto one collection query parameter."""

    flag: str
    param: Optional[str]
    help: str = ""
    kind: type = str
    hidden: bool = False

    def apply(self, collection: Collection, value: Any) -> Collection:
        if self.param is None or not value:
            return collection
        if self.kind is bool:
            collection.set_param(self.param, "true")
        elif self.kind is int:
            collection.set_param(self.param, str(int(value)))
        else:
            collection.set_param(self.param, str(value))
        return collection


HIDDEN_TYPE = FilterOption("type", None, hidden=True)
LABEL_SELECTOR = FilterOption("label-selector", "label_selector", "Filter results by labels")
SEARCH_PATTERN = FilterOption(
    "search-pattern", "search_pattern",
    "Return resources containing the parameter value in its name",
)
LOCATION_ID = FilterOption("location-id", "location_id", "Filter results by location ID")
CLUSTER_ID = FilterOption("cluster-id", "cluster_id", "Filter results by cluster ID")
INVOICE_STATUS = FilterOption(
    "status", "status",
    "Filter results by status (pending, outstanding, overdue, paid, canceled, reissued)",
)
INVOICE_TYPE = FilterOption("type", "type", "Filter results by type (invoice, credit_note)")
PARENT_ID = FilterOption("parent-id", "parent_id", "Filter results by parent ID")
CURRENCY = FilterOption("currency", "currency", "Filter results by currency")
START_DATE = FilterOption("start-date", "start_date", "Filter results by start date")
END_DATE = FilterOption("end-date", "end_date", "Filter results by end date")
FAMILY = FilterOption("family", "family", "Filter results by IP family (ipv4, ipv6)")
INTERFACE_TYPE = FilterOption(
    "interface-type", "interface_type",
    "Filter results by network interface type (public, private, oob)",
)
DISTRIBUTION_METHOD = FilterOption(
    "distribution-method", "distribution_method",
    "Filter results by distribution method (route, gateway)",
)
ADDITIONAL = FilterOption("additional", "additional", "Filter additional networks only", bool)
REDUNDANCY = FilterOption(
    "redundancy", "redundancy", "Filter uplinks by redundancy (true, false)", bool
)
UPLINK_TYPE = FilterOption("type", "type", "Filter uplinks by type (public, private)")
OPERATING_SYSTEM_ID = FilterOption(
    "operating-system-id", "operating_system_id",
    "Filter uplinks by operating system ID", int,
)
BANDWIDTH_TYPE = FilterOption(
    "type", "type", "Filter bandwidth options by type (bytes, bandwidth, unmetered)"
)
HAS_RAID_CONTROLLER = FilterOption(
    "has-raid-controller", "has_raid_controller",
    "Filter only servers with RAID controller", bool,
)
DRIVE_MEDIA_TYPE = FilterOption("media-type", "media_type", "Filter drives by media type (HDD, SSD")
DRIVE_INTERFACE = FilterOption(
    "interface", "interface",
    "Filter drives by interface (SATA1, SATA2, SATA3, SAS, NVMe-PCIe)",
)
SBM_FLAVORS_SHOW_ALL = FilterOption(
    "show-all", "show_all",
    "Filter to show all SBM flavors including unavailable ones", bool,
)
L2_SEGMENT_GROUP_TYPE = FilterOption(
    "group-type", "group_type", "Filter l2 location groups by type (public, private)"
)
NETWORK_POOL_TYPE = FilterOption("type", "type", "Filter network pools by type (public, private)")
ATTACHED_SUBNETWORKS = FilterOption(
    "attached", "attached",
    "Filter only subnetworks that are attached to a dedicated server", bool,
)


def filter_options(*args: FilterOption) -> Tuple[FilterOption, ...]:
    """Group filter options for one list command."""
    return tuple(args)


def apply_filters(
    collection: Collection,
    options: Sequence[FilterOption],
    values: Mapping[str, Any],
) -> Collection:
    """Apply each option using the value given under its flag name."""
    for option in options:
        option.apply(collection, values.get(option.flag))
    return collection


@dataclass
class BaseListOptions:
    """Paging and sorting options common to every list command."""

    per_page: int = 0
    page: int = 0
    sorting: str = ""
    direction: str = ""
    all_pages: bool = False

    def apply(self, collection: Collection) -> Collection:
        if self.sorting:
            collection.set_param("sort", self.sorting)
        if self.direction:
            collection.set_param("direction", self.direction.upper())
        if self.per_page > 0:
            collection.set_per_page(self.per_page)
        if self.page > 0:
            collection.set_page(self.page)
        return collection


@dataclass
class HostListOptions(BaseListOptions):
    """List options for hosts, adding rack and location filters."""

    rack_id: str = ""
    location_id: str = ""
    extra: Dict[str, str] = field(default_factory=dict)

    def apply(self, collection: Collection) -> Collection:
        super().apply(collection)
        if self.rack_id:
            collection.set_param("rack_id", self.rack_id)
        if self.location_id:
            collection.set_param("location_id", self.location_id)
        return collection


def fetch_items(collection: Collection, all_pages: bool) -> List[Any]:
    """Return every page when ``all_pages`` is set, else the current page."""
    return collection.collect() if all_pages else collection.list()


def list_aliases(use: str) -> List[str]:
    """Return command aliases: plain ``list`` commands also answer to ``ls``."""
    return ["ls"] if use == "list" else []