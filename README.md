# srvctl

`srvctl` is a pure-Python library with the pieces a command-line client for a
dedicated-server hosting API needs: list filtering and paging, host
operations for dedicated servers, Kubernetes baremetal nodes and scalable
baremetal servers, drive layout parsing, network and PTR request building,
and configuration and context checks.

It has no runtime dependencies outside the standard library and needs
Python 3.10 or newer. Errors meant for the user are raised as
`srvctl.common.CommandError`.

## Modules

| Module              | What it provides |
|---------------------|------------------|
| `srvctl.listing`    | `Collection`, `FilterOption` and ready-made filters (`LABEL_SELECTOR`, `SEARCH_PATTERN`, `LOCATION_ID`, ...), `BaseListOptions`, `HostListOptions`, `filter_options`, `apply_filters`, `fetch_items`, `list_aliases`, `ENDPOINT` |
| `srvctl.common`     | `CommandError`, `combine_hooks`, `parse_labels`, `read_input_json`, `user_agent`, `find_entity`, `setup_proxy`, `check_no_args`, `check_output_format`, `normalize_template`, `config_from_environment` |
| `srvctl.layout`     | `SlotInput`, `LayoutPartition`, `LayoutInput`, `ParsedPartition`, `parse_drive_slots`, `parse_layout`, `parse_partitions`, `merge_layouts`, `apply_partitions` |
| `srvctl.dedicated`  | `AddDSFlags`, `apply_flags_to_input`, `build_create_input`, `is_valid_mask`, `validate_network_args`, `build_network_input`, `build_ptr_input` |
| `srvctl.hostops`    | `HostKind` (`get`, `power`, `list_power_feeds`, `reinstall`, `update`, `release`, `abort_release`) and `add_network` |
| `srvctl.settings`   | `KNOWN_CONFIG_FLAGS`, `disable_flag_names`, `fill_config_options`, `build_final_config`, `check_context_deletable` |

## Listing

A `Collection` wraps a function that takes the query (filters plus `page`
and `per_page`) and returns one page of items. `list()` fetches the
configured page; `collect()` walks pages from 1 until an empty page, or a
page shorter than `per_page`.

```python
from srvctl.listing import Collection, BaseListOptions, LABEL_SELECTOR, apply_filters, fetch_items

collection = Collection(lambda query: api_get("/hosts", query))
BaseListOptions(per_page=50, sorting="title", direction="asc").apply(collection)
apply_filters(collection, [LABEL_SELECTOR], {"label-selector": "env=prod"})
items = fetch_items(collection, all_pages=True)
```

`direction` is sent upper-cased; options left at their zero value are not
sent.

## Labels, layouts and networks

```python
from srvctl.common import parse_labels

parse_labels(["env = prod", "team=ops"])
# {'env': 'prod', 'team': 'ops'}
```

A label without `=` raises `CommandError`.

Drive layouts and partitions use comma-separated `key=value` strings:

```python
from srvctl.layout import parse_layout, parse_partitions, apply_partitions

layouts = parse_layout(["slot=1,slot=2,raid=1"])
partitions = parse_partitions(["slot=1,slot=2,target=/boot,fs=ext4,size=500"])
apply_partitions(layouts, partitions)
```

A layout must name at least one slot and a RAID level; a partition must name
its slots, and they must match a layout's slots exactly. A partition with
the same target as an existing one replaces it. `merge_layouts` joins a new
layout into an existing one that shares a slot, otherwise appends it.

`build_create_input` and `apply_flags_to_input` work on the create request
as a plain dictionary; fields of `AddDSFlags` left as `None` leave it
untouched.

Networks are checked before a request body is built: private networks use
the `gateway` method with a mask of 26 to 29, public `gateway` networks the
same masks, and public `route` networks a mask of 32.

```python
from srvctl.dedicated import is_valid_mask, validate_network_args

is_valid_mask(28)                                  # True
validate_network_args("public", "route", 32)       # accepted
validate_network_args("private", "route", 29)      # raises CommandError
```

## Host operations

`HostKind.DEDICATED_SERVER`, `HostKind.KUBERNETES_BAREMETAL_NODE` and
`HostKind.SBM_SERVER` call methods of an API client object you supply,
named after the operation and the host type, for example
`get_dedicated_server(host_id)` or `power_cycle_sbm_server(host_id)`.
Power actions are `on`, `off` and `cycle`. Only dedicated servers have power
feeds (`list_power_feeds` returns `None` for the others) and abort-release;
Kubernetes baremetal nodes cannot be reinstalled or released.

## Configuration

`fill_config_options` turns the flags given to an update into config
options: `no-<option>` maps the option to `None`, unknown flags are dropped.
`build_final_config` resolves each known option through a callback.
A default context can only be deleted when forced:

```python
from srvctl.settings import check_context_deletable

check_context_deletable("test", is_default=False, force=False)   # returns "test"
check_context_deletable("default", is_default=True, force=False) # raises CommandError
```

`config_from_environment` builds a single `default` context from `SC_TOKEN`
and `SC_ENDPOINT` when no context is named, falling back to `ENDPOINT` when
`SC_ENDPOINT` is unset; it returns `None` otherwise. `setup_proxy` sets
`HTTPS_PROXY` for proxy URLs starting with `https` and `HTTP_PROXY`
otherwise.

## What it does not do

The package has no command-line program of its own, no HTTP client for the
API, no reading or writing of config files, and no output formatting (text,
JSON, YAML or templates). It supplies the checks and request building those
parts call on; the API client and the page-fetching function are yours to
provide.

## Running the tests

Install the `test` extra and run `pytest` from the project root.