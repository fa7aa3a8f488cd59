import pytest

from srvctl.common import CommandError
from srvctl.hostops import HostKind, add_network

TEST_ID = "testId"


class FakeClient:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __getattr__(self, name):
        def call(*args):
            self.calls.append((name, args))
            if self.error is not None:
                raise self.error
            return self.result

        return call


DS = {"id": TEST_ID, "type": "dedicated_server", "title": "example.aa", "status": "active"}
SBM = {"id": TEST_ID, "type": "sbm_server", "title": "example.aa", "status": "active"}


@pytest.mark.parametrize(
    "kind, method",
    [
        (HostKind.DEDICATED_SERVER, "get_dedicated_server"),
        (HostKind.KUBERNETES_BAREMETAL_NODE, "get_kubernetes_baremetal_node"),
        (HostKind.SBM_SERVER, "get_sbm_server"),
    ],
)
def test_get(kind, method):
    client = FakeClient(result=DS)
    assert kind.get(client, TEST_ID) == DS
    assert client.calls == [(method, (TEST_ID,))]


def test_get_error_propagates():
    client = FakeClient(error=RuntimeError("some error"))
    with pytest.raises(RuntimeError, match="some error"):
        HostKind.DEDICATED_SERVER.get(client, TEST_ID)


def test_kind_from_use():
    assert HostKind("kbm") is HostKind.KUBERNETES_BAREMETAL_NODE
    assert HostKind.SBM_SERVER.type_flag == "sbm_server"
    assert HostKind.DEDICATED_SERVER.entity_name == "Dedicated servers"


@pytest.mark.parametrize(
    "kind, action, method",
    [
        (HostKind.DEDICATED_SERVER, "on", "power_on_dedicated_server"),
        (HostKind.DEDICATED_SERVER, "off", "power_off_dedicated_server"),
        (HostKind.KUBERNETES_BAREMETAL_NODE, "cycle", "power_cycle_kubernetes_baremetal_node"),
        (HostKind.SBM_SERVER, "on", "power_on_sbm_server"),
    ],
)
def test_power(kind, action, method):
    client = FakeClient(result="ok")
    assert kind.power(client, TEST_ID, action) == "ok"
    assert client.calls == [(method, (TEST_ID,))]


def test_power_unsupported_action():
    client = FakeClient()
    with pytest.raises(CommandError, match="unsupported power action: reboot"):
        HostKind.SBM_SERVER.power(client, TEST_ID, "reboot")
    assert client.calls == []


def test_power_feeds():
    client = FakeClient(result=[{"name": "feed"}])
    assert HostKind.DEDICATED_SERVER.list_power_feeds(client, TEST_ID) == [{"name": "feed"}]
    assert client.calls == [("dedicated_server_power_feeds", (TEST_ID,))]
    other = FakeClient(result=[1])
    assert HostKind.SBM_SERVER.list_power_feeds(other, TEST_ID) is None
    assert other.calls == []


def test_reinstall_ds():
    client = FakeClient(result=DS)
    payload = {"hostname": "example.aa", "operating_system_id": 1}
    assert HostKind.DEDICATED_SERVER.reinstall(client, TEST_ID, payload) == DS
    assert client.calls == [
        ("reinstall_operating_system_for_dedicated_server", (TEST_ID, payload))
    ]


def test_reinstall_invalid_input():
    with pytest.raises(CommandError, match="invalid input type"):
        HostKind.SBM_SERVER.reinstall(FakeClient(), TEST_ID, [1, 2])


def test_reinstall_unsupported_for_kbm():
    assert HostKind.KUBERNETES_BAREMETAL_NODE.can_reinstall is False
    with pytest.raises(CommandError):
        HostKind.KUBERNETES_BAREMETAL_NODE.reinstall(FakeClient(), TEST_ID, {})


@pytest.mark.parametrize(
    "kind, method",
    [
        (HostKind.DEDICATED_SERVER, "update_dedicated_server"),
        (HostKind.KUBERNETES_BAREMETAL_NODE, "update_kubernetes_baremetal_node"),
        (HostKind.SBM_SERVER, "update_sbm_server"),
    ],
)
def test_update_with_labels(kind, method):
    updated = dict(DS, labels={"new": "label"})
    client = FakeClient(result=updated)
    assert kind.update(client, TEST_ID, ["new=label"]) == updated
    assert client.calls == [(method, (TEST_ID, {"labels": {"new": "label"}}))]


def test_update_without_labels_sends_empty_map_and_propagates_error():
    client = FakeClient(error=RuntimeError("some error"))
    with pytest.raises(RuntimeError):
        HostKind.SBM_SERVER.update(client, TEST_ID, [])
    assert client.calls == [("update_sbm_server", (TEST_ID, {"labels": {}}))]


def test_update_bad_label():
    client = FakeClient()
    with pytest.raises(CommandError, match="invalid label format: bad"):
        HostKind.DEDICATED_SERVER.update(client, TEST_ID, ["bad"])
    assert client.calls == []


def test_schedule_release_ds():
    released = dict(DS, scheduled_release="2025-01-01T12:00:00Z")
    client = FakeClient(result=released)
    assert HostKind.DEDICATED_SERVER.release(client, TEST_ID) == released
    assert client.calls == [("schedule_release_for_dedicated_server", (TEST_ID,))]


def test_abort_release_ds():
    client = FakeClient(result=DS)
    assert HostKind.DEDICATED_SERVER.abort_release(client, TEST_ID) == DS
    assert client.calls == [("abort_release_for_dedicated_server", (TEST_ID,))]


def test_release_sbm():
    client = FakeClient(result=SBM)
    assert HostKind.SBM_SERVER.release(client, TEST_ID) == SBM
    assert client.calls == [("release_sbm_server", (TEST_ID,))]


def test_release_sbm_error():
    with pytest.raises(RuntimeError, match="some error"):
        HostKind.SBM_SERVER.release(FakeClient(error=RuntimeError("some error")), TEST_ID)


def test_release_unsupported_for_kbm():
    with pytest.raises(CommandError):
        HostKind.KUBERNETES_BAREMETAL_NODE.release(FakeClient(), TEST_ID)


def test_add_public_network():
    client = FakeClient(result={"id": "testNetId"})
    assert add_network(client, TEST_ID, "public", "route", 32) == {"id": "testNetId"}
    assert client.calls == [
        (
            "add_dedicated_server_public_ipv4_network",
            (TEST_ID, {"distribution_method": "route", "mask": 32}),
        )
    ]


def test_add_private_network():
    client = FakeClient(result={"id": "testNetId"})
    assert add_network(client, TEST_ID, "private", "gateway", 29) == {"id": "testNetId"}
    assert client.calls == [
        (
            "add_dedicated_server_private_ipv4_network",
            (TEST_ID, {"distribution_method": "gateway", "mask": 29}),
        )
    ]


def test_add_network_unsupported_mask():
    client = FakeClient()
    with pytest.raises(CommandError, match="must be: 26, 27, 28, or 29"):
        add_network(client, TEST_ID, "public", "gateway", 24)
    assert client.calls == []