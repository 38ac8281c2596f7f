from datetime import datetime

import pytest

from azsnap.errors import AzCommandError
from azsnap.models import DiskRef, RunConfig, VMRef

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45)
FIXED_TS = "20240501123045"


class FakeDiskService:
    """In-memory stand-in for AzureCliDiskService that records every call."""

    def __init__(self, vms=None, snapshots=None, fail_creates=None, session=None, subscription_error=None,
                 vm_errors=None, snapshot_errors=None):
        self.vms = vms or {}
        self.vm_errors = vm_errors or {}
        self.snapshot_errors = snapshot_errors or {}
        self.snapshots = set(snapshots or [])
        self.fail_creates = fail_creates or {}
        self.session = session if session is not None else {"id": "sub-1", "name": "Test Subscription"}
        self.subscription_error = subscription_error
        self.calls = []

    def get_current_session(self):
        self.calls.append(("get_current_session",))
        return self.session

    def get_subscription(self, subscription_id):
        self.calls.append(("get_subscription", subscription_id))
        if self.subscription_error:
            raise AzCommandError("az rest", self.subscription_error)
        return {"subscriptionId": subscription_id}

    def get_vm(self, name, resource_group):
        self.calls.append(("get_vm", name, resource_group))
        if name in self.vm_errors:
            raise AzCommandError("az vm show", self.vm_errors[name])
        return self.vms.get(name)

    def get_snapshot(self, name, resource_group):
        self.calls.append(("get_snapshot", name, resource_group))
        for disk_name, message in self.snapshot_errors.items():
            if name.startswith(f"{disk_name}-snapshot-"):
                raise AzCommandError("az snapshot show", message)
        if name in self.snapshots:
            return {"name": name}
        return None

    def create_snapshot(self, name, resource_group, source_disk_id, location, tags=None):
        self.calls.append(("create_snapshot", name, resource_group, source_disk_id, location))
        for disk_name, message in self.fail_creates.items():
            if name.startswith(f"{disk_name}-snapshot-"):
                raise AzCommandError("az snapshot create", message)
        self.snapshots.add(name)
        return {"name": name}

    def calls_named(self, method):
        return [call for call in self.calls if call[0] == method]


def make_vm(name="vm1", os_disk="osdisk1", data_disks=("data1",)):
    return VMRef(
        name=name,
        resource_group="rg1",
        location="eastus",
        os_disk=DiskRef(name=os_disk, disk_id=f"/disks/{os_disk}"),
        data_disks=[DiskRef(name=d, disk_id=f"/disks/{d}", lun=i) for i, d in enumerate(data_disks)],
    )


def make_config(vm_names=("vm1",), multi_vm=False, ticket="TIX123"):
    return RunConfig(
        vm_names=list(vm_names),
        resource_group="rg1",
        ticket_number=ticket,
        snapshot_resource_group="rg1",
        multi_vm=multi_vm,
    )


@pytest.fixture
def fixed_now(monkeypatch):
    import azsnap.orchestrator as orchestrator

    class FixedDatetime(datetime):
        @classmethod
        def now(cls, tz=None):
            return FIXED_NOW

    monkeypatch.setattr(orchestrator, "datetime", FixedDatetime)
    return FIXED_NOW
