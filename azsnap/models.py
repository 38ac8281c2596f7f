from dataclasses import dataclass, field
from typing import List, Optional

# Disk outcomes
CREATED = "Created"
SKIPPED = "Skipped"
FAILED = "Failed"

# VM outcomes
VM_SUCCESS = "Success"
VM_FAILED = "Failed"
VM_NOT_FOUND = "VM Not Found"


@dataclass
class DiskRef:
    name: str
    disk_id: str
    lun: Optional[int] = None


@dataclass
class VMRef:
    name: str
    resource_group: str
    location: str
    os_disk: DiskRef
    data_disks: List[DiskRef] = field(default_factory=list)


@dataclass
class DiskResult:
    disk_name: str
    snapshot_name: str
    status: str
    lun: Optional[int] = None
    error: Optional[str] = None


@dataclass
class VMResult:
    vm_name: str
    status: str
    os_disk: Optional[DiskResult] = None
    data_disks: List[DiskResult] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class RunConfig:
    vm_names: List[str]
    resource_group: str
    ticket_number: str
    snapshot_resource_group: str
    multi_vm: bool = False
    tags: dict = field(default_factory=dict)


@dataclass
class RunSummary:
    """Counters and per-VM results for a single run."""

    total_vms: int = 0
    successful_vms: int = 0
    failed_vms: int = 0
    snapshots_created: int = 0
    snapshots_skipped: int = 0
    snapshots_failed: int = 0
    results: List[VMResult] = field(default_factory=list)

    def count_disk(self, result):
        if result.status == CREATED:
            self.snapshots_created += 1
        elif result.status == SKIPPED:
            self.snapshots_skipped += 1
        else:
            self.snapshots_failed += 1

    def record(self, vm_result):
        self.results.append(vm_result)
        self.total_vms += 1
        if vm_result.status == VM_SUCCESS:
            self.successful_vms += 1
        else:
            self.failed_vms += 1
