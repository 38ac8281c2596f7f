import logging
from datetime import datetime

from rich.console import Console

from azsnap.errors import AzCommandError
from azsnap.models import (
    CREATED, FAILED, SKIPPED, VM_FAILED, VM_NOT_FOUND, VM_SUCCESS,
    DiskResult, RunSummary, VMResult,
)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

console = Console()
error_console = Console(stderr=True)


def make_timestamp(now=None):
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def build_snapshot_name(disk_name, ticket_number, timestamp):
    return f"{disk_name}-snapshot-{ticket_number}-{timestamp}"


def build_tags(config, vm_name, timestamp):
    tags = dict(config.tags)
    tags.update({
        "ChangeTicket": config.ticket_number,
        "SnapshotTimestamp": timestamp,
        "SourceVM": vm_name,
    })
    return tags


def snapshot_disk(service, disk, ticket_number, timestamp, location, resource_group, tags, summary):
    """Snapshot one disk unless a snapshot of the same name already exists.

    Never raises for remote failures: the outcome, including any error text,
    is returned as a DiskResult and counted on ``summary``.
    """
    snapshot_name = build_snapshot_name(disk.name, ticket_number, timestamp)
    result = DiskResult(disk_name=disk.name, snapshot_name=snapshot_name, status=FAILED, lun=disk.lun)

    # Unmanaged (VHD) disks carry no managed-disk id to snapshot from
    if not disk.disk_id:
        result.error = "disk has no managed-disk id"
        error_console.print(f"[bold red]Cannot snapshot disk '{disk.name}': {result.error}[/bold red]")
        logging.error(f"Cannot snapshot disk {disk.name}: {result.error}")
        summary.count_disk(result)
        return result

    try:
        existing = service.get_snapshot(snapshot_name, resource_group)
        if existing:
            console.print(f"[yellow]Snapshot '{snapshot_name}' already exists, skipping.[/yellow]")
            logging.warning(f"Snapshot {snapshot_name} already exists in {resource_group}, skipping")
            result.status = SKIPPED
        else:
            console.print(f"Creating snapshot '{snapshot_name}' for disk '{disk.name}'...")
            service.create_snapshot(snapshot_name, resource_group, disk.disk_id, location, tags)
            logging.info(f"Snapshot created: {snapshot_name} (source {disk.disk_id})")
            result.status = CREATED
    except AzCommandError as e:
        result.error = str(e)
        error_console.print(f"[bold red]Failed to create snapshot for disk '{disk.name}': {e}[/bold red]")
        logging.error(f"Failed to create snapshot {snapshot_name} for disk {disk.name}: {e}")

    summary.count_disk(result)
    return result


def snapshot_vm(service, config, vm_name, summary, now=None):
    console.print(f"\n[bold cyan]Processing VM: {vm_name}[/bold cyan]")
    logging.info(f"Processing VM: {vm_name} in resource group {config.resource_group}")

    try:
        vm = service.get_vm(vm_name, config.resource_group)
        lookup_error = None
    except AzCommandError as e:
        vm = None
        lookup_error = str(e)

    if vm is None:
        message = f"VM '{vm_name}' not found in resource group '{config.resource_group}'"
        if lookup_error:
            message = f"{message}: {lookup_error}"
        error_console.print(f"[bold red]{message}[/bold red]")
        logging.error(message)
        return VMResult(vm_name=vm_name, status=VM_NOT_FOUND, error=message)

    timestamp = make_timestamp(now)
    tags = build_tags(config, vm.name, timestamp)
    vm_result = VMResult(vm_name=vm_name, status=VM_SUCCESS)

    vm_result.os_disk = snapshot_disk(
        service, vm.os_disk, config.ticket_number, timestamp, vm.location,
        config.snapshot_resource_group, tags, summary,
    )
    if vm_result.os_disk.status == FAILED:
        vm_result.status = VM_FAILED
        vm_result.error = vm_result.os_disk.error
        logging.error(f"OS disk snapshot failed for {vm_name}, skipping its data disks")
        return vm_result

    for disk in vm.data_disks:
        vm_result.data_disks.append(snapshot_disk(
            service, disk, config.ticket_number, timestamp, vm.location,
            config.snapshot_resource_group, tags, summary,
        ))

    logging.info(f"Finished VM {vm_name}: {vm_result.status}")
    return vm_result


def run_snapshots(service, config, progress=None, task_id=None):
    summary = RunSummary()
    for vm_name in config.vm_names:
        summary.record(snapshot_vm(service, config, vm_name, summary))
        if progress is not None:
            progress.update(task_id, advance=1)
    logging.info(
        f"Run complete. VMs: {summary.total_vms}, successful: {summary.successful_vms}, "
        f"failed: {summary.failed_vms}, created: {summary.snapshots_created}, "
        f"skipped: {summary.snapshots_skipped}, failed snapshots: {summary.snapshots_failed}"
    )
    return summary
