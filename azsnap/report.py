from rich.console import Console
from rich.text import Text
from tabulate import tabulate

from azsnap.models import CREATED, FAILED, SKIPPED, VM_FAILED, VM_NOT_FOUND, VM_SUCCESS

NO_SNAPSHOTS_MESSAGE = "No snapshots were created or skipped."

DISK_STATUS_LABELS = {
    CREATED: "Completed",
    SKIPPED: "Skipped",
    FAILED: "Failed",
}

STYLES = {
    VM_SUCCESS: "green",
    VM_FAILED: "red",
    VM_NOT_FOUND: "red",
    "Completed": "green",
    "Skipped": "yellow",
    "Failed": "red",
}


def disk_line(kind, result):
    label = DISK_STATUS_LABELS[result.status]
    snapshot_name = result.snapshot_name if result.status != FAILED else "N/A"
    line = f"  {kind}: {result.disk_name}"
    if result.lun is not None:
        line += f" (LUN {result.lun})"
    line += f" | Snapshot: {snapshot_name} | Status: {label}"
    if result.error:
        line += f" | Error: {result.error}"
    return line, STYLES[label]


def report_lines(summary):
    """Return (text, style) pairs for the per-VM part of the report."""
    if summary.snapshots_created + summary.snapshots_skipped == 0:
        return [(NO_SNAPSHOTS_MESSAGE, "yellow")]

    lines = []
    for vm in summary.results:
        lines.append((f"VM: {vm.vm_name} - Status: {vm.status}", STYLES[vm.status]))
        if vm.status == VM_NOT_FOUND:
            lines.append((f"  {vm.error}", "red"))
            continue
        if vm.os_disk is not None:
            lines.append(disk_line("OS Disk", vm.os_disk))
        for data_disk in vm.data_disks:
            lines.append(disk_line("Data Disk", data_disk))
    return lines


def operation_summary_table(summary, config):
    rows = [
        ["Ticket Number", config.ticket_number],
        ["Total VMs", summary.total_vms],
        ["Successful VMs", summary.successful_vms],
        ["Failed VMs", summary.failed_vms],
        ["Snapshots Created", summary.snapshots_created],
        ["Snapshots Skipped", summary.snapshots_skipped],
        ["Snapshots Failed", summary.snapshots_failed],
    ]
    return tabulate(rows, headers=["Attribute", "Value"], tablefmt="grid")


def print_report(summary, config, console=None):
    console = console or Console()
    console.print("\n[bold]Snapshot Creation Summary[/bold]")
    console.print("=========================")
    for text, style in report_lines(summary):
        console.print(Text(text, style=style))

    if config.multi_vm:
        console.print("\n[bold]Operation Summary[/bold]")
        console.print(Text(operation_summary_table(summary, config)))


def format_summary_text(summary, config):
    parts = ["Snapshot Creation Summary", "=========================", ""]
    parts += [text for text, _ in report_lines(summary)]
    if config.multi_vm:
        parts += ["", "Operation Summary", operation_summary_table(summary, config)]
    return "\n".join(parts) + "\n"


def write_summary_file(summary, config, path):
    with open(path, "w") as f:
        f.write(format_summary_text(summary, config))
