import os

from azsnap.errors import ValidationError
from azsnap.models import RunConfig


def split_vm_list(vm_list):
    return [name.strip() for name in (vm_list or "").split(",") if name.strip()]


def read_vm_list_file(path):
    """Read VM names, one per line, and return them comma-joined."""
    if not os.path.isfile(path):
        raise ValidationError(f"VM list file not found: {path}")
    with open(path, "r") as f:
        names = [line.strip() for line in f if line.strip() and not line.strip().startswith("#")]
    return ",".join(names)


def validate_parameters(ticket_number, resource_group, vm_name=None, multi_vm=False,
                        vm_list=None, snapshot_resource_group=None, tags=None):
    if not ticket_number or not ticket_number.strip():
        raise ValidationError("Ticket number is required. Use --ticket-number to supply the change ticket.")

    if not resource_group or not resource_group.strip():
        raise ValidationError("Resource group is required. Use --resource-group to supply it.")

    if multi_vm:
        if vm_list is None:
            raise ValidationError("--multiple-vms requires a comma-separated --vm-list.")
        vm_names = split_vm_list(vm_list)
        if not vm_names:
            raise ValidationError("The VM list is empty. Provide at least one VM name in --vm-list.")
    elif vm_name and vm_name.strip():
        vm_names = [vm_name.strip()]
    else:
        raise ValidationError("No VM selected. Use --vm-name, or --multiple-vms together with --vm-list.")

    resource_group = resource_group.strip()
    if not snapshot_resource_group or not snapshot_resource_group.strip():
        snapshot_resource_group = resource_group

    return RunConfig(
        vm_names=vm_names,
        resource_group=resource_group,
        ticket_number=ticket_number.strip(),
        snapshot_resource_group=snapshot_resource_group.strip(),
        multi_vm=bool(multi_vm),
        tags=dict(tags or {}),
    )
