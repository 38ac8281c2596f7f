import json
import logging
import subprocess

from azsnap.errors import AzCommandError, ResourceNotFoundError
from azsnap.models import DiskRef, VMRef

NOT_FOUND_MARKERS = ("ResourceNotFound", "NotFound", "was not found")


def run_az_command(command):
    """Run an az command and return its parsed JSON output."""
    command = list(command)
    if "-o" not in command and "--output" not in command:
        command += ["-o", "json"]
    try:
        result = subprocess.run(command, check=True, capture_output=True, text=True)
    except FileNotFoundError:
        logging.error("The az CLI is not installed or not on PATH")
        raise AzCommandError(" ".join(command), "The az CLI is not installed or not on PATH")
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        logging.error(f"Command failed: {' '.join(command)}. Error: {stderr}")
        if any(marker in stderr for marker in NOT_FOUND_MARKERS):
            raise ResourceNotFoundError(" ".join(command), stderr)
        raise AzCommandError(" ".join(command), stderr)

    output = result.stdout.strip()
    if not output:
        return None
    return json.loads(output)


def parse_vm(data, resource_group):
    storage = data.get("storageProfile", {})
    os_disk = storage.get("osDisk", {})
    data_disks = [
        DiskRef(name=d["name"], disk_id=(d.get("managedDisk") or {}).get("id"), lun=d.get("lun"))
        for d in storage.get("dataDisks", [])
    ]
    return VMRef(
        name=data["name"],
        resource_group=data.get("resourceGroup", resource_group),
        location=data["location"],
        os_disk=DiskRef(name=os_disk["name"], disk_id=(os_disk.get("managedDisk") or {}).get("id")),
        data_disks=data_disks,
    )


class AzureCliDiskService:
    """VM and snapshot operations backed by the az CLI.

    The orchestrator only depends on the five public methods here, so any
    object providing them can stand in for this class.
    """

    def get_current_session(self):
        try:
            return run_az_command(["az", "account", "show"])
        except AzCommandError as e:
            logging.warning(f"No active Azure session: {e}")
            return None

    def get_subscription(self, subscription_id):
        url = f"https://management.azure.com/subscriptions/{subscription_id}?api-version=2020-01-01"
        return run_az_command(["az", "rest", "--method", "get", "--url", url])

    def get_vm(self, name, resource_group):
        try:
            data = run_az_command(["az", "vm", "show", "--name", name, "--resource-group", resource_group])
        except ResourceNotFoundError:
            return None
        return parse_vm(data, resource_group)

    def get_snapshot(self, name, resource_group):
        try:
            return run_az_command(["az", "snapshot", "show", "--name", name, "--resource-group", resource_group])
        except ResourceNotFoundError:
            return None

    def create_snapshot(self, name, resource_group, source_disk_id, location, tags=None):
        command = [
            "az", "snapshot", "create",
            "--name", name,
            "--resource-group", resource_group,
            "--source", source_disk_id,
            "--location", location,
        ]
        if tags:
            command += ["--tags"] + [f"{key}={value}" for key, value in tags.items()]
        return run_az_command(command)
