"""Create change-ticket tagged snapshots of Azure VM disks."""

__version__ = "1.0.0"
