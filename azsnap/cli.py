import argparse
import logging
import sys
import time

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.text import Text

from azsnap.azure_cli import AzureCliDiskService
from azsnap.errors import AzsnapError, ValidationError
from azsnap.orchestrator import run_snapshots
from azsnap.report import print_report, write_summary_file
from azsnap.session import check_session
from azsnap.validation import read_vm_list_file, validate_parameters

DEFAULT_LOG_FILE = "snapshot_creation.log"

console = Console()
error_console = Console(stderr=True)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="azsnap",
        description="Create ticket-tagged snapshots of the OS and data disks of Azure VMs",
    )
    parser.add_argument("--vm-name", help="Name of a single VM to snapshot")
    parser.add_argument("--multiple-vms", action="store_true", help="Snapshot every VM in --vm-list")
    parser.add_argument("--vm-list", help="Comma-separated VM names (used with --multiple-vms)")
    parser.add_argument("--vm-list-file", help="File with one VM name per line (implies --multiple-vms)")
    parser.add_argument("--resource-group", required=True, help="Resource group of the source VMs")
    parser.add_argument("--ticket-number", help="Change ticket embedded in every snapshot name")
    parser.add_argument("--snapshot-resource-group",
                        help="Resource group for the snapshots (defaults to --resource-group)")
    parser.add_argument("--tag", action="append", default=[], metavar="KEY=VALUE",
                        help="Extra tag for the snapshots, may be repeated")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="Path of the detailed log file")
    parser.add_argument("--summary-file", help="Also write the summary to this file")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    return parser


def parse_tags(values):
    tags = {}
    for value in values:
        key, sep, tag_value = value.partition("=")
        if not sep or not key.strip():
            raise ValidationError(f"Invalid tag '{value}', expected KEY=VALUE")
        tags[key.strip()] = tag_value.strip()
    return tags


def load_config(args):
    multi_vm = args.multiple_vms
    vm_list = args.vm_list
    if args.vm_list_file:
        multi_vm = True
        vm_list = read_vm_list_file(args.vm_list_file)
    return validate_parameters(
        ticket_number=args.ticket_number,
        resource_group=args.resource_group,
        vm_name=args.vm_name,
        multi_vm=multi_vm,
        vm_list=vm_list,
        snapshot_resource_group=args.snapshot_resource_group,
        tags=parse_tags(args.tag),
    )


def execute(args, config, service):
    if args.no_progress:
        summary = run_snapshots(service, config)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Processing VMs...", total=len(config.vm_names))
            summary = run_snapshots(service, config, progress, task)

    print_report(summary, config, console)

    if args.summary_file:
        write_summary_file(summary, config, args.summary_file)
        console.print(f"Summary: {args.summary_file}")
    return summary


def main(argv=None, service=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(filename=args.log_file, level=logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    console.print(Panel.fit(
        Text("Azure VM Snapshot Creator", style="bold magenta"),
        border_style="cyan"
    ))

    start_time = time.time()
    try:
        config = load_config(args)
        service = service or AzureCliDiskService()
        check_session(service)
    except AzsnapError as e:
        error_console.print(Panel(str(e), border_style="red"))
        logging.error(f"Aborting: {e}")
        return 1

    logging.info(f"Ticket: {config.ticket_number}, VMs: {', '.join(config.vm_names)}")
    console.print(f"Ticket number: [bold]{config.ticket_number}[/bold]")
    console.print(f"Processing [bold]{len(config.vm_names)}[/bold] VM(s) in resource group "
                  f"[bold]{config.resource_group}[/bold]")

    try:
        execute(args, config, service)
    except Exception as e:
        logging.exception(f"Unexpected error: {e}")
        raise

    duration = time.time() - start_time
    console.print(f"\n[bold blue]Script runtime: {duration:.2f} seconds[/bold blue]")
    console.print(f"Detailed log: {args.log_file}")
    logging.info(f"Script runtime: {duration:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
