#!/usr/bin/env python3
"""Provision a virtual network in an Azure subscription.

Usage:
    vnetcraft --dns-name dc1 --dns-ip 10.0.10.4 --vnet-name domainvlan \\
        --location "West Europe" --address-range 10.2.0.0/16 \\
        --subnet-name sub1 --subnet-range 10.2.0.0/24 \\
        --config-file NetworkConfig.xml
    vnetcraft --history [--vnet-name domainvlan] [--limit 20]

Environment variables:
    VNETCRAFT_SUBSCRIPTION_ID   Override subscription_id from settings
    VNETCRAFT_CERTIFICATE_FILE  Override certificate_file from settings
    VNETCRAFT_LOG_LEVEL         Console log level (default: INFO)
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .client.management import ServiceManagementClient
from .config.settings import load_settings
from .errors import VNetCraftError
from .netconfig import VNetProvisioner, VNetRequest
from .netconfig.merge import summarize_merge
from .utils.audit_log import ChangeRecord, get_recent_changes, setup_audit_logging
from .utils.logging_config import setup_logging

logger = logging.getLogger("vnetcraft.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vnetcraft",
        description="Add a virtual network and DNS server to a subscription's network configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Preview the merged configuration
    vnetcraft --dns-name dc1 --dns-ip 10.0.10.4 --vnet-name domainvlan \\
        --location "West Europe" --address-range 10.2.0.0/16 \\
        --subnet-name sub1 --subnet-range 10.2.0.0/24 \\
        --config-file NetworkConfig.xml --dry-run

    # Use a specific settings file
    vnetcraft ... --settings ~/azure/subscription.yaml

    # Recent submissions for one virtual network
    vnetcraft --history --vnet-name domainvlan
""",
    )
    parser.add_argument("--dns-name", help="Name of the new DNS server")
    parser.add_argument("--dns-ip", help="IPv4 address of the new DNS server")
    parser.add_argument(
        "--vnet-name",
        help="Name of the new virtual network (with --history: only show this network)",
    )
    parser.add_argument("--location", help="Region of the new virtual network")
    parser.add_argument(
        "--address-range",
        help="Address range of the virtual network (CIDR)",
    )
    parser.add_argument("--subnet-name", help="Name of the subnet")
    parser.add_argument(
        "--subnet-range",
        help="Address range of the subnet (CIDR)",
    )
    parser.add_argument(
        "--config-file", type=Path,
        help="Path used to stage the merged configuration file",
    )
    parser.add_argument(
        "--settings",
        type=str,
        help="Subscription settings file (default: search ./configs, ., ~/.config/vnetcraft)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the merged configuration without submitting it",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Show recent submissions from the audit log and exit",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of audit records shown by --history (default: 20)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


PROVISION_OPTIONS = (
    ("dns_name", "--dns-name"),
    ("dns_ip", "--dns-ip"),
    ("vnet_name", "--vnet-name"),
    ("location", "--location"),
    ("address_range", "--address-range"),
    ("subnet_name", "--subnet-name"),
    ("subnet_range", "--subnet-range"),
    ("config_file", "--config-file"),
)


def format_change(record: ChangeRecord) -> str:
    """One line per audit record, newest first in --history output."""
    status = "OK  " if record.success else "FAIL"
    line = (
        f"{record.timestamp} {status} {record.subscription_id} "
        f"vnet={record.vnet_name} dns={record.dns_server_name}"
    )
    replaced = record.replaced_dns_servers + record.replaced_sites
    if replaced:
        line += f" replaced={','.join(replaced)}"
    if record.error:
        line += f" error={record.error}"
    return line


def show_history(vnet_name: Optional[str], limit: int) -> int:
    records = get_recent_changes(vnet_name=vnet_name, limit=limit)
    if not records:
        print("No recorded submissions", file=sys.stderr)
        return 0
    for record in records:
        print(format_change(record))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the vnetcraft CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.history:
        return show_history(args.vnet_name, args.limit)

    missing = [flag for attr, flag in PROVISION_OPTIONS if getattr(args, attr) is None]
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")

    setup_logging(logging.DEBUG if args.verbose else None)

    request = VNetRequest(
        dns_server_name=args.dns_name,
        dns_server_ip=args.dns_ip,
        vnet_name=args.vnet_name,
        location=args.location,
        vnet_address_range=args.address_range,
        subnet_name=args.subnet_name,
        subnet_address_range=args.subnet_range,
    )

    try:
        settings = load_settings(args.settings)
    except (FileNotFoundError, VNetCraftError) as e:
        logger.error(f"Could not load subscription settings: {e}")
        return 1

    if not args.dry_run:
        setup_audit_logging()

    try:
        with ServiceManagementClient(settings) as client:
            provisioner = VNetProvisioner(client)
            result = provisioner.provision(request, args.config_file, dry_run=args.dry_run)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Provisioning failed: {e}")
        return 1

    if result.dry_run:
        print(summarize_merge(result.new, result.existing), file=sys.stderr)
        print(result.merged_xml)
    else:
        print(result.confirmed_xml)

    return 0


if __name__ == "__main__":
    sys.exit(main())
