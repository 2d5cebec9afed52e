"""Audit logging for network configuration submissions.

Every provisioning attempt that reaches the provider is recorded as one
JSON line on the vnetcraft.audit logger.
"""
import json
import logging
import os
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Create dedicated audit logger
audit_logger = logging.getLogger("vnetcraft.audit")


def setup_audit_logging(log_dir: Optional[str] = None) -> None:
    """Configure audit logging to file.

    Args:
        log_dir: Directory for audit logs. Defaults to ~/.vnetcraft/
    """
    if log_dir is None:
        log_dir = os.path.expanduser("~/.vnetcraft")

    Path(log_dir).mkdir(parents=True, exist_ok=True)

    audit_file = os.path.join(log_dir, "audit.log")

    audit_logger.setLevel(logging.INFO)
    audit_logger.handlers.clear()

    handler = RotatingFileHandler(
        audit_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10,
    )

    # Use JSON format for machine-readability
    handler.setFormatter(logging.Formatter("%(message)s"))
    audit_logger.addHandler(handler)

    # Don't propagate to root logger
    audit_logger.propagate = False


@dataclass
class ChangeRecord:
    """Record of a network configuration submission."""
    timestamp: str
    subscription_id: str
    operation: str
    vnet_name: str
    dns_server_name: str
    success: bool
    replaced_dns_servers: list[str] = field(default_factory=list)
    replaced_sites: list[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(asdict(self), indent=None)

    @classmethod
    def from_json(cls, json_str: str) -> "ChangeRecord":
        """Parse from JSON string."""
        data = json.loads(json_str)
        return cls(**data)


def log_change(
    subscription_id: str,
    vnet_name: str,
    dns_server_name: str,
    success: bool,
    replaced_dns_servers: Optional[list[str]] = None,
    replaced_sites: Optional[list[str]] = None,
    error: Optional[str] = None,
    operation: str = "set_network_configuration",
) -> ChangeRecord:
    """Write a ChangeRecord to the audit log and return it."""
    record = ChangeRecord(
        timestamp=datetime.now(timezone.utc).isoformat(),
        subscription_id=subscription_id,
        operation=operation,
        vnet_name=vnet_name,
        dns_server_name=dns_server_name,
        success=success,
        replaced_dns_servers=list(replaced_dns_servers or []),
        replaced_sites=list(replaced_sites or []),
        error=error,
    )

    audit_logger.info(record.to_json())

    return record


def get_recent_changes(
    log_file: Optional[str] = None,
    vnet_name: Optional[str] = None,
    limit: int = 100,
) -> list[ChangeRecord]:
    """Read recent changes from the audit log, most recent first."""
    if log_file is None:
        log_file = os.path.expanduser("~/.vnetcraft/audit.log")

    if not os.path.exists(log_file):
        return []

    records = []
    with open(log_file, "r") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                record = ChangeRecord.from_json(line)
            except (json.JSONDecodeError, TypeError):
                continue  # Skip malformed lines

            if vnet_name and record.vnet_name != vnet_name:
                continue
            records.append(record)

    return list(reversed(records[-limit:]))
