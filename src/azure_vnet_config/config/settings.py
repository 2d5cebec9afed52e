"""Subscription settings loaded from YAML configuration."""
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variables overriding file values
ENV_OVERRIDES = {
    "subscription_id": "VNETCRAFT_SUBSCRIPTION_ID",
    "certificate_file": "VNETCRAFT_CERTIFICATE_FILE",
    "key_file": "VNETCRAFT_KEY_FILE",
}


@dataclass
class SubscriptionSettings:
    """Connection settings for the Service Management API.

    ```yaml
    subscription_id: 00000000-0000-0000-0000-000000000000
    certificate_file: ~/.vnetcraft/management.pem
    management_host: management.core.windows.net
    api_version: "2015-04-01"
    ```
    """
    subscription_id: str
    certificate_file: Optional[str] = None
    key_file: Optional[str] = None
    management_host: str = "management.core.windows.net"
    api_version: str = "2015-04-01"
    timeout: float = 30
    operation_timeout: float = 600
    poll_interval: float = 5

    @property
    def base_url(self) -> str:
        return f"https://{self.management_host}"

    @classmethod
    def from_dict(cls, data: dict) -> "SubscriptionSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        for key in sorted(unknown):
            logger.warning(f"Ignoring unknown setting: {key}")

        values = {k: v for k, v in data.items() if k in known}

        for key, env_name in ENV_OVERRIDES.items():
            env_value = os.environ.get(env_name)
            if env_value:
                values[key] = env_value

        if not values.get("subscription_id"):
            raise ConfigurationError(
                "Missing required setting: subscription_id "
                "(or VNETCRAFT_SUBSCRIPTION_ID)"
            )

        for key in ("certificate_file", "key_file"):
            if values.get(key):
                values[key] = os.path.expanduser(str(values[key]))

        values["subscription_id"] = str(values["subscription_id"])
        return cls(**values)


def find_settings_file() -> str:
    """Find the subscription.yaml settings file."""
    search_paths = [
        Path.cwd() / "configs" / "subscription.yaml",
        Path.cwd() / "subscription.yaml",
        Path.home() / ".config" / "vnetcraft" / "subscription.yaml",
        Path("/etc/vnetcraft/subscription.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            return str(path)

    raise FileNotFoundError(
        "Could not find subscription.yaml. Create one in ./configs/subscription.yaml"
    )


def load_settings(path: Optional[str] = None) -> SubscriptionSettings:
    """Load subscription settings from a YAML file.

    Args:
        path: Settings file; searched for when omitted

    Raises:
        FileNotFoundError: If no settings file exists
        ConfigurationError: If the file is not a mapping or lacks a subscription id
    """
    settings_path = path or find_settings_file()
    logger.debug(f"Loading subscription settings from {settings_path}")

    with open(settings_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain a mapping: {settings_path}")

    return SubscriptionSettings.from_dict(data)
