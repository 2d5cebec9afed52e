"""Schema definitions for network configuration sections.

Values are immutable: building and merging always return new objects.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

NETWORK_CONFIG_NS = "http://schemas.microsoft.com/ServiceHosting/2011/07/NetworkConfiguration"


class ProvisionStage(str, Enum):
    """Pipeline stage reached by a provisioning run."""
    STARTED = "started"
    BUILT = "built"
    FETCHED = "fetched"
    MERGED = "merged"
    SUBMITTED = "submitted"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class DnsServer:
    """A named DNS server used by VMs in the network."""
    name: str
    ip_address: str


@dataclass(frozen=True)
class Subnet:
    """A subnet inside a virtual network site."""
    name: str
    address_prefix: str


@dataclass(frozen=True)
class VirtualNetworkSite:
    """A virtual network with its address space and subnets."""
    name: str
    location: str = ""
    address_prefix: str = ""
    subnets: tuple[Subnet, ...] = ()
    dns_server_refs: tuple[str, ...] = ()
    # Verbatim element for sites read from the provider
    source_xml: Optional[str] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class LocalNetworkSites:
    """Opaque LocalNetworkSites block, carried through unchanged."""
    source_xml: str


@dataclass(frozen=True)
class NetworkSection:
    """The VirtualNetworkConfiguration part of a network configuration."""
    dns_servers: tuple[DnsServer, ...] = ()
    virtual_network_sites: tuple[VirtualNetworkSite, ...] = ()
    local_network_sites: Optional[LocalNetworkSites] = None

    def dns_server_names(self) -> list[str]:
        return [d.name for d in self.dns_servers]

    def site_names(self) -> list[str]:
        return [s.name for s in self.virtual_network_sites]


@dataclass(frozen=True)
class VNetRequest:
    """Caller-supplied values for the network to provision."""
    dns_server_name: str
    dns_server_ip: str
    vnet_name: str
    location: str
    vnet_address_range: str
    subnet_name: str
    subnet_address_range: str


@dataclass
class ProvisionResult:
    """Result of a provisioning run."""
    stage: ProvisionStage
    dry_run: bool = False
    new: Optional[NetworkSection] = None
    existing: Optional[NetworkSection] = None
    merged: Optional[NetworkSection] = None
    merged_xml: str = ""
    confirmed_xml: str = ""
    replaced_dns_servers: list[str] = field(default_factory=list)
    replaced_sites: list[str] = field(default_factory=list)
    failed_stage: Optional[ProvisionStage] = None  # last stage reached before FAILED

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "stage": self.stage.value,
            "dry_run": self.dry_run,
            "dns_servers": self.merged.dns_server_names() if self.merged else [],
            "virtual_network_sites": self.merged.site_names() if self.merged else [],
            "replaced_dns_servers": self.replaced_dns_servers,
            "replaced_sites": self.replaced_sites,
            "failed_stage": self.failed_stage.value if self.failed_stage else None,
        }
