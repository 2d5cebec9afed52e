"""Network configuration building, merging and submission.

Usage:
    from azure_vnet_config.netconfig import VNetProvisioner, VNetRequest

    request = VNetRequest(
        dns_server_name="dc1",
        dns_server_ip="10.0.10.4",
        vnet_name="domainvlan",
        location="West Europe",
        vnet_address_range="10.2.0.0/16",
        subnet_name="sub1",
        subnet_address_range="10.2.0.0/24",
    )
    result = VNetProvisioner(client).provision(request, "NetworkConfig.xml")
"""

from .schema import (
    NETWORK_CONFIG_NS,
    DnsServer,
    Subnet,
    VirtualNetworkSite,
    LocalNetworkSites,
    NetworkSection,
    VNetRequest,
    ProvisionStage,
    ProvisionResult,
)
from .builder import build_new_section
from .parser import ConfigParser, parse_network_config
from .serializer import ConfigSerializer, to_xml
from .merge import MergeEngine, merge_sections, summarize_merge
from .engine import VNetProvisioner, provision_virtual_network, staged_config_file

__all__ = [
    # Main pipeline
    "VNetProvisioner",
    "provision_virtual_network",
    "staged_config_file",
    # Schema classes
    "NETWORK_CONFIG_NS",
    "DnsServer",
    "Subnet",
    "VirtualNetworkSite",
    "LocalNetworkSites",
    "NetworkSection",
    "VNetRequest",
    "ProvisionStage",
    "ProvisionResult",
    # Components
    "build_new_section",
    "ConfigParser",
    "parse_network_config",
    "ConfigSerializer",
    "to_xml",
    "MergeEngine",
    "merge_sections",
    "summarize_merge",
]
