"""Shared fixtures and sample documents for vnetcraft tests."""
from pathlib import Path
from typing import Optional

import pytest

from azure_vnet_config.client.base import NetworkConfigClient
from azure_vnet_config.netconfig import VNetRequest

EXISTING_XML = """<?xml version="1.0" encoding="utf-8"?>
<NetworkConfiguration xmlns:xsd="http://www.w3.org/2001/XMLSchema" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xmlns="http://schemas.microsoft.com/ServiceHosting/2011/07/NetworkConfiguration">
  <VirtualNetworkConfiguration>
    <Dns>
      <DnsServers>
        <DnsServer name="dc1" IPAddress="10.0.0.4" />
        <DnsServer name="dc2" IPAddress="10.0.0.5" />
      </DnsServers>
    </Dns>
    <VirtualNetworkSites>
      <VirtualNetworkSite name="corp" Location="North Europe">
        <AddressSpace>
          <AddressPrefix>10.1.0.0/16</AddressPrefix>
        </AddressSpace>
        <Subnets>
          <Subnet name="frontend">
            <AddressPrefix>10.1.0.0/24</AddressPrefix>
          </Subnet>
        </Subnets>
        <DnsServersRef>
          <DnsServerRef name="dc2" />
        </DnsServersRef>
      </VirtualNetworkSite>
    </VirtualNetworkSites>
  </VirtualNetworkConfiguration>
</NetworkConfiguration>
"""

EXISTING_WITH_LOCAL_XML = """<NetworkConfiguration xmlns="http://schemas.microsoft.com/ServiceHosting/2011/07/NetworkConfiguration">
  <VirtualNetworkConfiguration>
    <Dns>
      <DnsServers>
        <DnsServer name="ad1" IPAddress="10.5.0.4" />
      </DnsServers>
    </Dns>
    <LocalNetworkSites>
      <LocalNetworkSite name="onprem">
        <AddressSpace>
          <AddressPrefix>192.168.0.0/16</AddressPrefix>
        </AddressSpace>
        <VPNGatewayAddress>203.0.113.10</VPNGatewayAddress>
      </LocalNetworkSite>
      <LocalNetworkSite name="branch">
        <AddressSpace>
          <AddressPrefix>172.16.0.0/20</AddressPrefix>
        </AddressSpace>
        <VPNGatewayAddress>203.0.113.20</VPNGatewayAddress>
      </LocalNetworkSite>
    </LocalNetworkSites>
    <VirtualNetworkSites>
      <VirtualNetworkSite name="hub" AffinityGroup="hub-ag">
        <AddressSpace>
          <AddressPrefix>10.5.0.0/16</AddressPrefix>
          <AddressPrefix>10.6.0.0/16</AddressPrefix>
        </AddressSpace>
        <Subnets>
          <Subnet name="GatewaySubnet">
            <AddressPrefix>10.5.255.0/29</AddressPrefix>
          </Subnet>
        </Subnets>
        <Gateway>
          <ConnectionsToLocalNetwork>
            <LocalNetworkSiteRef name="onprem">
              <Connection type="IPsec" />
            </LocalNetworkSiteRef>
          </ConnectionsToLocalNetwork>
        </Gateway>
      </VirtualNetworkSite>
    </VirtualNetworkSites>
  </VirtualNetworkConfiguration>
</NetworkConfiguration>
"""


class FakeClient(NetworkConfigClient):
    """In-memory client: applying a file makes it the current configuration."""

    def __init__(
        self,
        existing_xml: str = "",
        fetch_error: Optional[Exception] = None,
        apply_error: Optional[Exception] = None,
    ):
        self.subscription_id = "sub-123"
        self.current = existing_xml
        self.fetch_error = fetch_error
        self.apply_error = apply_error
        self.fetch_count = 0
        self.applied: list[str] = []
        self.applied_paths: list[Path] = []
        self.closed = False

    def get_configuration(self) -> str:
        self.fetch_count += 1
        if self.fetch_error:
            raise self.fetch_error
        return self.current

    def apply_configuration(self, path) -> None:
        content = Path(path).read_text(encoding="utf-8")
        self.applied_paths.append(Path(path))
        self.applied.append(content)
        if self.apply_error:
            raise self.apply_error
        self.current = content

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def request_values() -> VNetRequest:
    """Values for the domainvlan network."""
    return VNetRequest(
        dns_server_name="dc1",
        dns_server_ip="10.0.10.4",
        vnet_name="domainvlan",
        location="West Europe",
        vnet_address_range="10.2.0.0/16",
        subnet_name="sub1",
        subnet_address_range="10.2.0.0/24",
    )
