"""Build the configuration section for a new virtual network."""
from .schema import DnsServer, NetworkSection, Subnet, VirtualNetworkSite, VNetRequest


def build_new_section(request: VNetRequest) -> NetworkSection:
    """
    Build a section holding one DNS server and one virtual network site.

    The site gets a single subnet and a reference to the new DNS server.
    Values are passed through as given; address and name syntax is left
    to the provider to check.

    Args:
        request: Values for the new network

    Returns:
        NetworkSection with exactly one DNS server and one site
    """
    dns_server = DnsServer(
        name=request.dns_server_name,
        ip_address=request.dns_server_ip,
    )

    site = VirtualNetworkSite(
        name=request.vnet_name,
        location=request.location,
        address_prefix=request.vnet_address_range,
        subnets=(
            Subnet(
                name=request.subnet_name,
                address_prefix=request.subnet_address_range,
            ),
        ),
        dns_server_refs=(dns_server.name,),
    )

    return NetworkSection(
        dns_servers=(dns_server,),
        virtual_network_sites=(site,),
    )
