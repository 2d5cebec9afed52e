"""Parser for network configuration documents returned by the provider.

Converts NetworkConfiguration XML to strongly-typed NetworkSection objects.
"""
import xml.etree.ElementTree as xmltree

from ..errors import ParseError
from .schema import (
    NETWORK_CONFIG_NS,
    DnsServer,
    LocalNetworkSites,
    NetworkSection,
    Subnet,
    VirtualNetworkSite,
)
from .serializer import element_to_string

NS = {"nc": NETWORK_CONFIG_NS}


class ConfigParser:
    """Parse NetworkConfiguration XML text."""

    def parse(self, xml_text: str) -> NetworkSection:
        """
        Parse a NetworkConfiguration document into a NetworkSection.

        Args:
            xml_text: Document text; empty text means no configuration

        Returns:
            NetworkSection with DNS servers, sites and local network sites

        Raises:
            ParseError: If the text is not a NetworkConfiguration document
        """
        if not xml_text or not xml_text.strip():
            return NetworkSection()

        try:
            root = xmltree.fromstring(xml_text)
        except xmltree.ParseError as e:
            raise ParseError(f"Invalid network configuration XML: {e}") from e

        if root.tag != f"{{{NETWORK_CONFIG_NS}}}NetworkConfiguration":
            raise ParseError(f"Unexpected root element: {root.tag}")

        config = root.find("nc:VirtualNetworkConfiguration", NS)
        if config is None:
            return NetworkSection()

        return NetworkSection(
            dns_servers=self._parse_dns_servers(config),
            virtual_network_sites=self._parse_sites(config),
            local_network_sites=self._parse_local_sites(config),
        )

    def _parse_dns_servers(self, config: xmltree.Element) -> tuple[DnsServer, ...]:
        return tuple(
            DnsServer(
                name=elem.get("name", ""),
                ip_address=elem.get("IPAddress", ""),
            )
            for elem in config.findall("nc:Dns/nc:DnsServers/nc:DnsServer", NS)
        )

    def _parse_sites(self, config: xmltree.Element) -> tuple[VirtualNetworkSite, ...]:
        return tuple(
            self._parse_single_site(elem)
            for elem in config.findall(
                "nc:VirtualNetworkSites/nc:VirtualNetworkSite", NS
            )
        )

    def _parse_single_site(self, elem: xmltree.Element) -> VirtualNetworkSite:
        """Parse a single VirtualNetworkSite, keeping its source XML."""
        subnets = tuple(
            Subnet(
                name=subnet.get("name", ""),
                address_prefix=(subnet.findtext("nc:AddressPrefix", "", NS)).strip(),
            )
            for subnet in elem.findall("nc:Subnets/nc:Subnet", NS)
        )
        refs = tuple(
            ref.get("name", "")
            for ref in elem.findall("nc:DnsServersRef/nc:DnsServerRef", NS)
        )

        return VirtualNetworkSite(
            name=elem.get("name", ""),
            location=elem.get("Location", ""),
            address_prefix=(
                elem.findtext("nc:AddressSpace/nc:AddressPrefix", "", NS)
            ).strip(),
            subnets=subnets,
            dns_server_refs=refs,
            source_xml=element_to_string(elem),
        )

    def _parse_local_sites(self, config: xmltree.Element) -> LocalNetworkSites | None:
        block = config.find("nc:LocalNetworkSites", NS)
        # Only a block with at least one site is carried over
        if block is None or len(block) == 0:
            return None
        return LocalNetworkSites(source_xml=element_to_string(block))


def parse_network_config(xml_text: str) -> NetworkSection:
    """Parse NetworkConfiguration XML text (see ConfigParser.parse)."""
    return ConfigParser().parse(xml_text)
