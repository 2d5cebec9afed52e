"""Serializer for turning a NetworkSection into NetworkConfiguration XML."""
import copy
import xml.etree.ElementTree as xmltree

from .schema import (
    NETWORK_CONFIG_NS,
    DnsServer,
    NetworkSection,
    VirtualNetworkSite,
)

xmltree.register_namespace("", NETWORK_CONFIG_NS)


def _deco(tag: str) -> str:
    return f"{{{NETWORK_CONFIG_NS}}}{tag}"


def element_to_string(elem: xmltree.Element) -> str:
    """Serialize a single element without its trailing text."""
    clone = copy.deepcopy(elem)
    clone.tail = None
    return xmltree.tostring(clone, encoding="unicode")


class ConfigSerializer:
    """Generate NetworkConfiguration documents from sections."""

    def serialize(self, section: NetworkSection, indent: bool = True) -> str:
        """
        Serialize a section to a complete NetworkConfiguration document.

        Element order follows the provider schema: Dns, then
        LocalNetworkSites (only when present), then VirtualNetworkSites.
        Sites and local network sites read from the provider are written
        back verbatim.

        Args:
            section: Section to serialize
            indent: Whether to pretty-print the document

        Returns:
            XML text using the NetworkConfiguration default namespace
        """
        root = xmltree.Element(_deco("NetworkConfiguration"))
        config = xmltree.SubElement(root, _deco("VirtualNetworkConfiguration"))

        dns = xmltree.SubElement(config, _deco("Dns"))
        servers = xmltree.SubElement(dns, _deco("DnsServers"))
        for server in section.dns_servers:
            servers.append(self._dns_server_element(server))

        if section.local_network_sites is not None:
            config.append(xmltree.fromstring(section.local_network_sites.source_xml))

        sites = xmltree.SubElement(config, _deco("VirtualNetworkSites"))
        for site in section.virtual_network_sites:
            sites.append(self._site_element(site))

        if indent:
            xmltree.indent(root, space="  ")

        return xmltree.tostring(root, encoding="unicode")

    def _dns_server_element(self, server: DnsServer) -> xmltree.Element:
        return xmltree.Element(
            _deco("DnsServer"),
            {"name": server.name, "IPAddress": server.ip_address},
        )

    def _site_element(self, site: VirtualNetworkSite) -> xmltree.Element:
        """Build a VirtualNetworkSite element, or reuse its source XML."""
        if site.source_xml is not None:
            return xmltree.fromstring(site.source_xml)

        elem = xmltree.Element(
            _deco("VirtualNetworkSite"),
            {"name": site.name, "Location": site.location},
        )

        address_space = xmltree.SubElement(elem, _deco("AddressSpace"))
        prefix = xmltree.SubElement(address_space, _deco("AddressPrefix"))
        prefix.text = site.address_prefix

        subnets = xmltree.SubElement(elem, _deco("Subnets"))
        for subnet in site.subnets:
            subnet_elem = xmltree.SubElement(
                subnets, _deco("Subnet"), {"name": subnet.name}
            )
            subnet_prefix = xmltree.SubElement(subnet_elem, _deco("AddressPrefix"))
            subnet_prefix.text = subnet.address_prefix

        if site.dns_server_refs:
            refs = xmltree.SubElement(elem, _deco("DnsServersRef"))
            for ref in site.dns_server_refs:
                xmltree.SubElement(refs, _deco("DnsServerRef"), {"name": ref})

        return elem


def to_xml(section: NetworkSection, indent: bool = True) -> str:
    """Serialize a section (see ConfigSerializer.serialize)."""
    return ConfigSerializer().serialize(section, indent=indent)
