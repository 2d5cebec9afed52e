"""Merge a newly built section with the subscription's existing section.

New entries come first. Existing entries follow in their original order,
except those whose name collides with a new entry; the new entry replaces
them outright.
"""
from .schema import NetworkSection


class MergeEngine:
    """Combine new and existing network configuration sections."""

    def merge(
        self,
        new: NetworkSection,
        existing: NetworkSection
    ) -> NetworkSection:
        """
        Merge an existing section into a newly built one.

        Args:
            new: Section holding the entries to provision
            existing: Section fetched from the provider

        Returns:
            New NetworkSection; neither input is modified
        """
        new_dns_names = set(new.dns_server_names())
        new_site_names = set(new.site_names())

        dns_servers = new.dns_servers + tuple(
            server for server in existing.dns_servers
            if server.name not in new_dns_names
        )

        sites = new.virtual_network_sites + tuple(
            site for site in existing.virtual_network_sites
            if site.name not in new_site_names
        )

        # Local network sites are copied as one block, never deduplicated
        local_sites = existing.local_network_sites or new.local_network_sites

        return NetworkSection(
            dns_servers=dns_servers,
            virtual_network_sites=sites,
            local_network_sites=local_sites,
        )

    def replaced_dns_servers(
        self,
        new: NetworkSection,
        existing: NetworkSection
    ) -> list[str]:
        """Names of existing DNS servers a merge would drop."""
        new_names = set(new.dns_server_names())
        return [name for name in existing.dns_server_names() if name in new_names]

    def replaced_sites(
        self,
        new: NetworkSection,
        existing: NetworkSection
    ) -> list[str]:
        """Names of existing virtual network sites a merge would drop."""
        new_names = set(new.site_names())
        return [name for name in existing.site_names() if name in new_names]


def merge_sections(new: NetworkSection, existing: NetworkSection) -> NetworkSection:
    """Merge an existing section into a new one (see MergeEngine.merge)."""
    return MergeEngine().merge(new, existing)


def summarize_merge(new: NetworkSection, existing: NetworkSection) -> str:
    """
    Create a human-readable summary of a merge.

    Useful for dry-run output and logging.
    """
    engine = MergeEngine()
    replaced_sites = set(engine.replaced_sites(new, existing))
    existing_dns = {server.name: server for server in existing.dns_servers}

    lines = ["Network configuration changes:", ""]

    for server in new.dns_servers:
        old = existing_dns.pop(server.name, None)
        if old is None:
            lines.append(f"  [+] DNS server {server.name} ({server.ip_address})")
        else:
            lines.append(f"  [~] DNS server {server.name} ({server.ip_address})")
            lines.append(f"      (was: {old.ip_address})")
    for server in existing.dns_servers:
        if server.name in existing_dns:
            lines.append(f"  [=] DNS server {server.name} ({server.ip_address})")

    for site in new.virtual_network_sites:
        marker = "~" if site.name in replaced_sites else "+"
        lines.append(f"  [{marker}] Virtual network {site.name} ({site.address_prefix})")
        for subnet in site.subnets:
            lines.append(f"      Subnet: {subnet.name} ({subnet.address_prefix})")
    for site in existing.virtual_network_sites:
        if site.name not in replaced_sites:
            lines.append(f"  [=] Virtual network {site.name}")

    if existing.local_network_sites is not None:
        lines.append("  [=] Local network sites (copied unchanged)")

    return "\n".join(lines)
