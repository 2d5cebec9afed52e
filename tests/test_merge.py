"""Tests for merging new and existing network configuration sections."""
from azure_vnet_config.netconfig import (
    DnsServer,
    LocalNetworkSites,
    MergeEngine,
    NetworkSection,
    VirtualNetworkSite,
    build_new_section,
    merge_sections,
    parse_network_config,
    summarize_merge,
)

from conftest import EXISTING_WITH_LOCAL_XML, EXISTING_XML


def _existing(dns=(), sites=(), local=None) -> NetworkSection:
    return NetworkSection(
        dns_servers=tuple(DnsServer(name, ip) for name, ip in dns),
        virtual_network_sites=tuple(VirtualNetworkSite(name=name) for name in sites),
        local_network_sites=local,
    )


class TestMergeSections:
    """Tests for merge_sections."""

    def test_domainvlan_scenario(self, request_values):
        """New dc1 replaces the old one, dc2 and corp are kept after the new entries."""
        merged = merge_sections(
            build_new_section(request_values),
            parse_network_config(EXISTING_XML),
        )

        assert [(d.name, d.ip_address) for d in merged.dns_servers] == [
            ("dc1", "10.0.10.4"),
            ("dc2", "10.0.0.5"),
        ]
        assert merged.site_names() == ["domainvlan", "corp"]

    def test_disjoint_names_add_one_each(self, request_values):
        """Disjoint names give existing count + 1 per category."""
        existing = _existing(
            dns=[("a", "10.0.0.1"), ("b", "10.0.0.2"), ("c", "10.0.0.3")],
            sites=["x", "y"],
        )

        merged = merge_sections(build_new_section(request_values), existing)

        assert len(merged.dns_servers) == 4
        assert len(merged.virtual_network_sites) == 3

    def test_dns_collision_keeps_new_attributes(self, request_values):
        """A colliding DNS server is dropped, not merged."""
        existing = _existing(dns=[("dc1", "192.0.2.1")])

        merged = merge_sections(build_new_section(request_values), existing)

        matches = [d for d in merged.dns_servers if d.name == "dc1"]
        assert matches == [DnsServer("dc1", "10.0.10.4")]

    def test_site_collision_keeps_new_site(self, request_values):
        """A colliding site is dropped in favour of the new one."""
        existing = NetworkSection(
            virtual_network_sites=(
                VirtualNetworkSite(name="domainvlan", location="East US", address_prefix="10.9.0.0/16"),
            ),
        )

        merged = merge_sections(build_new_section(request_values), existing)

        assert len(merged.virtual_network_sites) == 1
        assert merged.virtual_network_sites[0].location == "West Europe"
        assert merged.virtual_network_sites[0].address_prefix == "10.2.0.0/16"

    def test_relative_order_preserved(self, request_values):
        """Existing entries keep their relative order around the dropped one."""
        existing = _existing(
            dns=[("z", "1.1.1.1"), ("dc1", "2.2.2.2"), ("a", "3.3.3.3"), ("m", "4.4.4.4")],
            sites=["s3", "domainvlan", "s1", "s2"],
        )

        merged = merge_sections(build_new_section(request_values), existing)

        assert merged.dns_server_names() == ["dc1", "z", "a", "m"]
        assert merged.site_names() == ["domainvlan", "s3", "s1", "s2"]

    def test_case_sensitive_names(self, request_values):
        """Names differing only in case do not collide."""
        existing = _existing(dns=[("DC1", "10.0.0.4")], sites=["DomainVLAN"])

        merged = merge_sections(build_new_section(request_values), existing)

        assert merged.dns_server_names() == ["dc1", "DC1"]
        assert merged.site_names() == ["domainvlan", "DomainVLAN"]

    def test_empty_existing_is_noop(self, request_values):
        """With nothing existing, only the new entries remain."""
        new = build_new_section(request_values)

        merged = merge_sections(new, NetworkSection())

        assert merged == new

    def test_local_sites_copied_as_block(self, request_values):
        """The existing LocalNetworkSites block is carried over unchanged."""
        existing = parse_network_config(EXISTING_WITH_LOCAL_XML)

        merged = merge_sections(build_new_section(request_values), existing)

        assert merged.local_network_sites is existing.local_network_sites

    def test_no_local_sites_when_existing_has_none(self, request_values):
        """No LocalNetworkSites in the source means none in the result."""
        merged = merge_sections(
            build_new_section(request_values),
            parse_network_config(EXISTING_XML),
        )

        assert merged.local_network_sites is None

    def test_local_sites_not_deduplicated(self, request_values):
        """Local sites are never inspected, even if names repeat."""
        block = LocalNetworkSites(
            source_xml=(
                '<LocalNetworkSites xmlns="http://schemas.microsoft.com/ServiceHosting/'
                '2011/07/NetworkConfiguration"><LocalNetworkSite name="dup" />'
                '<LocalNetworkSite name="dup" /></LocalNetworkSites>'
            )
        )

        merged = merge_sections(build_new_section(request_values), _existing(local=block))

        assert merged.local_network_sites.source_xml.count('name="dup"') == 2

    def test_inputs_unchanged(self, request_values):
        """Merging does not modify either input."""
        new = build_new_section(request_values)
        existing = parse_network_config(EXISTING_XML)
        new_before, existing_before = new.dns_server_names(), existing.dns_server_names()

        merge_sections(new, existing)

        assert new.dns_server_names() == new_before
        assert existing.dns_server_names() == existing_before


class TestMergeEngine:
    """Tests for replaced-entry reporting."""

    def test_replaced_names(self, request_values):
        engine = MergeEngine()
        new = build_new_section(request_values)
        existing = _existing(dns=[("dc1", "1.1.1.1"), ("dc2", "2.2.2.2")], sites=["corp"])

        assert engine.replaced_dns_servers(new, existing) == ["dc1"]
        assert engine.replaced_sites(new, existing) == []


class TestSummarizeMerge:
    """Tests for summarize_merge."""

    def test_summary_marks_replaced_and_kept(self, request_values):
        summary = summarize_merge(
            build_new_section(request_values),
            parse_network_config(EXISTING_XML),
        )

        assert "[~] DNS server dc1 (10.0.10.4)" in summary
        assert "(was: 10.0.0.4)" in summary
        assert "[=] DNS server dc2 (10.0.0.5)" in summary
        assert "[+] Virtual network domainvlan (10.2.0.0/16)" in summary
        assert "Subnet: sub1 (10.2.0.0/24)" in summary
        assert "[=] Virtual network corp" in summary

    def test_summary_mentions_local_sites(self, request_values):
        summary = summarize_merge(
            build_new_section(request_values),
            parse_network_config(EXISTING_WITH_LOCAL_XML),
        )

        assert "[+] DNS server dc1" in summary
        assert "Local network sites" in summary
