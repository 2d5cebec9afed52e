"""Provisioning pipeline - orchestrates the full set-network-config workflow.

Provides a single entry point for:
1. Building the section for the new network
2. Fetching the subscription's current configuration
3. Merging the two
4. Submitting the merged configuration through a staged file
5. Returning the configuration confirmed by the provider
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..client.base import NetworkConfigClient
from ..utils.audit_log import log_change
from ..utils.logging_config import timed_section
from .builder import build_new_section
from .merge import MergeEngine
from .parser import ConfigParser
from .schema import ProvisionResult, ProvisionStage, VNetRequest
from .serializer import ConfigSerializer

logger = logging.getLogger(__name__)


def _remove_quietly(path: Path) -> None:
    """Delete path, logging instead of raising on failure."""
    try:
        path.unlink()
        logger.debug(f"Removed staged configuration {path}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove staged configuration {path}: {e}")


@contextmanager
def staged_config_file(path: str | Path, content: str) -> Iterator[Path]:
    """
    Write content to path for the duration of the block.

    Any file already at path is removed first; the file is removed again
    when the block exits, whether or not it raised.
    """
    staged = Path(path)
    _remove_quietly(staged)
    try:
        staged.write_text(content, encoding="utf-8")
        yield staged
    finally:
        _remove_quietly(staged)


class VNetProvisioner:
    """
    Provision a virtual network by merging it into the subscription's
    network configuration.

    Usage:
        with ServiceManagementClient(settings) as client:
            result = VNetProvisioner(client).provision(request, "NetworkConfig.xml")
    """

    def __init__(self, client: NetworkConfigClient, audit: bool = True):
        """
        Initialize the provisioner.

        Args:
            client: Authenticated client for the provider endpoints
            audit: Whether to write submissions to the audit log
        """
        self.client = client
        self.audit = audit
        self.parser = ConfigParser()
        self.merge_engine = MergeEngine()
        self.serializer = ConfigSerializer()

    def provision(
        self,
        request: VNetRequest,
        config_path: str | Path,
        dry_run: bool = False,
    ) -> ProvisionResult:
        """
        Run build, fetch, merge and submit for one virtual network.

        Failures are logged with the stage they happened in and re-raised
        unchanged; nothing is retried. The partial ProvisionResult is attached
        to the exception as provision_result.

        Args:
            request: Values for the new network
            config_path: Where to stage the merged configuration file
            dry_run: If True, stop after merging and submit nothing

        Returns:
            ProvisionResult; confirmed_xml holds the provider's configuration
        """
        subscription = self.client.subscription_id
        result = ProvisionResult(stage=ProvisionStage.STARTED, dry_run=dry_run)

        try:
            logger.info(f"Building configuration for virtual network {request.vnet_name}")
            new = result.new = build_new_section(request)
            result.stage = ProvisionStage.BUILT

            logger.info("Fetching current network configuration")
            existing = result.existing = self.parser.parse(self.client.get_configuration())
            result.stage = ProvisionStage.FETCHED
            logger.info(
                f"Current configuration has {len(existing.dns_servers)} DNS servers, "
                f"{len(existing.virtual_network_sites)} virtual network sites"
            )

            with timed_section("merge", subscription, vnet=request.vnet_name):
                result.merged = self.merge_engine.merge(new, existing)
                result.merged_xml = self.serializer.serialize(result.merged)
            result.replaced_dns_servers = self.merge_engine.replaced_dns_servers(new, existing)
            result.replaced_sites = self.merge_engine.replaced_sites(new, existing)
            result.stage = ProvisionStage.MERGED

            if result.replaced_dns_servers or result.replaced_sites:
                logger.warning(
                    f"Replacing existing entries: dns={result.replaced_dns_servers} "
                    f"sites={result.replaced_sites}"
                )

            if dry_run:
                logger.info("DRY RUN: merged configuration not submitted")
                return result

            self._submit(request, result, config_path)
            result.stage = ProvisionStage.SUBMITTED

            logger.info("Reading back confirmed network configuration")
            result.confirmed_xml = self.client.get_configuration()
            result.stage = ProvisionStage.DONE

        except Exception as e:
            logger.error(f"Provisioning failed at stage '{result.stage.value}': {e}")
            result.failed_stage = result.stage
            result.stage = ProvisionStage.FAILED
            e.provision_result = result
            raise

        logger.info(f"Virtual network {request.vnet_name} provisioned")
        return result

    def _submit(
        self,
        request: VNetRequest,
        result: ProvisionResult,
        config_path: str | Path,
    ) -> None:
        """Stage the merged configuration and apply it, auditing the outcome."""
        logger.info(f"Submitting merged configuration via {config_path}")
        try:
            with staged_config_file(config_path, result.merged_xml) as staged:
                self.client.apply_configuration(staged)
        except Exception as e:
            self._audit(request, result, success=False, error=str(e))
            raise
        self._audit(request, result, success=True)

    def _audit(
        self,
        request: VNetRequest,
        result: ProvisionResult,
        success: bool,
        error: str | None = None,
    ) -> None:
        if not self.audit:
            return
        log_change(
            subscription_id=self.client.subscription_id,
            vnet_name=request.vnet_name,
            dns_server_name=request.dns_server_name,
            success=success,
            replaced_dns_servers=result.replaced_dns_servers,
            replaced_sites=result.replaced_sites,
            error=error,
        )


def provision_virtual_network(
    client: NetworkConfigClient,
    request: VNetRequest,
    config_path: str | Path,
) -> str:
    """Provision a virtual network and return the confirmed configuration XML."""
    return VNetProvisioner(client).provision(request, config_path).confirmed_xml
