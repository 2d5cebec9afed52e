"""Azure Service Management REST client for network configuration.

Uses the classic management endpoints:

    GET /{subscription}/services/networking/media
    PUT /{subscription}/services/networking/media   (Content-Type: text/plain)
    GET /{subscription}/operations/{request-id}

Authentication is by management certificate (client TLS).
"""
import logging
import ssl
import xml.etree.ElementTree as xmltree
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from ..config.settings import SubscriptionSettings
from ..errors import ManagementAPIError, OperationFailedError, OperationTimeoutError
from ..utils.logging_config import timed
from ..utils.polling import PollTimeout, poll_until
from .base import NetworkConfigClient

logger = logging.getLogger(__name__)

IN_PROGRESS = "InProgress"
SUCCEEDED = "Succeeded"
FAILED = "Failed"


@dataclass
class OperationStatus:
    """Status of an asynchronous management operation."""
    request_id: str
    status: str
    http_status: Optional[int] = None
    error_code: str = ""
    error_message: str = ""


def _parse_error(response: httpx.Response) -> tuple[str, str]:
    """Extract Code and Message from an Azure <Error> body."""
    try:
        root = xmltree.fromstring(response.text)
    except xmltree.ParseError:
        return "", response.text.strip() or response.reason_phrase
    code = (root.findtext("{*}Code") or "").strip()
    message = (root.findtext("{*}Message") or "").strip()
    return code, message


class ServiceManagementClient(NetworkConfigClient):
    """Network configuration client backed by httpx."""

    def __init__(
        self,
        settings: SubscriptionSettings,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.settings = settings
        self.subscription_id = settings.subscription_id
        self._http = httpx.Client(
            base_url=settings.base_url,
            headers={"x-ms-version": settings.api_version},
            timeout=httpx.Timeout(settings.timeout),
            verify=self._ssl_context(),
            transport=transport,
        )

    def _ssl_context(self) -> ssl.SSLContext | bool:
        """Build a TLS context carrying the management certificate."""
        if not self.settings.certificate_file:
            logger.warning(
                f"No certificate_file configured for subscription {self.subscription_id}; "
                "requests are sent without a management certificate"
            )
            return True
        context = ssl.create_default_context()
        context.load_cert_chain(
            self.settings.certificate_file,
            keyfile=self.settings.key_file,
        )
        return context

    @property
    def _media_path(self) -> str:
        return f"/{self.subscription_id}/services/networking/media"

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        code, message = _parse_error(response)
        raise ManagementAPIError(response.status_code, code, message)

    @timed("get_configuration")
    def get_configuration(self) -> str:
        """Fetch the subscription's network configuration XML."""
        response = self._http.get(self._media_path)

        if response.status_code == 404:
            code, message = _parse_error(response)
            if code == "ResourceNotFound":
                logger.info(
                    f"Subscription {self.subscription_id} has no network configuration"
                )
                return ""
            raise ManagementAPIError(response.status_code, code, message)

        self._raise_for_status(response)
        logger.debug(f"Fetched network configuration ({len(response.text)} bytes)")
        return response.text

    @timed("apply_configuration")
    def apply_configuration(self, path: str | Path) -> None:
        """Submit the configuration file and wait for the operation to finish."""
        content = Path(path).read_text(encoding="utf-8")

        response = self._http.put(
            self._media_path,
            content=content.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )
        self._raise_for_status(response)

        request_id = response.headers.get("x-ms-request-id")
        if response.status_code != 202:
            return
        if not request_id:
            logger.warning(
                "Network configuration accepted without x-ms-request-id; "
                "completion of the operation is not confirmed"
            )
            return
        logger.info(f"Network configuration accepted, operation {request_id}")
        self.wait_for_operation(request_id)

    def get_operation_status(self, request_id: str) -> OperationStatus:
        """Get the status of an asynchronous operation."""
        response = self._http.get(f"/{self.subscription_id}/operations/{request_id}")
        self._raise_for_status(response)

        root = xmltree.fromstring(response.text)
        http_status = root.findtext("{*}HttpStatusCode")

        return OperationStatus(
            request_id=request_id,
            status=(root.findtext("{*}Status") or "").strip(),
            http_status=int(http_status) if http_status else None,
            error_code=(root.findtext("{*}Error/{*}Code") or "").strip(),
            error_message=(root.findtext("{*}Error/{*}Message") or "").strip(),
        )

    def wait_for_operation(self, request_id: str) -> OperationStatus:
        """
        Poll an operation until it leaves the InProgress state.

        Raises:
            OperationFailedError: If the operation finished as Failed
            OperationTimeoutError: If it is still running after operation_timeout
        """
        try:
            status = poll_until(
                lambda: self.get_operation_status(request_id),
                lambda s: s.status == IN_PROGRESS,
                interval=self.settings.poll_interval,
                timeout=self.settings.operation_timeout,
            )
        except PollTimeout as e:
            raise OperationTimeoutError(
                request_id, self.settings.operation_timeout
            ) from e

        if status.status == FAILED:
            raise OperationFailedError(
                request_id,
                status.error_code,
                status.error_message,
                status.http_status,
            )

        logger.info(f"Operation {request_id} finished: {status.status}")
        return status

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
