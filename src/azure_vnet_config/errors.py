"""Exception hierarchy for vnetcraft."""
from typing import Optional


class VNetCraftError(Exception):
    """Base class for all vnetcraft errors."""
    pass


class ConfigurationError(VNetCraftError):
    """Subscription settings are missing or invalid."""
    pass


class ParseError(VNetCraftError):
    """Network configuration XML could not be parsed."""
    pass


class ManagementAPIError(VNetCraftError):
    """The Service Management API answered with an error status."""

    def __init__(
        self,
        status_code: int,
        code: str = "",
        message: str = "",
    ):
        self.status_code = status_code
        self.code = code
        self.message = message
        detail = f"{code}: {message}" if code else message
        super().__init__(f"HTTP {status_code} {detail}".rstrip())


class OperationFailedError(VNetCraftError):
    """An accepted asynchronous operation finished with status Failed."""

    def __init__(
        self,
        request_id: str,
        code: str = "",
        message: str = "",
        http_status: Optional[int] = None,
    ):
        self.request_id = request_id
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(f"Operation {request_id} failed: {code} {message}".rstrip())


class OperationTimeoutError(VNetCraftError):
    """An asynchronous operation was still in progress after the timeout."""

    def __init__(self, request_id: str, timeout: float):
        self.request_id = request_id
        self.timeout = timeout
        super().__init__(
            f"Operation {request_id} still in progress after {timeout:g}s"
        )
