"""Exceptions raised while building RPC controllers."""

from typing import Optional


class ServiceNotCreatedError(RuntimeError):
    """Raised when a container service cannot be built."""


class ConfigurationError(ServiceNotCreatedError):
    """Raised when an ``api-tools-rpc`` entry cannot be turned into a controller.

    Attributes:
        service_name: Name of the requested service, when known.
    """

    def __init__(self, message: str, service_name: Optional[str] = None):
        super().__init__(message)
        self.service_name = service_name
