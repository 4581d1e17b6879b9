"""RPC controller factory.

Resolves configuration-declared callables into RPC controllers inside a
dependency-injection container. Key pieces:

1. **RpcControllerFactory**: abstract factory that a container consults for
   any service name listed under ``api-tools-rpc`` in its configuration.

2. **Callable marshalling**: ``"Class::method"`` strings are resolved through
   the ``ControllerManager`` sub-container, then the outer container, then
   by importing and instantiating the class.

3. **Cycle guard**: a controller manager configured to build classes through
   this same factory cannot send resolution into an infinite loop.

Usage:
    from rpcfactory import RpcControllerFactory

    factory = RpcControllerFactory()
    if factory.can_create(container, "Ping"):
        controller = factory(container, "Ping")
        controller.dispatch()
"""

from .config import FactoryConfig
from .controller import RpcController
from .errors import ConfigurationError, ServiceNotCreatedError
from .factory import RpcControllerFactory
from .interfaces import BoundMethod, DirectCallable, IContainer, ResolvedCallable

__all__ = [
    "RpcControllerFactory",
    "RpcController",
    "FactoryConfig",
    "ConfigurationError",
    "ServiceNotCreatedError",
    "IContainer",
    "ResolvedCallable",
    "DirectCallable",
    "BoundMethod",
]
