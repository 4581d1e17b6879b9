"""Abstract factory building RPC controllers from configured callables."""

import inspect
import logging
from collections.abc import Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

from .config import FactoryConfig
from .controller import RpcController
from .errors import ConfigurationError
from .interfaces import BoundMethod, DirectCallable, IContainer, ResolvedCallable
from .utils import load_callable, load_class

logger = logging.getLogger(__name__)

_MISSING = object()

# Maps id(factory) -> class name being looked up in the controller manager.
# Scoped per thread and per asyncio task; never mutated in place.
_RESOLVING: ContextVar[Optional[dict[int, str]]] = ContextVar(
    "rpc_factory_resolving", default=None
)


class RpcControllerFactory:
    """Abstract factory for RPC controllers.

    A container consults ``can_create`` for names it does not know, then
    calls the factory to build the service. Each service listed under the
    ``api-tools-rpc`` config section maps to a callable:

        {"api-tools-rpc": {"Ping": {"callable": "myapp.rpc.PingController::ping"}}}

    ``Class::method`` strings are resolved through the ``ControllerManager``
    sub-container first. That manager usually has this same factory
    registered, so looking the class up there can loop back into the
    factory. While a class is being looked up in the manager its name is
    held in a context variable, and both ``can_create`` and the manager
    lookup refuse that name until the lookup returns.

    Usage:
        factory = RpcControllerFactory()
        if factory.can_create(container, "Ping"):
            controller = factory(container, "Ping")
    """

    def __init__(self, config: Optional[FactoryConfig] = None):
        self.config = config or FactoryConfig()

    @property
    def resolving(self) -> Optional[str]:
        """Class name currently being looked up in the controller manager."""
        return (_RESOLVING.get() or {}).get(id(self))

    @contextmanager
    def _resolving_class(self, class_name: str) -> Iterator[None]:
        """Mark ``class_name`` as in progress for this factory until exit."""
        token = _RESOLVING.set({**(_RESOLVING.get() or {}), id(self): class_name})
        try:
            yield
        finally:
            _RESOLVING.reset(token)

    def can_create(self, container: IContainer, requested_name: str) -> bool:
        """Determine if a controller can be created for ``requested_name``."""
        if requested_name == self.resolving:
            logger.debug(f"Refusing '{requested_name}': lookup already in progress")
            return False

        entry = self._service_config(container, requested_name)
        if entry is None:
            return False

        if entry.get("callable") is None:
            logger.debug(f"RPC service '{requested_name}' has no callable configured")
            return False

        return True

    def __call__(
        self,
        container: IContainer,
        requested_name: str,
        options: Optional[dict] = None,
    ) -> RpcController:
        """Create and return an RpcController for ``requested_name``.

        Args:
            container: Container holding the config and candidate services
            requested_name: RPC service name under ``api-tools-rpc``
            options: Accepted for factory-signature compatibility; unused

        Returns:
            A new RpcController wrapping the resolved callable.

        Raises:
            ConfigurationError: If no callable is configured, the configured
                value is not usable, or a ``Class::method`` class cannot be
                found or built.
        """
        entry = self._service_config(container, requested_name)
        if entry is None or entry.get("callable") is None:
            raise ConfigurationError(
                f"No {self.config.config_key} callable configured for '{requested_name}'",
                service_name=requested_name,
            )

        callable_spec = entry["callable"]
        if not isinstance(callable_spec, str) and not callable(callable_spec):
            raise ConfigurationError(
                f"Unable to create a controller from the configured "
                f"{self.config.config_key} callable for '{requested_name}'",
                service_name=requested_name,
            )

        resolved: ResolvedCallable
        if isinstance(callable_spec, str):
            if self.config.separator in callable_spec:
                resolved = self.marshal_callable(
                    callable_spec, container, service_name=requested_name
                )
            else:
                resolved = self._load_function(callable_spec, requested_name)
        else:
            resolved = DirectCallable(callable_spec)

        controller = RpcController()
        controller.set_wrapped_callable(resolved)
        logger.info(f"Created RPC controller for '{requested_name}' ({resolved!r})")
        return controller

    def create(self, container: IContainer, requested_name: str) -> RpcController:
        """Alias of calling the factory."""
        return self(container, requested_name)

    def can_create_service_with_name(
        self, controller_manager: Any, name: str, requested_name: str
    ) -> bool:
        """Determine if a controller can be created (v2 signature).

        Provided for backwards compatibility; proxies to can_create().
        """
        return self.can_create(self._parent_locator(controller_manager), requested_name)

    def create_service_with_name(
        self, controller_manager: Any, name: str, requested_name: str
    ) -> RpcController:
        """Create a controller (v2 signature).

        Provided for backwards compatibility; proxies to __call__().
        """
        return self(self._parent_locator(controller_manager), requested_name)

    def marshal_callable(
        self,
        spec: str,
        container: IContainer,
        service_name: Optional[str] = None,
    ) -> BoundMethod:
        """Marshal a bound method from a ``Class::method`` string.

        Lookup order:
        1. The controller manager sub-container, unless the class is already
           being looked up there
        2. The container itself
        3. Importing the class and constructing it with no arguments

        Args:
            spec: String of the form ``Class::method``
            container: Container to resolve the class from
            service_name: RPC service being built, for error reporting

        Returns:
            BoundMethod pairing the resolved object with the method name.
        """
        class_name, separator, method = spec.partition(self.config.separator)
        if not separator:
            raise ConfigurationError(
                f"Callable '{spec}' is not of the form Class{self.config.separator}method",
                service_name=service_name,
            )
        if not class_name or not method:
            raise ConfigurationError(
                f"Callable '{spec}' must name both a class and a method",
                service_name=service_name,
            )

        owner = _MISSING
        manager_key = self.config.controller_manager
        if container.has(manager_key):
            if self.resolving != class_name:
                with self._resolving_class(class_name):
                    owner = self._fetch_from_container(class_name, container.get(manager_key))
            else:
                logger.warning(
                    f"Skipping {manager_key} lookup for '{class_name}': already resolving it"
                )

        if owner is _MISSING:
            owner = self._fetch_from_container(class_name, container)

        if owner is _MISSING:
            owner = self._instantiate(class_name, spec, service_name)

        return BoundMethod(owner, method)

    def _service_config(self, container: IContainer, requested_name: str) -> Optional[Mapping]:
        """Return the ``api-tools-rpc`` entry for ``requested_name``, if any."""
        if not container.has(self.config.config_service):
            return None

        config = container.get(self.config.config_service)
        if not isinstance(config, Mapping):
            return None

        section = config.get(self.config.config_key)
        if not isinstance(section, Mapping):
            return None

        entry = section.get(requested_name)
        if not isinstance(entry, Mapping):
            return None
        return entry

    def _fetch_from_container(self, class_name: str, container: IContainer) -> Any:
        if not container.has(class_name):
            return _MISSING
        logger.debug(f"Resolved '{class_name}' from {type(container).__name__}")
        return container.get(class_name)

    def _instantiate(self, class_name: str, spec: str, service_name: Optional[str]) -> Any:
        """Construct ``class_name`` directly with no constructor arguments."""
        if not self.config.allow_class_instantiation:
            raise ConfigurationError(
                f"Cannot create callback {spec} as class {class_name} "
                f"is not provided by any container",
                service_name=service_name,
            )

        try:
            cls = load_class(class_name)
        except Exception as e:
            raise ConfigurationError(
                f"Cannot create callback {spec}: importing class {class_name} failed ({e})",
                service_name=service_name,
            ) from e
        if cls is None:
            raise ConfigurationError(
                f"Cannot create callback {spec} as class {class_name} does not exist",
                service_name=service_name,
            )

        if inspect.isabstract(cls):
            raise ConfigurationError(
                f"Cannot create callback {spec} as class {class_name} is abstract",
                service_name=service_name,
            )

        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            # Some builtin types expose no signature; cls() reports arity below.
            signature = None
        if signature is not None:
            try:
                signature.bind()
            except TypeError as e:
                raise ConfigurationError(
                    f"Cannot create callback {spec}: class {class_name} "
                    f"could not be constructed without arguments ({e})",
                    service_name=service_name,
                ) from e

        try:
            instance = cls()
        except Exception as e:
            raise ConfigurationError(
                f"Cannot create callback {spec}: class {class_name} "
                f"could not be constructed ({e})",
                service_name=service_name,
            ) from e

        logger.debug(f"Instantiated '{class_name}' for callback {spec}")
        return instance

    def _load_function(self, ref: str, service_name: str) -> DirectCallable:
        """Resolve a plain string callable as an import path."""
        try:
            func = load_callable(ref)
        except Exception as e:
            raise ConfigurationError(
                f"Unable to create a controller for '{service_name}': "
                f"importing callable '{ref}' failed ({e})",
                service_name=service_name,
            ) from e
        if func is None:
            raise ConfigurationError(
                f"Unable to create a controller from the configured "
                f"{self.config.config_key} callable '{ref}' for '{service_name}'",
                service_name=service_name,
            )
        return DirectCallable(func)

    @staticmethod
    def _parent_locator(controller_manager: Any) -> Any:
        get_locator = getattr(controller_manager, "get_service_locator", None)
        parent = get_locator() if callable(get_locator) else None
        return parent or controller_manager
