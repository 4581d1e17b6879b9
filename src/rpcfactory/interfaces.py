"""Core interfaces for the RPC controller factory.

These define the container contract the factory consults and the shapes a
resolved callable can take.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Union


class IContainer(ABC):
    """Interface for a key-based service container.

    Only ``has`` and ``get`` are required. Containers that sit below a parent
    locator may also expose ``get_service_locator()``.
    """

    @abstractmethod
    def has(self, key: str) -> bool:
        """Return True if the container can provide ``key``."""
        pass

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the service registered as ``key``."""
        pass


@dataclass(frozen=True)
class DirectCallable:
    """An invocable value wrapped as-is.

    Attributes:
        target: The function, lambda or callable object that was configured.
    """
    target: Callable[..., Any]

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        return self.target(*args, **kwargs)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.invoke(*args, **kwargs)


@dataclass(frozen=True)
class BoundMethod:
    """A (owner, method name) pair produced from a ``Class::method`` string.

    The method is looked up on ``owner`` at invoke time, so an owner fetched
    from a container may gain or swap the attribute after resolution.

    Attributes:
        owner: Instance (or any object) fetched from a container or freshly
            constructed.
        method_name: Attribute name to call on ``owner``.
    """
    owner: Any
    method_name: str

    def resolve(self) -> Callable[..., Any]:
        """Return the bound attribute, raising if it is missing or not callable."""
        method = getattr(self.owner, self.method_name, None)
        if method is None or not callable(method):
            raise AttributeError(
                f"{type(self.owner).__name__} has no callable attribute '{self.method_name}'"
            )
        return method

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        return self.resolve()(*args, **kwargs)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.invoke(*args, **kwargs)

    def __iter__(self):
        # Allows ``owner, method = bound`` unpacking.
        return iter((self.owner, self.method_name))

    def __repr__(self) -> str:
        return f"BoundMethod({type(self.owner).__name__}::{self.method_name})"


ResolvedCallable = Union[DirectCallable, BoundMethod]
