"""RPC controller wrapping a single resolved callable."""

from typing import Any, Optional

from .interfaces import ResolvedCallable


class RpcController:
    """Controller that delegates dispatch to one wrapped callable.

    A fresh controller is created for every resolution request; the only
    state it holds is the callable set through ``set_wrapped_callable``.
    """

    def __init__(self, wrapped_callable: Optional[ResolvedCallable] = None):
        self._wrapped_callable = wrapped_callable

    def set_wrapped_callable(self, wrapped_callable: ResolvedCallable) -> None:
        """Set the callable this controller dispatches to."""
        self._wrapped_callable = wrapped_callable

    def get_wrapped_callable(self) -> Optional[ResolvedCallable]:
        return self._wrapped_callable

    @property
    def wrapped_callable(self) -> Optional[ResolvedCallable]:
        """Get the wrapped callable (None until set)."""
        return self._wrapped_callable

    def dispatch(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke the wrapped callable with the given arguments."""
        if self._wrapped_callable is None:
            raise RuntimeError("RpcController has no wrapped callable. Call set_wrapped_callable() first.")
        return self._wrapped_callable.invoke(*args, **kwargs)

    def __repr__(self) -> str:
        return f"RpcController(wrapped={self._wrapped_callable!r})"
