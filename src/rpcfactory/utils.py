"""Shared import-path helpers for the RPC controller factory.

Class and function references in configuration are plain strings. These
helpers turn them into Python objects.
"""

import importlib
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def split_import_path(ref: str) -> Optional[tuple[str, str]]:
    """Split an import path into (module path, attribute name).

    Supports two formats:
    - ``"module.path:attr_name"`` (entry point style, preferred)
    - ``"module.path.attr_name"`` (dot-separated)

    Returns:
        The pair, or None if ``ref`` has no module component.
    """
    if ":" in ref:
        module_path, attr_name = ref.rsplit(":", 1)
    elif "." in ref:
        module_path, attr_name = ref.rsplit(".", 1)
    else:
        return None
    if not module_path or not attr_name:
        return None
    return module_path, attr_name


def _import_attribute(ref: str) -> Optional[Any]:
    parts = split_import_path(ref)
    if parts is None:
        return None
    module_path, attr_name = parts
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        logger.debug(f"Could not import module '{module_path}' for '{ref}': {e}")
        return None
    return getattr(module, attr_name, None)


def load_class(ref: str) -> Optional[type]:
    """Resolve an import path to a class.

    Args:
        ref: Import path such as ``"myapp.rpc.PingController"``.

    Returns:
        The class, or None if the path does not name an importable class.

    Raises:
        Any non-ImportError raised while importing the module, including
        TypeError for relative paths.
    """
    attr = _import_attribute(ref)
    if attr is None or not inspect.isclass(attr):
        return None
    return attr


def load_callable(ref: str) -> Optional[Callable[..., Any]]:
    """Resolve an import path to a callable, or None if it does not name one."""
    attr = _import_attribute(ref)
    if attr is None or not callable(attr):
        return None
    return attr
