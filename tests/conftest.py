"""Pytest fixtures for RPC controller factory tests."""

import textwrap
import uuid

import pytest

from rpcfactory import RpcControllerFactory
from rpcfactory.testing import InMemoryContainer


@pytest.fixture
def factory():
    """Provide a factory with default configuration."""
    return RpcControllerFactory()


@pytest.fixture
def container():
    """Provide an application container with an empty RPC section."""
    return InMemoryContainer({"config": {"api-tools-rpc": {}}})


@pytest.fixture
def controller_manager(container, factory):
    """Provide a controller manager that builds RPC controllers via the factory.

    Registered in the application container as ``ControllerManager``, the
    layout that lets class lookups loop back into the factory.
    """
    manager = InMemoryContainer(parent=container)
    manager.add_abstract_factory(factory)
    container.set_service("ControllerManager", manager)
    return manager


@pytest.fixture
def write_module(tmp_path, monkeypatch):
    """Write importable modules under tmp_path.

    Returns a function taking module source and returning the module name.
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def write(source: str) -> str:
        name = f"rpc_targets_{uuid.uuid4().hex}"
        (tmp_path / f"{name}.py").write_text(textwrap.dedent(source))
        return name

    return write
