"""Factory configuration.

Names the container entries and the string conventions the factory relies
on. Can be loaded from:
- a dictionary
- a YAML file
- environment variables
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class FactoryConfig:
    """Configuration for RpcControllerFactory.

    Attributes:
        config_service: Container key holding the application config mapping
        config_key: Top-level config section listing RPC services
        controller_manager: Container key of the controller sub-container
        separator: Separator between class and method in callable strings
        allow_class_instantiation: Construct the class directly when no
            container provides it
    """
    config_service: str = "config"
    config_key: str = "api-tools-rpc"
    controller_manager: str = "ControllerManager"
    separator: str = "::"
    allow_class_instantiation: bool = True

    def __post_init__(self):
        if not self.separator:
            raise ValueError("separator must not be empty")

    @classmethod
    def from_dict(cls, data: dict) -> "FactoryConfig":
        """Create configuration from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_file(cls, path: str | Path) -> "FactoryConfig":
        """Load configuration from a YAML file.

        A missing file yields the defaults. The settings may sit at the top
        level or under an ``rpc_factory`` section. Raises ValueError if the
        file (or that section) is not a mapping.
        """
        path = Path(path).expanduser()
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}"
            )

        section = data.get("rpc_factory", data)
        if not isinstance(section, dict):
            raise ValueError(
                f"rpc_factory section in {path} must be a mapping, got {type(section).__name__}"
            )
        return cls.from_dict(section)

    @classmethod
    def from_env(cls, prefix: str = "RPC_FACTORY") -> "FactoryConfig":
        """Load configuration from environment variables.

        Environment variables:
            {prefix}_CONFIG: Path to a YAML file loaded first
            {prefix}_CONFIG_SERVICE: Container key of the config mapping
            {prefix}_CONFIG_KEY: Config section listing RPC services
            {prefix}_CONTROLLER_MANAGER: Container key of the controller manager
            {prefix}_SEPARATOR: Class/method separator
            {prefix}_ALLOW_INSTANTIATION: true|false
        """
        def get(key: str, default: str = None) -> Optional[str]:
            return os.environ.get(f"{prefix}_{key}", default)

        config_path = get("CONFIG")
        data = {}
        if config_path:
            base = cls.from_file(config_path)
            data = {f.name: getattr(base, f.name) for f in fields(base)}

        for field_name, env_key in (
            ("config_service", "CONFIG_SERVICE"),
            ("config_key", "CONFIG_KEY"),
            ("controller_manager", "CONTROLLER_MANAGER"),
            ("separator", "SEPARATOR"),
        ):
            val = get(env_key)
            if val is not None:
                data[field_name] = val

        allow = get("ALLOW_INSTANTIATION")
        if allow is not None:
            data["allow_class_instantiation"] = allow.lower() in ("true", "1", "yes")

        return cls.from_dict(data)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        for name in ("config_service", "config_key", "controller_manager"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{name} cannot be empty")

        if not isinstance(self.separator, str) or not self.separator:
            errors.append("separator cannot be empty")
        elif self.separator.strip() != self.separator:
            errors.append(f"separator must not contain surrounding whitespace, got {self.separator!r}")

        if self.controller_manager == self.config_service:
            errors.append(
                f"controller_manager and config_service must differ, both are '{self.config_service}'"
            )

        return errors
