"""Plugin discovery and metadata registration system.

This module implements convention-based discovery of provider plugins from
the ``message_sender.plugins`` package. Each plugin package registers its
metadata on import: identifier, configuration model and the factory that
builds a provider from a validated configuration.
"""

from __future__ import annotations

import importlib
import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

if TYPE_CHECKING:
    from message_sender.types import ProviderFactory

logger = logging.getLogger(__name__)

# Root directory that contains provider plugin packages
_PLUGIN_ROOT = Path(__file__).resolve().parent
# Fully-qualified package prefix for provider plugins
_PLUGIN_PACKAGE = __name__.rsplit(".", maxsplit=1)[0]
# Pattern enforcing lowercase identifiers for provider packages
_IDENTIFIER_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(slots=True, frozen=True)
class PluginMetadata:
    """Describes a provider plugin package."""

    identifier: str
    name: str
    package: str
    version: str
    config_model: type[BaseModel]
    factory: ProviderFactory
    description: str = ""


@dataclass(slots=True, frozen=True)
class ConfigField:
    """Describes one configuration field of a plugin."""

    name: str
    type: str
    required: bool
    default: str
    help: str


_PLUGIN_REGISTRY: dict[str, PluginMetadata] = {}
_SCANNED_PACKAGES: set[str] = set()
_SCAN_LOCK = threading.Lock()


def register_plugin(metadata: PluginMetadata) -> None:
    """Register plugin metadata provided by a plugin package.

    Plugin packages call this function during import. Identifiers must be
    unique and match the package directory name.
    """
    identifier = metadata.identifier.strip()
    if not _IDENTIFIER_PATTERN.match(identifier):
        msg = f"Plugin identifier must be lowercase alphanumeric with optional underscores: {identifier!r}"
        raise ValueError(msg)

    if identifier in _PLUGIN_REGISTRY:
        msg = f"Plugin identifier already registered: {identifier}"
        raise ValueError(msg)

    module_suffix = metadata.package.rsplit(".", maxsplit=1)[-1]
    if module_suffix != identifier:
        msg = f"Plugin identifier must match package name (identifier={identifier}, package={metadata.package})"
        raise ValueError(msg)

    _PLUGIN_REGISTRY[identifier] = metadata


def get_registered_plugins(*, force_rescan: bool = False) -> tuple[PluginMetadata, ...]:
    """Return registered plugin metadata sorted by identifier."""
    _scan_plugin_packages(force_rescan=force_rescan)
    return tuple(sorted(_PLUGIN_REGISTRY.values(), key=lambda meta: meta.identifier))


def get_plugin(identifier: str) -> PluginMetadata | None:
    """Retrieve metadata for the specified plugin identifier."""
    _scan_plugin_packages(force_rescan=False)
    return _PLUGIN_REGISTRY.get(identifier)


def describe_config_fields(model: type[BaseModel]) -> tuple[ConfigField, ...]:
    """List the configuration fields of a plugin configuration model.

    Example:
        >>> [f.name for f in describe_config_fields(WebhookConfig)]
        ['url', 'headers', 'timeout_seconds']
    """
    fields: list[ConfigField] = []
    for field_name, info in model.model_fields.items():
        annotation = info.annotation
        type_name = getattr(annotation, "__name__", None) or str(annotation)
        default = info.get_default(call_default_factory=True)
        fields.append(
            ConfigField(
                name=info.alias or field_name,
                type=type_name,
                required=info.is_required(),
                default="" if default is PydanticUndefined or default is None else str(default),
                help=info.description or "",
            )
        )
    return tuple(fields)


def _scan_plugin_packages(*, force_rescan: bool) -> None:
    """Scan the plugins directory and import provider packages."""
    with _SCAN_LOCK:
        for entry in sorted(_PLUGIN_ROOT.iterdir()):
            if not entry.is_dir():
                continue
            if entry.name.startswith("_") or entry.name == "__pycache__":
                continue
            if not (entry / "__init__.py").exists():
                continue

            module_name = f"{_PLUGIN_PACKAGE}.{entry.name}"
            if not force_rescan and module_name in _SCANNED_PACKAGES:
                continue

            registry_before = set(_PLUGIN_REGISTRY)
            try:
                _module = importlib.import_module(module_name)
            except Exception:
                logger.exception("Failed to import plugin package", extra={"plugin_module": module_name})
                continue

            if registry_before == set(_PLUGIN_REGISTRY) and entry.name not in _PLUGIN_REGISTRY:
                logger.warning(
                    "Plugin package imported but did not register metadata",
                    extra={"plugin_module": module_name},
                )

            _SCANNED_PACKAGES.add(module_name)
