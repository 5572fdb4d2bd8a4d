"""Composer plugins declared in a YAML manifest.

Example manifest::

    composers:
      - name: text
        target: flowmail_core.mail.default:PlainTextMailCreator
        options:
          mime_type: text/plain;charset=utf-8

``target`` is ``module.path:attribute``. The attribute is called with
``options`` as keyword arguments; a ``formatter`` keyword is added when the
callable accepts one and the manifest does not set it.
"""

from __future__ import annotations

import importlib
import inspect
from dataclasses import dataclass, field
from typing import Any

import fsspec
import yaml

from flowmail_core.config import MailConfig, get_config
from flowmail_core.errors import PermanentError, ValidationError
from flowmail_core.logging import get_logger
from flowmail_core.mail.composer import MailCreator
from flowmail_core.mail.default import DefaultMailCreator
from flowmail_core.mail.registry import MailCreatorRegistry
from flowmail_core.timeutils import DefaultTimeFormatter, TimeFormatter

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComposerEntry:
    name: str
    target: str
    options: dict[str, Any] = field(default_factory=dict)


def load_composer_manifest(uri: str) -> list[ComposerEntry]:
    fs, path = fsspec.core.url_to_fs(uri)
    if not fs.exists(path):
        logger.info("Composer manifest not found", extra={"manifest_uri": uri})
        return []
    with fs.open(path, "rb") as handle:
        payload = yaml.safe_load(handle.read().decode("utf-8"))
    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise ValidationError(f"Composer manifest must be a mapping: {uri}")
    items = payload.get("composers") or []
    if not isinstance(items, list):
        raise ValidationError(f"'composers' must be a list: {uri}")
    return [_entry_from_dict(item, index) for index, item in enumerate(items)]


def load_composer(
    entry: ComposerEntry,
    formatter: TimeFormatter | None = None,
) -> MailCreator:
    module_path, _, attr = entry.target.partition(":")
    if not module_path or not attr:
        raise PermanentError(
            f"Composer '{entry.name}' target must be in the form module.path:callable"
        )
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise PermanentError(
            f"Failed to import composer module '{module_path}': {exc}"
        ) from exc
    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise PermanentError(
            f"Composer target '{entry.target}' not found or not callable"
        )

    options = dict(entry.options)
    if formatter is not None and "formatter" not in options and _accepts(
        factory, "formatter"
    ):
        options["formatter"] = formatter
    try:
        creator = factory(**options)
    except TypeError as exc:
        raise PermanentError(
            f"Composer '{entry.name}' rejected its options: {exc}"
        ) from exc
    if not isinstance(creator, MailCreator):
        raise PermanentError(
            f"Composer '{entry.name}' does not implement the mail creator operations"
        )
    return creator


def register_composers(
    registry: MailCreatorRegistry,
    uri: str,
    formatter: TimeFormatter | None = None,
) -> list[str]:
    names: list[str] = []
    for entry in load_composer_manifest(uri):
        registry.register(entry.name, load_composer(entry, formatter))
        names.append(entry.name)
    logger.info(
        "Composer manifest loaded",
        extra={"manifest_uri": uri, "composers": ",".join(names)},
    )
    return names


def registry_from_config(config: MailConfig | None = None) -> MailCreatorRegistry:
    cfg = config or get_config()
    formatter = DefaultTimeFormatter.from_config(cfg)
    registry = MailCreatorRegistry(
        DefaultMailCreator(formatter=formatter, mime_type=cfg.mime_type)
    )
    if cfg.composer_manifest_uri:
        register_composers(registry, cfg.composer_manifest_uri, formatter)
    return registry


def _entry_from_dict(item: object, index: int) -> ComposerEntry:
    if not isinstance(item, dict):
        raise ValidationError(f"Composer entry {index} must be a mapping")
    name = str(item.get("name") or "").strip()
    target = str(item.get("target") or "").strip()
    if not name or not target:
        raise ValidationError(f"Composer entry {index} requires name and target")
    options = item.get("options") or {}
    if not isinstance(options, dict):
        raise ValidationError(f"Composer '{name}' options must be a mapping")
    return ComposerEntry(name=name, target=target, options=dict(options))


def _accepts(factory: Any, parameter: str) -> bool:
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError):
        return False
    for param in signature.parameters.values():
        if param.name == parameter or param.kind is inspect.Parameter.VAR_KEYWORD:
            return True
    return False
