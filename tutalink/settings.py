"""System configuration values and the site footer."""
from __future__ import annotations

from flask import current_app

from .domain import FooterContent, SystemConfig
from .errors import NotFoundError, ValidationError
from .seed import STRIPE_CONFIG_DESCRIPTIONS, default_footer
from .storage import Storage
from .validation import text


def get_config_or_404(storage: Storage, key: str) -> SystemConfig:
    config = storage.get_system_config(key)
    if config is None:
        raise NotFoundError("Configuration not found")
    return config


def put_config(storage: Storage, key: str, payload: dict) -> SystemConfig:
    value = text(payload, "value")
    if not value:
        raise ValidationError("Value is required")

    existing = storage.get_system_config(key)
    description = existing.description if existing else STRIPE_CONFIG_DESCRIPTIONS.get(key)
    config = storage.save_system_config(SystemConfig(key=key, value=value, description=description))
    # The value may be a secret; log the key only.
    current_app.logger.info("System config %r updated", key)
    return config


def get_footer(storage: Storage) -> FooterContent:
    return storage.get_footer_content() or default_footer()


def _entries(payload: dict, key: str, fields: tuple[str, str]) -> list[dict[str, str]]:
    raw = payload.get(key, [])
    if not isinstance(raw, list):
        raise ValidationError(f"{key} must be a list")
    entries = []
    for item in raw:
        if not isinstance(item, dict) or not all(isinstance(item.get(f), str) for f in fields):
            raise ValidationError(f"each {key} entry needs {fields[0]} and {fields[1]}")
        entries.append({f: item[f] for f in fields})
    return entries


def replace_footer(storage: Storage, payload: dict) -> FooterContent:
    """Replace the whole footer record; omitted lists become empty."""
    copyright_text = payload.get("copyright")
    if not isinstance(copyright_text, str):
        raise ValidationError("copyright is required")

    content = FooterContent(
        id=1,
        copyright=copyright_text,
        links=_entries(payload, "links", ("text", "url")),
        social_media=_entries(payload, "socialMedia", ("platform", "url")),
    )
    return storage.save_footer_content(content)
