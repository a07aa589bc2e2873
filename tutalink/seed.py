"""Default records created when an application starts with an empty store."""
from __future__ import annotations

from flask import Flask

from .auth import hash_password
from .domain import FooterContent, Role, SystemConfig, User
from .storage import Storage

DEMO_ADMIN_PASSWORD = "admin123"

STRIPE_CONFIG_DESCRIPTIONS = {
    "STRIPE_SECRET_KEY": "Stripe Secret Key for payment processing",
    "STRIPE_PUBLIC_KEY": "Stripe Public Key for client-side payment forms",
}


def default_footer() -> FooterContent:
    return FooterContent(
        copyright="© 2023 TutaLink. All rights reserved. KNUST Student Connection Platform.",
        links=[
            {"text": "Terms of Service", "url": "/terms"},
            {"text": "Privacy Policy", "url": "/privacy"},
            {"text": "Contact Us", "url": "/contact"},
        ],
        social_media=[
            {"platform": "facebook", "url": "https://facebook.com"},
            {"platform": "instagram", "url": "https://instagram.com"},
            {"platform": "twitter", "url": "https://twitter.com"},
        ],
    )


def seed_defaults(app: Flask, storage: Storage) -> None:
    """Create the admin account, payment config keys and footer if missing."""
    username = app.config["ADMIN_USERNAME"]
    password = app.config["ADMIN_PASSWORD"]

    if storage.find_user_by_username(username) is None:
        admin = storage.add_user(
            User(
                username=username,
                email=app.config["ADMIN_EMAIL"],
                password=hash_password(password),
                full_name="Admin User",
                role=Role.ADMIN,
                is_approved=True,
            )
        )
        app.logger.info("Seeded admin account %r (id=%s)", admin.username, admin.id)
        if password == DEMO_ADMIN_PASSWORD:
            app.logger.warning(
                "Admin account %r uses the demo password; set ADMIN_PASSWORD before deploying",
                username,
            )

    for key, description in STRIPE_CONFIG_DESCRIPTIONS.items():
        if storage.get_system_config(key) is None:
            storage.save_system_config(SystemConfig(key=key, value="", description=description))

    if storage.get_footer_content() is None:
        storage.save_footer_content(default_footer())
