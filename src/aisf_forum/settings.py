"""Typed configuration for aisf-forum.

Reads a single ``AISF_FORUM`` dict from Django settings and exposes it as
composed, frozen dataclasses with sensible defaults.

Usage::

    from aisf_forum.settings import get_config

    config = get_config()
    config.stripe.secret_key
    config.currency
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field

from django.conf import settings
from django.test.signals import setting_changed


@dataclass(frozen=True, slots=True)
class StripeConfig:
    """Stripe payment gateway configuration."""

    secret_key: str | None = None
    webhook_secret: str | None = None
    api_version: str = "2025-12-15.clover"
    webhook_tolerance: int = 300


@dataclass(frozen=True, slots=True)
class ForumConfig:
    """Top-level aisf-forum configuration."""

    stripe: StripeConfig = field(default_factory=StripeConfig)
    currency: str = "AUD"
    order_reference_prefix: str = "AISF"
    dashboard_url: str = "/dashboard/tickets/"
    applications_url: str = "/dashboard/applications/"
    profile_url: str = "/dashboard/profile/"


@functools.lru_cache(maxsize=1)
def get_config() -> ForumConfig:
    """Build and return the forum configuration.

    Reads ``settings.AISF_FORUM`` (a plain dict) and returns a frozen
    :class:`ForumConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw = getattr(settings, "AISF_FORUM", {})
    if not isinstance(raw, Mapping):
        msg = "AISF_FORUM must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    stripe_data = raw_data.pop("stripe", {})
    if not isinstance(stripe_data, Mapping):
        msg = "AISF_FORUM['stripe'] must be a mapping (dict-like object)"
        raise TypeError(msg)

    config = ForumConfig(
        stripe=StripeConfig(**dict(stripe_data)),
        **raw_data,
    )
    _validate_forum_config(config)
    return config


def _validate_forum_config(config: ForumConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    if not isinstance(config.currency, str) or not config.currency.strip():
        msg = "AISF_FORUM['currency'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.order_reference_prefix, str) or not config.order_reference_prefix.strip():
        msg = "AISF_FORUM['order_reference_prefix'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.stripe.webhook_tolerance, int) or config.stripe.webhook_tolerance <= 0:
        msg = "AISF_FORUM['stripe']['webhook_tolerance'] must be a positive integer"
        raise ValueError(msg)
    for key in ("dashboard_url", "applications_url", "profile_url"):
        value = getattr(config, key)
        if not isinstance(value, str) or not value.startswith("/"):
            msg = f"AISF_FORUM['{key}'] must be an absolute path starting with '/'"
            raise ValueError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "AISF_FORUM":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="aisf_forum.settings.clear_config_cache")
