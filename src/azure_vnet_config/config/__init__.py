"""Subscription settings management."""
from .settings import SubscriptionSettings, load_settings, find_settings_file

__all__ = ["SubscriptionSettings", "load_settings", "find_settings_file"]
