"""Configuration for p4-bridge."""

from p4_bridge.config.settings import Settings

__all__ = ["Settings"]
