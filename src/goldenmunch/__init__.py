"""Golden Munch kiosk idle screen."""

__version__ = "0.1.0"
