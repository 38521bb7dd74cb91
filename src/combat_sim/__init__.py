"""Damage, penetration and time-to-kill simulation for armored targets."""

__version__ = "0.1.0"
