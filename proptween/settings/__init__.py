"""Process-wide configuration."""

from .defaults import TransitionDefaults, get_defaults, reset_defaults, set_defaults

__all__ = ["TransitionDefaults", "get_defaults", "reset_defaults", "set_defaults"]
