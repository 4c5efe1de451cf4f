"""Exception types raised by the transition engine."""


class TransitionError(Exception):
    """Base class for all transition engine errors."""


class ConfigurationError(TransitionError, ValueError):
    """Invalid timing, easing or driver configuration."""


class CapabilityError(TransitionError, TypeError):
    """A target lacks the get/set capability or cannot hold a transition slot."""


class TransitionAlreadyStoppedError(TransitionError, RuntimeError):
    """A mutation was scheduled on a transition that is killed or finished."""
