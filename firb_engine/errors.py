"""Exception types raised by the engine.

Business outcomes such as "not eligible" are result values, never exceptions.
Only malformed inputs and programmer errors raise.
"""


class FIRBEngineError(Exception):
    """Base class for all engine errors."""


class ValidationError(FIRBEngineError, ValueError):
    """Input outside its documented range (e.g. hold period of 0 years)."""


class ComputationError(FIRBEngineError, RuntimeError):
    """A calculation was invoked with arguments no valid input can produce."""
