"""Error taxonomy for the equity engine.

- ConfigurationError: malformed vesting or valuation input. Raised at the point
  of use and never retried; the caller (a form or settings collaborator) owns
  the user-facing message.
- DegenerateInputWarning: inputs that are legal but carry no information
  (empty roster, zero total slices). The engine returns a well-defined
  zero/empty result and emits this warning instead of raising.
"""


class ConfigurationError(ValueError):
    """Raised when a vesting or valuation configuration is malformed.

    Subclasses ValueError so that Pydantic model validators can raise it
    directly; at model construction time it surfaces wrapped in a
    ``pydantic.ValidationError``.
    """
    pass


class DegenerateInputWarning(UserWarning):
    """Emitted when a computation runs on an empty or zero-weight input."""
    pass
