"""muxwrap exception hierarchy.

Everything here is a registration-time failure. Method mismatches and
unmatched paths are ordinary responses (405, 404) and never raise.
"""


class MuxError(Exception):
    """Base for all muxwrap-specific errors."""


class ConfigurationError(MuxError):
    """Raised when a route or middleware registration is invalid.

    Raised while the mux is being built, before any request is served.
    A correct program never sees one.
    """


class DuplicateRegistration(ConfigurationError):
    """A pattern (or a pattern + method pair) was registered twice.

    The second registration never silently replaces the first.
    """

    def __init__(self, pattern: str, method: str | None = None) -> None:
        self.pattern = pattern
        self.method = method
        if method is None:
            detail = f"multiple registrations for {pattern}"
        else:
            detail = f"multiple registrations for {method} {pattern}"
        super().__init__(detail)
