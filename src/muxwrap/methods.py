"""HTTP methods accepted by the per-method registration API."""

from enum import StrEnum

from muxwrap.errors import ConfigurationError


class Method(StrEnum):
    """The fixed set of methods a pattern can register handlers for.

    Members compare equal to their exact, upper-case wire names, so
    ``Method.GET == request.method`` works without conversion.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    HEAD = "HEAD"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "Method | str") -> "Method":
        """Coerce *value* to a ``Method``. Lookup is case-sensitive."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            msg = f"Unsupported HTTP method {value!r}. Expected one of: {allowed}"
            raise ConfigurationError(msg) from None
