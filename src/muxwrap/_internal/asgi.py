"""ASGI callable type aliases.

Only the raw shapes from the ASGI 3.0 spec. The mux converts scopes into
``Request`` objects at the edge, so nothing past ``Mux.__call__`` sees these.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]
