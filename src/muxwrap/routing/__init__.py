"""Routing: path matching plus the per-method dispatch layered over it.

``PathMux`` owns pattern matching. ``MethodDispatcher`` sits at a single
pattern and picks the handler for the request method. ``strip_prefix``
adapts a handler for mounting under a path namespace.
"""

from muxwrap.routing.dispatcher import MethodDispatcher
from muxwrap.routing.pathmux import PathMux, not_found
from muxwrap.routing.strip import strip_prefix

__all__ = ["MethodDispatcher", "PathMux", "not_found", "strip_prefix"]
