"""Tests for muxwrap.__init__: lazy import registry covers all public names."""

import pytest

import muxwrap


@pytest.mark.parametrize("name", muxwrap.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(muxwrap, name)
    assert obj is not None, f"muxwrap.{name} resolved to None"


def test_resolves_to_defining_module() -> None:
    from muxwrap.app import Mux

    assert muxwrap.Mux is Mux


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        muxwrap.__getattr__("ThisDoesNotExist")
