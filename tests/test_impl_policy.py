"""Tests for the auto and blanket implementation filters."""

from crateskel.impl_policy import should_render_impl, trait_name
from crateskel.render_options import RenderOptions


def impl_payload(trait: str | None, *, synthetic=False, blanket=None) -> dict:
    return {
        "trait": {"path": trait, "id": 1, "args": None} if trait else None,
        "is_synthetic": synthetic,
        "blanket_impl": blanket,
    }


def test_inherent_and_explicit_trait_impls_render() -> None:
    """Verify that ordinary impls are always shown."""
    options = RenderOptions()
    assert should_render_impl(impl_payload(None), options)
    assert should_render_impl(impl_payload("Display"), options)
    assert should_render_impl(impl_payload("Clone"), options)


def test_synthetic_impls_need_auto_flag() -> None:
    """Verify that auto trait impls are hidden by default."""
    payload = impl_payload("Send", synthetic=True)
    assert not should_render_impl(payload, RenderOptions())
    assert should_render_impl(
        payload, RenderOptions(include_auto_implementations=True)
    )


def test_blanket_impls_need_blanket_flag() -> None:
    """Verify that blanket impls of filtered traits also need the auto flag."""
    payload = impl_payload("core::convert::Into", blanket={"generic": "T"})
    assert not should_render_impl(payload, RenderOptions())
    blanket = RenderOptions(include_blanket_implementations=True)
    assert not should_render_impl(payload, blanket)
    both = RenderOptions(
        include_blanket_implementations=True, include_auto_implementations=True
    )
    assert should_render_impl(payload, both)

    custom = impl_payload("MyExt", blanket={"generic": "T"})
    assert should_render_impl(custom, blanket)


def test_trait_name_takes_last_segment() -> None:
    """Verify that qualified trait paths reduce to their name."""
    assert trait_name(impl_payload("core::fmt::Debug")) == "Debug"
    assert trait_name(impl_payload(None)) is None
