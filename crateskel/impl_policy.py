"""Decides which impl blocks are shown by default."""

from typing import Any

from crateskel.render_options import RenderOptions


def trait_name(impl: dict[str, Any]) -> str | None:
    """Return the last path segment of the implemented trait, if any."""
    trait = impl.get("trait")
    if not trait:
        return None
    path = str(trait.get("path") or trait.get("name") or "")
    return path.split("::")[-1]


def is_blanket(impl: dict[str, Any]) -> bool:
    """Whether the impl is a blanket implementation over a generic type."""
    return impl.get("blanket_impl") is not None


def should_render_impl(impl: dict[str, Any], options: RenderOptions) -> bool:
    """Check if an impl payload passes the auto/blanket implementation filters.

    Synthetic impls (auto traits) need `include_auto_implementations`, blanket
    impls need `include_blanket_implementations`, and blanket impls of the
    filtered traits stay hidden unless auto implementations are requested.
    """
    synthetic = bool(impl.get("is_synthetic", impl.get("synthetic")))
    if synthetic and not options.include_auto_implementations:
        return False
    blanket = is_blanket(impl)
    if blanket and not options.include_blanket_implementations:
        return False
    if not options.include_auto_implementations and blanket:
        name = trait_name(impl)
        if name is not None and name in options.filtered_traits:
            return False
    return True
