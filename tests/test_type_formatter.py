"""Tests for rendering rustdoc type expressions."""

import pytest

from crateskel.type_formatter import TypeFormatter, render_abi, render_type

VEC_OF_T = {
    "resolved_path": {
        "path": "Vec",
        "id": 5,
        "args": {
            "angle_bracketed": {
                "args": [{"type": {"generic": "T"}}],
                "constraints": [],
            }
        },
    }
}


def trait_bound(path: str) -> dict:
    return {
        "trait_bound": {
            "trait": {"path": path, "id": 9, "args": None},
            "generic_params": [],
            "modifier": "none",
        }
    }


@pytest.mark.parametrize(
    ("ty", "expected"),
    [
        ({"primitive": "u8"}, "u8"),
        ({"generic": "T"}, "T"),
        (VEC_OF_T, "Vec<T>"),
        ({"tuple": []}, "()"),
        ({"tuple": [{"primitive": "u8"}]}, "(u8,)"),
        ({"slice": {"primitive": "u8"}}, "[u8]"),
        ({"array": {"type": {"primitive": "u8"}, "len": "4"}}, "[u8; 4]"),
        (
            {
                "borrowed_ref": {
                    "lifetime": "'a",
                    "is_mutable": True,
                    "type": {"primitive": "str"},
                }
            },
            "&'a mut str",
        ),
        (
            {"raw_pointer": {"is_mutable": False, "type": {"primitive": "u8"}}},
            "*const u8",
        ),
        ({"impl_trait": [trait_bound("Iterator")]}, "impl Iterator"),
        ("infer", "_"),
        (None, "_"),
    ],
)
def test_render_type(ty, expected: str) -> None:
    """Verify rendering of the common type shapes."""
    assert render_type(ty) == expected


def test_generics_and_where_clause() -> None:
    """Verify parameter lists, skipping synthetic `impl Trait` parameters."""
    generics = {
        "params": [
            {"name": "'a", "kind": {"lifetime": {"outlives": []}}},
            {
                "name": "T",
                "kind": {
                    "type": {
                        "bounds": [trait_bound("Clone")],
                        "default": None,
                        "is_synthetic": False,
                    }
                },
            },
            {
                "name": "impl Read",
                "kind": {
                    "type": {"bounds": [], "default": None, "is_synthetic": True}
                },
            },
            {"name": "N", "kind": {"const": {"type": {"primitive": "usize"}}}},
        ],
        "where_predicates": [
            {
                "bound_predicate": {
                    "type": {"generic": "T"},
                    "bounds": [trait_bound("Send")],
                    "generic_params": [],
                }
            }
        ],
    }
    fmt = TypeFormatter()
    assert fmt.generics(generics) == "<'a, T: Clone, const N: usize>"
    assert fmt.where_clause(generics) == " where T: Send"


def test_substitutions_rename_parameters() -> None:
    """Verify that substituted parameter names are used in types."""
    fmt = TypeFormatter({"T": "$0"})
    assert fmt.type(VEC_OF_T) == "Vec<$0>"


def test_fn_args_render_self_receivers() -> None:
    """Verify `self`, `&self`, `&mut self` and typed receivers."""
    fmt = TypeFormatter()
    self_ty = {"generic": "Self"}
    mut_self = {"borrowed_ref": {"lifetime": None, "is_mutable": True, "type": self_ty}}
    sig = {
        "inputs": [
            ["self", mut_self],
            ["len", {"primitive": "usize"}],
        ],
        "output": {"tuple": []},
    }
    assert fmt.fn_args(sig) == "&mut self, len: usize"
    assert fmt.return_type(sig) == ""
    assert fmt.fn_args({"inputs": [["self", self_ty]]}) == "self"
    assert fmt.fn_args({"inputs": [["type", {"primitive": "u8"}]]}) == "r#type: u8"


def test_render_abi() -> None:
    """Verify that only non-Rust ABIs produce an extern prefix."""
    assert render_abi("Rust") == ""
    assert render_abi({"C": {"unwind": False}}) == 'extern "C" '
    assert render_abi({"C": {"unwind": True}}) == 'extern "C-unwind" '
    assert render_abi({"Other": "efiapi"}) == 'extern "efiapi" '
