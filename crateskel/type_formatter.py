"""Rendering of rustdoc type expressions, bounds and generics as source text."""

from collections.abc import Mapping
from typing import Any

from crateskel.keywords import escape_ident


def split_variant(obj: Mapping[str, Any]) -> tuple[str, Any]:
    """Split a single-key rustdoc enum object into its tag and payload."""
    return next(iter(obj.items()))


class TypeFormatter:
    """Formats rustdoc JSON type fragments.

    `substitutions` renames generic parameters while rendering; the merge
    engine uses it to compare impl headers independently of parameter names.
    """

    def __init__(self, substitutions: Mapping[str, str] | None = None) -> None:
        self.substitutions = dict(substitutions or {})

    # Types

    def type(self, ty: Any, *, nested: bool = False) -> str:
        """Render a type expression."""
        if ty is None:
            return "_"
        if isinstance(ty, str):
            # unit variants such as "infer"
            return "_" if ty == "infer" else ty
        kind, v = split_variant(ty)
        if kind == "resolved_path":
            return self.path(v)
        if kind == "dyn_trait":
            return self._dyn_trait(v, nested=nested)
        if kind == "generic":
            return self.substitutions.get(v, v)
        if kind == "primitive":
            return v
        if kind == "function_pointer":
            return self._function_pointer(v)
        if kind == "tuple":
            inner = ", ".join(self.type(t, nested=True) for t in v)
            return f"({inner},)" if len(v) == 1 else f"({inner})"
        if kind == "slice":
            return f"[{self.type(v, nested=True)}]"
        if kind == "array":
            return f"[{self.type(v['type'], nested=True)}; {v['len']}]"
        if kind == "impl_trait":
            return f"impl {self.bounds(v)}"
        if kind == "raw_pointer":
            mutability = "mut" if v.get("is_mutable") else "const"
            return f"*{mutability} {self.type(v['type'], nested=True)}"
        if kind == "borrowed_ref":
            lifetime = f"{v['lifetime']} " if v.get("lifetime") else ""
            mutability = "mut " if v.get("is_mutable") else ""
            return f"&{lifetime}{mutability}{self.type(v['type'], nested=True)}"
        if kind == "qualified_path":
            return self._qualified_path(v)
        if kind == "pat":
            return "/* pattern */"
        return "_"

    def path(self, path: Mapping[str, Any]) -> str:
        """Render a resolved path with its generic arguments."""
        name = str(path.get("path") or path.get("name") or "")
        return f"{name.replace('$crate::', '')}{self.generic_args(path.get('args'))}"

    def _dyn_trait(self, v: Mapping[str, Any], *, nested: bool) -> str:
        traits = [self.poly_trait(p) for p in v.get("traits") or []]
        lifetime = v.get("lifetime")
        parts = traits + ([lifetime] if lifetime else [])
        rendered = f"dyn {' + '.join(parts)}"
        if nested and len(parts) > 1:
            return f"({rendered})"
        return rendered

    def poly_trait(self, poly: Mapping[str, Any]) -> str:
        """Render a trait reference with optional higher-ranked lifetimes."""
        hrtb = self._hrtb(poly.get("generic_params") or [])
        return f"{hrtb}{self.path(poly['trait'])}"

    def _hrtb(self, params: list[Mapping[str, Any]]) -> str:
        rendered = [p for p in (self.generic_param(x) for x in params) if p]
        return f"for<{', '.join(rendered)}> " if rendered else ""

    def _function_pointer(self, v: Mapping[str, Any]) -> str:
        hrtb = self._hrtb(v.get("generic_params") or [])
        header = v.get("header") or {}
        prefix = "unsafe " if header.get("is_unsafe") else ""
        prefix += render_abi(header.get("abi"))
        sig = v.get("sig") or v.get("decl") or {}
        args = []
        for name, ty in sig.get("inputs") or []:
            rendered = self.type(ty)
            args.append(f"{name}: {rendered}" if name else rendered)
        if sig.get("is_c_variadic"):
            args.append("...")
        return f"{hrtb}{prefix}fn({', '.join(args)}){self.return_type(sig)}"

    def _qualified_path(self, v: Mapping[str, Any]) -> str:
        self_type = self.type(v["self_type"], nested=True)
        args = self.generic_args(v.get("args"))
        trait = v.get("trait")
        trait_path = self.path(trait) if trait else ""
        if trait_path:
            return f"<{self_type} as {trait_path}>::{v['name']}{args}"
        return f"{self_type}::{v['name']}{args}"

    # Generic arguments

    def generic_args(self, args: Any) -> str:
        """Render `<...>` or `(...) -> T` arguments attached to a path segment."""
        if not args or not isinstance(args, dict):
            return ""
        kind, v = split_variant(args)
        if kind == "angle_bracketed":
            parts = [self._generic_arg(a) for a in v.get("args") or []]
            constraints = v.get("constraints") or v.get("bindings") or []
            parts += [self._constraint(c) for c in constraints]
            return f"<{', '.join(parts)}>" if parts else ""
        if kind == "parenthesized":
            inputs = ", ".join(self.type(t) for t in v.get("inputs") or [])
            output = v.get("output")
            return f"({inputs})" + (f" -> {self.type(output)}" if output else "")
        return ""

    def _generic_arg(self, arg: Any) -> str:
        if isinstance(arg, str):
            return "_"
        kind, v = split_variant(arg)
        if kind == "lifetime":
            return v
        if kind == "type":
            return self.type(v)
        if kind == "const":
            return str(v.get("expr", "_"))
        return "_"

    def _constraint(self, c: Mapping[str, Any]) -> str:
        name = f"{c['name']}{self.generic_args(c.get('args'))}"
        binding = c.get("binding") or {}
        if "equality" in binding:
            return f"{name} = {self.term(binding['equality'])}"
        if "constraint" in binding:
            return f"{name}: {self.bounds(binding['constraint'])}"
        return name

    def term(self, term: Mapping[str, Any]) -> str:
        """Render the right-hand side of an equality constraint."""
        if "type" in term:
            return self.type(term["type"])
        return str((term.get("constant") or {}).get("expr", "_"))

    # Bounds and generics

    def bounds(self, bounds: list[Any]) -> str:
        """Render a `+`-separated bound list."""
        return " + ".join(self.bound(b) for b in bounds)

    def bound(self, bound: Mapping[str, Any]) -> str:
        """Render a single generic bound."""
        kind, v = split_variant(bound)
        if kind == "trait_bound":
            modifier = {"maybe": "?", "maybe_const": "~const "}.get(
                v.get("modifier") or "none", ""
            )
            hrtb = self._hrtb(v.get("generic_params") or [])
            return f"{modifier}{hrtb}{self.path(v['trait'])}"
        if kind == "outlives":
            return v
        if kind == "use":
            names = [a if isinstance(a, str) else next(iter(a.values())) for a in v]
            return f"use<{', '.join(names)}>"
        return ""

    def generic_param(self, param: Mapping[str, Any]) -> str | None:
        """Render a generic parameter definition; synthetic params render as None."""
        name = self.substitutions.get(param["name"], param["name"])
        kind, v = split_variant(param["kind"])
        if kind == "lifetime":
            outlives = v.get("outlives") or []
            return f"{name}: {' + '.join(outlives)}" if outlives else name
        if kind == "type":
            if v.get("is_synthetic") or v.get("synthetic"):
                return None
            bounds = f": {self.bounds(v['bounds'])}" if v.get("bounds") else ""
            default = f" = {self.type(v['default'])}" if v.get("default") else ""
            return f"{name}{bounds}{default}"
        if kind == "const":
            default = f" = {v['default']}" if v.get("default") else ""
            return f"const {name}: {self.type(v['type'])}{default}"
        return None

    def generics(self, generics: Mapping[str, Any] | None) -> str:
        """Render the `<...>` parameter list of an item."""
        defs = (generics or {}).get("params") or []
        params = [p for p in (self.generic_param(x) for x in defs) if p]
        return f"<{', '.join(params)}>" if params else ""

    def where_clause(self, generics: Mapping[str, Any] | None) -> str:
        """Render ` where ...` predicates, or an empty string."""
        preds = [
            p
            for p in (
                self._where_predicate(x)
                for x in (generics or {}).get("where_predicates") or []
            )
            if p
        ]
        return f" where {', '.join(preds)}" if preds else ""

    def _where_predicate(self, pred: Mapping[str, Any]) -> str | None:
        kind, v = split_variant(pred)
        if kind == "bound_predicate":
            params = v.get("generic_params") or []
            if any(
                (p["kind"].get("type") or {}).get("is_synthetic") for p in params
            ):
                return None
            bounds = self.bounds(v.get("bounds") or [])
            if not bounds:
                return None
            return f"{self._hrtb(params)}{self.type(v['type'])}: {bounds}"
        if kind == "lifetime_predicate":
            outlives = v.get("outlives") or []
            if not outlives:
                return None
            return f"{v['lifetime']}: {' + '.join(outlives)}"
        if kind == "eq_predicate":
            return f"{self.type(v['lhs'])} = {self.term(v['rhs'])}"
        return None

    # Function signatures

    def fn_args(self, sig: Mapping[str, Any]) -> str:
        """Render a function's parameter list without parentheses."""
        args = [self._fn_arg(name, ty) for name, ty in sig.get("inputs") or []]
        if sig.get("is_c_variadic"):
            args.append("...")
        return ", ".join(args)

    def _fn_arg(self, name: str, ty: Any) -> str:
        if name != "self":
            return f"{escape_ident(name)}: {self.type(ty)}"
        kind = next(iter(ty)) if isinstance(ty, dict) else ""
        if kind == "borrowed_ref":
            ref = ty["borrowed_ref"]
            if _is_self_type(ref["type"]):
                lifetime = f"{ref['lifetime']} " if ref.get("lifetime") else ""
                mutability = "mut " if ref.get("is_mutable") else ""
                return f"&{lifetime}{mutability}self"
        if _is_self_type(ty):
            return "self"
        return f"self: {self.type(ty)}"

    def return_type(self, sig: Mapping[str, Any]) -> str:
        """Render ` -> T`, or nothing for the unit return type."""
        output = sig.get("output")
        if output is None or output == {"tuple": []}:
            return ""
        return f" -> {self.type(output)}"


def _is_self_type(ty: Any) -> bool:
    if not isinstance(ty, dict):
        return False
    if ty.get("generic") == "Self":
        return True
    path = ty.get("resolved_path")
    if not path or path.get("args"):
        return False
    return (path.get("path") or path.get("name")) == "Self"


def render_abi(abi: Any) -> str:
    """Render an `extern "..." ` prefix for non-Rust ABIs."""
    if abi is None or abi == "Rust":
        return ""
    if isinstance(abi, dict):
        name, v = split_variant(abi)
        if name == "Other":
            return f'extern "{v}" '
        unwind = isinstance(v, dict) and v.get("unwind")
        return f'extern "{name}{"-unwind" if unwind else ""}" '
    return f'extern "{abi}" '


DEFAULT_FORMATTER = TypeFormatter()


def render_type(ty: Any) -> str:
    """Render a type expression with the default formatter."""
    return DEFAULT_FORMATTER.type(ty)
