"""Identifier helpers shared by every rendering path."""

RESERVED_WORDS = frozenset(
    {
        "abstract", "as", "become", "box", "break", "const", "continue", "crate",
        "do", "else", "enum", "extern", "false", "final", "fn", "for", "if", "impl",
        "in", "let", "loop", "macro", "match", "mod", "move", "mut", "override",
        "priv", "pub", "ref", "return", "self", "Self", "static", "struct", "super",
        "trait", "true", "try", "type", "typeof", "unsafe", "unsized", "use",
        "virtual", "where", "while", "yield",
    }
)  # fmt: skip


def is_reserved_word(ident: str) -> bool:
    """Check if the identifier collides with a reserved word."""
    return ident in RESERVED_WORDS


def escape_ident(name: str | None) -> str:
    """Render an identifier, using raw-identifier syntax for reserved words."""
    if name is None:
        return "?"
    return f"r#{name}" if is_reserved_word(name) else name
