"""Exception types raised by the skeleton core."""


class SkeletonError(Exception):
    """Base class for every error surfaced to callers of the core."""


class GraphError(SkeletonError):
    """The raw item graph is malformed (missing root, unknown kind, bad ids)."""


class ItemNotFoundError(SkeletonError):
    """An id referenced by the graph is absent from the item table."""

    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item not found in graph: {item_id}")
        self.item_id = item_id


class TargetModuleNotFoundError(SkeletonError):
    """A requested starting path or package has no corresponding item."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Module not found: {path}")
        self.path = path


class FilterNotMatchedError(SkeletonError):
    """A filter path matched no item in the graph."""

    def __init__(self, filter_path: str) -> None:
        super().__init__(f"Filter did not match any items: {filter_path}")
        self.filter_path = filter_path


class InvalidSearchDomainError(SkeletonError):
    """An unrecognized search domain token was supplied."""

    def __init__(self, token: str, valid: list[str]) -> None:
        super().__init__(
            f"Invalid search domain '{token}'. Valid domains: {', '.join(valid)}"
        )
        self.token = token
        self.valid = valid


class AmbiguousSubjectModuleError(SkeletonError):
    """A bare standard-library module name was requested without its prefix."""

    def __init__(self, name: str, suggestion: str) -> None:
        super().__init__(
            f"'{name}' is a standard library module; did you mean '{suggestion}'?"
        )
        self.name = name
        self.suggestion = suggestion


class RenderError(SkeletonError):
    """Formatting failed while emitting a specific item."""

    def __init__(self, item_id: int, kind: str, cause: str) -> None:
        super().__init__(f"Failed to render {kind} item {item_id}: {cause}")
        self.item_id = item_id
        self.kind = kind
        self.cause = cause


class InvalidTargetError(SkeletonError):
    """A target specification could not be parsed."""

    def __init__(self, spec: str, reason: str) -> None:
        super().__init__(f"Invalid target specification '{spec}': {reason}")
        self.spec = spec
        self.reason = reason
