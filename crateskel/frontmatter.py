"""Comment header describing how a skeleton was produced."""

from dataclasses import dataclass

from crateskel.search_domain import SearchDomain, describe_domains

BANNER = "// crateskel skeleton - syntactically valid Rust with implementation omitted."


@dataclass(frozen=True)
class FrontmatterHit:
    """A matched item listed in the header."""

    path: str
    domains: SearchDomain


@dataclass(frozen=True)
class FrontmatterSearch:
    """Summary of the search that restricted the skeleton."""

    query: str
    domains: SearchDomain
    case_sensitive: bool
    expand_containers: bool
    hits: tuple[FrontmatterHit, ...] = ()


@dataclass(frozen=True)
class Frontmatter:
    """Settings echoed at the top of rendered output."""

    target: str | None
    filter_path: str | None = None
    include_private: bool = False
    auto_impls: bool = False
    blanket_impls: bool = False
    search: FrontmatterSearch | None = None

    def render(self) -> str:
        """Render the comment block, ending with a blank line."""
        settings = []
        if self.target:
            settings.append(f"target={self.target}")
        if self.filter_path:
            settings.append(f"path={self.filter_path}")
        settings.append(
            f"visibility={'private' if self.include_private else 'public'}"
        )
        settings.append(f"auto_impls={_flag(self.auto_impls)}")
        settings.append(f"blanket_impls={_flag(self.blanket_impls)}")

        lines = [BANNER, f"// settings: {', '.join(settings)}"]
        if self.search is not None:
            lines.append("")
            lines.extend(_search_lines(self.search))
        return "\n".join(lines) + "\n\n"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _search_lines(search: FrontmatterSearch) -> list[str]:
    details = [f"case_sensitive={_flag(search.case_sensitive)}"]
    domains = describe_domains(search.domains)
    if domains:
        details.append(f"domains={', '.join(domains)}")
    details.append(f"expand_containers={_flag(search.expand_containers)}")
    lines = [f'// search: query="{search.query}"; {"; ".join(details)}']
    if not search.hits:
        return lines
    lines.append(f"// hits ({len(search.hits)}):")
    for hit in search.hits:
        labels = describe_domains(hit.domains)
        suffix = f" [{', '.join(labels)}]" if labels else ""
        lines.append(f"//   - {hit.path}{suffix}")
    return lines
