from __future__ import annotations

from dataclasses import dataclass

import yaml


@dataclass(frozen=True)
class FrontmatterParse:
    frontmatter: dict
    body: str
    error: str | None


def parse_frontmatter(markdown: str) -> FrontmatterParse:
    if not markdown.startswith("---"):
        return FrontmatterParse(frontmatter={}, body=markdown, error=None)

    first_newline = markdown.find("\n")
    if first_newline == -1:
        return FrontmatterParse(frontmatter={}, body=markdown, error=None)

    first_line = markdown[:first_newline].rstrip("\r")
    if first_line != "---":
        return FrontmatterParse(frontmatter={}, body=markdown, error=None)

    # The block ends at the next line that is exactly `---`
    search_from = first_newline + 1
    while True:
        next_newline = markdown.find("\n", search_from)
        if next_newline == -1:
            line = markdown[search_from:].rstrip("\r")
            if line != "---":
                return FrontmatterParse(frontmatter={}, body=markdown, error=None)
            next_newline = len(markdown)
        else:
            line = markdown[search_from:next_newline].rstrip("\r")
        if line == "---":
            yaml_block = markdown[first_newline + 1 : search_from]
            body = markdown[next_newline + 1 :]
            try:
                parsed = yaml.safe_load(yaml_block) or {}
                if not isinstance(parsed, dict):
                    return FrontmatterParse(frontmatter={}, body=markdown, error="frontmatter_not_mapping")
                return FrontmatterParse(frontmatter=parsed, body=body, error=None)
            except yaml.YAMLError:
                return FrontmatterParse(frontmatter={}, body=markdown, error="frontmatter_yaml_error")
        search_from = next_newline + 1


def render_markdown_with_frontmatter(frontmatter: dict, body: str) -> str:
    # The body is written back byte for byte.
    if not frontmatter:
        return body
    yaml_text = yaml.safe_dump(frontmatter, sort_keys=False).strip("\n")
    return f"---\n{yaml_text}\n---\n{body}"
