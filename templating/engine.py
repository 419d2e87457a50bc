"""
Conditional template engine for task titles and notes.

Templates are plain text with three constructs:

    ${title}                 replaced by the token value
    ?${doi}:DOI available?   emits "DOI available" only if doi is defined
    !${doi}:no DOI!          emits "no DOI" only if doi is undefined

A token is defined when its value is not None and not the empty string.
Numbers (including 0 and negatives) are always defined.

Conditional blocks are resolved first, then literal substitutions. Both steps
are single regex passes, so emitted text is never re-scanned by the same step
and the order of tokens in the table does not matter. Template text is treated
as data; nothing in it is evaluated.
"""

import re
from typing import Any, Mapping

TOKEN_NAME = r"[A-Za-z_][A-Za-z0-9_]*"

# ?${name}:body?  or  !${name}:body!
BLOCK_PATTERN = re.compile(
    r"\?\$\{(?P<pos_name>" + TOKEN_NAME + r")\}:(?P<pos_body>[^?]*)\?"
    r"|!\$\{(?P<neg_name>" + TOKEN_NAME + r")\}:(?P<neg_body>[^!]*)!"
)

LITERAL_PATTERN = re.compile(r"\$\{(" + TOKEN_NAME + r")\}")


def is_defined(value: Any) -> bool:
    """Return True if a token value counts as present."""
    return value is not None and value != ""


def render(template: str, tokens: Mapping[str, Any]) -> str:
    """
    Expand a template with the given token table.

    Args:
        template: Template text (see module docstring for syntax)
        tokens: Token name -> value. Names missing from the table are left
            untouched in the output, blocks included.

    Returns:
        The expanded string
    """
    if not template:
        return ""

    def _resolve_block(match: re.Match) -> str:
        if match.group("pos_name") is not None:
            name = match.group("pos_name")
            if name not in tokens:
                return match.group(0)
            return match.group("pos_body") if is_defined(tokens[name]) else ""

        name = match.group("neg_name")
        if name not in tokens:
            return match.group(0)
        return "" if is_defined(tokens[name]) else match.group("neg_body")

    def _resolve_literal(match: re.Match) -> str:
        name = match.group(1)
        if name not in tokens:
            return match.group(0)
        value = tokens[name]
        return str(value) if is_defined(value) else ""

    resolved = BLOCK_PATTERN.sub(_resolve_block, template)
    return LITERAL_PATTERN.sub(_resolve_literal, resolved)


def find_tokens(template: str) -> set[str]:
    """Return every token name a template refers to, in blocks or literals."""
    if not template:
        return set()
    names = set(LITERAL_PATTERN.findall(template))
    for match in BLOCK_PATTERN.finditer(template):
        names.add(match.group("pos_name") or match.group("neg_name"))
    return names
