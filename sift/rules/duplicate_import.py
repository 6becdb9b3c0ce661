# Duplicate import detection: the same import declaration appearing more than once in a file.

from __future__ import annotations

from typing import Optional

from sift.nodes import AstNode
from sift.rules.base import AstVisitorRule
from sift.rules.registry import register_rule
from sift.visitor import Visitor

_NAME_KINDS = ("scoped_identifier", "identifier")


def import_key(declaration: AstNode) -> Optional[str]:
    """
    Canonical form of an import declaration, e.g. "static java.util.Collections.*".

    Built from the identifier nodes so spacing and comments inside the
    declaration do not matter. "static" is an unnamed token, so it is read
    from the text ahead of the imported name.
    """
    names = declaration.children_of_kind(*_NAME_KINDS)
    if not names:
        return None
    name = names[0]
    qualified = ".".join(n.text for n in name.walk() if n.kind == "identifier")
    prefix = declaration.source[declaration.start_byte : name.start_byte].decode("utf-8", errors="replace")
    is_static = "static" in prefix.split()
    is_wildcard = bool(declaration.children_of_kind("asterisk"))
    return ("static " if is_static else "") + qualified + (".*" if is_wildcard else "")


class DuplicateImportVisitor(Visitor):
    def visit_program(self, node: AstNode) -> None:
        seen: set[str] = set()
        for declaration in node.children_of_kind("import_declaration"):
            key = import_key(declaration)
            if key is None:
                continue
            if key in seen:
                self.add_violation(declaration, f"Duplicate import: {key}")
            seen.add(key)
        # Imports only appear at file level; nothing below needs visiting.


@register_rule
class DuplicateImportRule(AstVisitorRule):
    name = "DuplicateImport"
    priority = 3
    visitor_class = DuplicateImportVisitor
