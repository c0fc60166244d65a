"""Gate registration calls in one parsed source file.

For every call expression, in document order:

1. classify the callee (``test``/``it``/``describe``, optionally with a modifier);
2. resolve the docblock attached to the call into an annotation table;
3. evaluate the rule catalog against the table and the environment snapshot;
4. on the first matching rule, rewrite the callee to ``<base>.skip`` and
   record an audit line.

Already skipped calls are left alone, so running the transform twice changes
nothing the second time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .audit import AuditLog
from .callsite import CallSite, TextEdit, apply_edits, classify, registered_name, rewrite
from .constants import UNKNOWN_FILE, UNNAMED_TEST
from .docblock import unterminated_comment
from .errors import DocblockSyntaxError
from .logging_utils import StructuredLogEvent, get_logger, log_event
from .resolver import resolve
from .rules import CATALOG, evaluate_table
from .syntax import ParsedSource, iter_nodes, parse_source

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tree_sitter import Node

    from .environment import EnvironmentSnapshot
    from .rules import TagRule

logger = get_logger(__name__)

CALL_EXPRESSION = "call_expression"


@dataclass(frozen=True, slots=True)
class SkipRecord:
    """One call that was rewritten to its skipped form."""

    base_name: str
    modifier: str | None
    name: str
    line: int
    rule: str
    reason: str

    def as_dict(self) -> dict[str, object]:
        return {
            "call": self.base_name if self.modifier is None else f"{self.base_name}.{self.modifier}",
            "name": self.name,
            "line": self.line,
            "rule": self.rule,
            "reason": self.reason,
        }


@dataclass(slots=True)
class TransformResult:
    parsed: ParsedSource
    edits: list[TextEdit] = field(default_factory=list)
    skipped: list[SkipRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.edits)

    @property
    def source(self) -> bytes:
        return apply_edits(self.parsed.source, self.edits) if self.edits else self.parsed.source

    @property
    def code(self) -> str:
        return self.source.decode("utf-8")

    def reparse(self) -> ParsedSource:
        """Return the syntax tree of the rewritten source."""
        if not self.edits:
            return self.parsed
        return parse_source(self.source, filename=self.parsed.filename, language=self.parsed.language)


class GateTransformer:
    """Apply environment gating to parsed sources with one fixed snapshot."""

    def __init__(
        self,
        snapshot: EnvironmentSnapshot,
        audit: AuditLog | None = None,
        catalog: Sequence[TagRule] = CATALOG,
    ) -> None:
        self.snapshot = snapshot
        self.audit = audit if audit is not None else AuditLog(path=None)
        self.catalog = catalog

    def transform(self, parsed: ParsedSource) -> TransformResult:
        result = TransformResult(parsed=parsed)
        filename = parsed.filename or UNKNOWN_FILE
        if parsed.root.has_error:
            self._check_comments(parsed, filename, result)
        for call in iter_nodes(parsed.root, CALL_EXPRESSION):
            self._visit(call, filename, result)
        log_event(
            logger,
            StructuredLogEvent(
                name="transform.finished",
                message="finished gating file",
                context={"file": filename, "skipped": len(result.skipped), "warnings": len(result.warnings)},
            ),
        )
        return result

    def _check_comments(self, parsed: ParsedSource, filename: str, result: TransformResult) -> None:
        # tree-sitter recovers from an unclosed comment without producing a comment node
        offset = unterminated_comment(parsed.source)
        if offset is None:
            return
        line = parsed.source.count(b"\n", 0, offset) + 1
        err = DocblockSyntaxError(f"unterminated block comment at line {line}")
        result.warnings.append(str(err))
        self.audit.warn(filename, err)

    def _visit(self, call: Node, filename: str, result: TransformResult) -> None:
        callee = call.child_by_field_name("function")
        if callee is None:
            return
        site = classify(callee)
        if site is None:
            return

        try:
            table = resolve(call)
        except DocblockSyntaxError as err:
            result.warnings.append(str(err))
            self.audit.warn(filename, err)
            return
        if table is None:
            return

        decision = evaluate_table(table, self.snapshot, self.catalog)
        if not decision.skip or decision.reason is None or decision.rule is None:
            return

        result.edits.append(rewrite(callee, site))
        name = registered_name(_registration_call(call, site)) or UNNAMED_TEST
        result.skipped.append(
            SkipRecord(
                base_name=site.base_name,
                modifier=site.modifier,
                name=name,
                line=call.start_point[0] + 1,
                rule=decision.rule,
                reason=decision.reason,
            )
        )
        self.audit.skipped(site.base_name, name, filename, decision.reason)


def _registration_call(call: Node, site: CallSite) -> Node:
    """Return the call that receives the test name: the outer call for ``base.each(table)(name, fn)``."""
    parent = call.parent
    if site.is_factory and parent is not None and parent.type == CALL_EXPRESSION:
        return parent
    return call


def transform_source(
    source: str | bytes,
    *,
    snapshot: EnvironmentSnapshot,
    filename: str | None = None,
    audit: AuditLog | None = None,
) -> TransformResult:
    """Parse ``source`` and gate it in one step."""
    parsed = parse_source(source, filename=filename)
    return GateTransformer(snapshot, audit).transform(parsed)


__all__ = ["GateTransformer", "SkipRecord", "TransformResult", "transform_source"]
