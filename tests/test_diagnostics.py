"""Tests for diagnostics and the diagnostic table."""

from livasense.diagnostics import (
    INTERFACE_SOURCE,
    Diagnostic,
    DiagnosticTable,
    Severity,
    violation_to_diagnostic,
)
from livasense.semantic import Span, validate_interfaces


def _diag(message="boom", severity=Severity.ERROR):
    return Diagnostic(span=Span(0, 0, 0, 1), severity=severity, message=message)


class TestViolationToDiagnostic:
    def test_missing_method_is_error(self):
        text = "Shape { area(): float }\nCircle : Shape { constructor() {} }\n"
        diag = violation_to_diagnostic(validate_interfaces(text)[0])
        assert diag.severity == Severity.ERROR
        assert diag.source == INTERFACE_SOURCE
        assert diag.span == Span(1, 0, 1, len("Circle : Shape { constructor() {} }"))
        assert "Required: area(): float" in diag.message

    def test_unknown_interface_is_warning(self):
        diag = violation_to_diagnostic(validate_interfaces("Box : Nope { constructor() {} }")[0])
        assert diag.severity == Severity.WARNING

    def test_to_dict(self):
        data = _diag(severity=Severity.HINT).to_dict()
        assert data["severity"] == "hint"
        assert data["source"] == "liva-interfaces"
        assert data["span"] == {
            "start_line": 0,
            "start_character": 0,
            "end_line": 0,
            "end_character": 1,
        }


class TestDiagnosticTable:
    def test_unknown_document_is_empty(self):
        assert DiagnosticTable().get("file:///a.liva") == []

    def test_set_replaces(self):
        table = DiagnosticTable()
        table.set("a", [_diag("one"), _diag("two")])
        table.set("a", [_diag("three")])
        assert [d.message for d in table.get("a")] == ["three"]

    def test_get_returns_copy(self):
        table = DiagnosticTable()
        table.set("a", [_diag()])
        table.get("a").clear()
        assert len(table.get("a")) == 1

    def test_delete_and_clear(self):
        table = DiagnosticTable()
        table.set("a", [_diag()])
        table.set("b", [])
        assert "a" in table
        assert len(table) == 2

        table.delete("a")
        table.delete("missing")
        assert "a" not in table
        assert [uri for uri, _ in table.items()] == ["b"]

        table.clear()
        assert len(table) == 0
