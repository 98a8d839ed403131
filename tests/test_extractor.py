"""Tests for the structural extractor."""

import pytest

from livasense.semantic import ContainerSymbol, LivaIndexer, Span, SymbolKind, extract


class TestOutline:
    def test_outline_entries_in_source_order(self, outline_source):
        model = extract(outline_source)

        assert [(s.kind, s.name) for s in model] == [
            (SymbolKind.CONSTANT, "MAX_SIZE"),
            (SymbolKind.FUNCTION, "add"),
            (SymbolKind.CLASS, "Point"),
        ]
        point = model.classes[0]
        assert [(m.kind, m.name) for m in point.members] == [
            (SymbolKind.FIELD, "x"),
            (SymbolKind.FIELD, "y"),
            (SymbolKind.METHOD, "length"),
        ]
        assert len(list(model.walk())) == 6

    def test_extraction_is_deterministic(self, shapes_source):
        assert extract(shapes_source) == extract(shapes_source)

    def test_shapes_document(self, shapes_source):
        model = extract(shapes_source)

        assert [s.name for s in model] == ["Shape", "Drawable", "Circle", "main"]
        assert [s.name for s in model.interfaces] == ["Shape", "Drawable"]
        circle = model.classes[0]
        assert circle.implements == ["Shape", "Drawable"]
        assert [m.name for m in circle.members] == ["radius", "constructor", "area", "draw"]
        assert circle.method_names == frozenset({"area", "draw"})
        assert circle.constructor.signature == "radius: float"
        assert circle.fields[0].detail == "float"

    def test_interface_keeps_signatures(self, shapes_source):
        shape = extract(shapes_source).interfaces[0]
        assert [m.label for m in shape.methods] == ["area(): float", "name(): string"]

    def test_selection_span_inside_span(self, shapes_source, outline_source):
        for source in (shapes_source, outline_source):
            for symbol, _ in extract(source).walk():
                assert symbol.span.contains(symbol.selection_span), symbol.name

    def test_block_spans(self, shapes_source):
        model = extract(shapes_source)
        circle = model.classes[0]
        assert circle.span == Span(10, 0, 22, 1)
        assert circle.selection_span == Span(10, 0, 10, 6)

        draw = circle.members[3]
        assert draw.span.start_line == 19
        assert draw.span.end_line == 21

        main = model.functions[0]
        assert main.span == Span(24, 0, 28, 1)

    def test_expression_body_spans_one_line(self, shapes_source):
        area = extract(shapes_source).classes[0].members[2]
        assert area.span.start_line == area.span.end_line == 17
        assert area.selection_span == Span(17, 4, 17, 8)


class TestClassification:
    def test_signatures_only_is_interface(self):
        model = extract("Greeter {\n    greet(name: string): string\n}\n")
        assert model.interfaces[0].name == "Greeter"

    def test_constructor_makes_class(self):
        model = extract("Counter {\n    constructor() {\n        this.n = 0\n    }\n}\n")
        assert model.classes[0].name == "Counter"
        assert model.interfaces == []

    def test_fields_without_constructor_stay_interface(self):
        model = extract("Config {\n    debug: bool\n    name(): string\n}\n")
        config = model.interfaces[0]
        assert model.classes == []
        assert [m.name for m in config.members] == ["name"]

    def test_implemented_method_without_constructor_stays_interface(self):
        model = extract('Greeter { greet() => "hi" }')
        assert model.interfaces[0].members == []

    def test_constructor_word_in_comment_is_ignored(self):
        model = extract("Factory {\n    // no constructor here\n    build(): Thing\n}\n")
        assert model.interfaces[0].name == "Factory"

    def test_empty_block_is_interface(self):
        model = extract("Marker {\n}\n")
        assert model.interfaces[0].members == []


class TestInlineContainers:
    def test_inline_interface(self):
        model = extract("Shape { area(): float }")
        shape = model.interfaces[0]
        assert shape.span == Span(0, 0, 0, 23)
        assert shape.methods[0].label == "area(): float"
        assert shape.methods[0].span == Span(0, 8, 0, 21)

    def test_inline_class(self):
        text = "Circle : Shape { area() { return 3.14 } constructor() {} }"
        circle = extract(text).classes[0]
        assert [m.kind for m in circle.members] == [SymbolKind.METHOD, SymbolKind.CONSTRUCTOR]
        assert circle.members[0].span == Span(0, 17, 0, 39)

    def test_head_line_opens_multiline_body(self):
        text = "Circle : Shape { radius: float\n    area() => 1\n}\n"
        circle = extract(text).classes[0]
        assert [m.name for m in circle.members] == ["radius", "area"]


class TestMalformedInput:
    def test_unterminated_container_is_dropped(self):
        text = "const LIMIT = 3\nShape {\n    area(): float\n"
        model = extract(text)
        assert [s.name for s in model] == ["LIMIT"]

    def test_unterminated_function_extends_to_end(self):
        text = "main() {\n    run()\n"
        main = extract(text).functions[0]
        assert main.span.end_line == 2

    def test_string_brace_does_not_close_block(self):
        text = 'Logger {\n    constructor() {}\n    log() {\n        print("}")\n    }\n}\n'
        logger = extract(text).classes[0]
        assert logger.span.end_line == 5
        assert [m.name for m in logger.members] == ["constructor", "log"]

    def test_nested_lines_are_not_members(self):
        text = "Box : Item {\n    constructor() {\n        size: number\n    }\n}\n"
        box = extract(text).classes[0]
        assert [m.name for m in box.members] == ["constructor"]

    def test_comments_are_skipped(self):
        model = extract("// Fake {\n/* Other { */\nconst A = 1\n")
        assert [s.name for s in model] == ["A"]

    def test_empty_document(self):
        assert len(extract("")) == 0


class TestTopLevel:
    def test_constant_detail_is_truncated(self):
        value = '"' + "a" * 40 + '"'
        model = extract(f"const GREETING = {value}\n")
        assert model.symbols[0].detail == value[:27] + "..."

    def test_short_constant_detail(self):
        model = extract("const PI = 3.14\n")
        assert model.symbols[0].detail == "3.14"
        assert model.symbols[0].selection_span == Span(0, 6, 0, 8)

    def test_indented_constant_is_listed(self):
        model = extract("main() {\n    const LIMIT = 3\n}\n")
        assert [(s.kind, s.name) for s in model] == [
            (SymbolKind.FUNCTION, "main"),
            (SymbolKind.CONSTANT, "LIMIT"),
        ]
        assert model.symbols[1].selection_span == Span(1, 10, 1, 15)

    def test_constant_inside_class_is_not_listed(self):
        model = extract("Box : Item {\n    constructor() {\n        const LIMIT = 3\n    }\n}\n")
        assert [s.name for s in model] == ["Box"]

    def test_indented_function_is_ignored(self):
        model = extract("main() {\n    helper() {\n    }\n}\n")
        assert [s.name for s in model] == ["main"]

    def test_control_statements_are_not_functions(self):
        assert len(extract("if (ready) {\n    go()\n}\n")) == 0

    @pytest.mark.parametrize(
        "include_variables, expected",
        [(False, []), (True, ["value", "err", "count"])],
    )
    def test_variables(self, include_variables, expected):
        text = "let value, err = divide(10, 2)\nlet count = 0\n"
        model = extract(text, include_variables=include_variables)
        assert [s.name for s in model.of_kind(SymbolKind.VARIABLE)] == expected

    def test_liva_indexer(self, outline_source):
        indexer = LivaIndexer(include_variables=True)
        model = indexer.extract(outline_source + "let total = add(1, 2)\n")
        assert model.symbols[-1].name == "total"
        assert isinstance(model.symbols[2], ContainerSymbol)

    def test_to_dict(self, outline_source):
        data = extract(outline_source).to_dict()
        assert data[1]["label"] == "add(a: number, b: number): number"
        assert [m["name"] for m in data[2]["members"]] == ["x", "y", "length"]
