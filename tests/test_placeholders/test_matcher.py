"""Unit tests for template_system.placeholders.matcher.

Tests cover: recognition of the five placeholder forms, segment
round-tripping, positions and lines, context inference, and counting of
leftover placeholders.
"""

from __future__ import annotations

import pytest

from template_system.placeholders.matcher import (
    count_remaining,
    find_placeholders,
    has_remaining,
    infer_context,
    tokenize,
)


@pytest.mark.unit
class TestRecognition:
    def test_all_five_forms(self):
        text = '<tw/> <text/> <img/> <data key="store.hours"/> {{ home.heroTitle }}'
        found = find_placeholders(text)
        assert [p.type for p in found] == ["tw", "text", "img", "data", "slot"]
        assert found[3].key == "store.hours"
        assert found[4].key == "home.heroTitle"

    def test_slot_whitespace_variants(self):
        found = find_placeholders("{{a.b}} {{   c  }}")
        assert [p.key for p in found] == ["a.b", "c"]

    def test_jsx_object_literal_is_not_a_slot(self):
        assert find_placeholders("<div style={{ color: 'red' }} />") == []

    def test_raw_and_position(self):
        text = "abc <text/>"
        (placeholder,) = find_placeholders(text)
        assert placeholder.raw == "<text/>"
        assert placeholder.position == 4

    def test_line_numbers(self):
        text = "line one\nline two <tw/>\n\n<img/>"
        assert [p.line for p in find_placeholders(text)] == [2, 4]

    def test_line_numbers_after_multiline_placeholder(self):
        text = '<data\n  key="store.hours"/>\n<text/>'
        assert [p.line for p in find_placeholders(text)] == [1, 3]

    def test_no_placeholders(self):
        assert find_placeholders("export default function App() {}") == []


@pytest.mark.unit
class TestTokenize:
    def test_segments_reassemble_input(self, sample_template):
        for source in sample_template.initial_version.source_files:
            segments = tokenize(source.content, source.path)
            assert "".join(seg.text for seg in segments) == source.content

    def test_segment_kinds(self):
        segments = tokenize("a<tw/>b")
        assert [seg.is_placeholder for seg in segments] == [False, True, False]
        assert segments[1].placeholder.context.file == ""

    def test_adjacent_placeholders(self):
        segments = tokenize("<text/><text/>")
        assert len(segments) == 2
        assert all(seg.is_placeholder for seg in segments)

    def test_file_recorded_in_context(self):
        (placeholder,) = find_placeholders("<tw/>", "src/App.tsx")
        assert placeholder.context.file == "src/App.tsx"


@pytest.mark.unit
class TestContextInference:
    def test_inside_attribute(self):
        (placeholder,) = find_placeholders('<button type="submit" className="<tw/>">Buy</button>')
        assert placeholder.context.tag_name == "button"

    def test_inside_element_body(self):
        (placeholder,) = find_placeholders('<h1 className="text-4xl">{{ home.heroTitle }}</h1>')
        assert placeholder.context.tag_name == "h1"
        assert placeholder.context.class_hint == "text-4xl"

    def test_closed_elements_are_skipped(self):
        text = "<main><h1>Title</h1><p><text/></p></main>"
        (placeholder,) = find_placeholders(text)
        assert placeholder.context.tag_name == "p"

    def test_void_elements_do_not_nest(self):
        text = '<section><img src="a.png"><text/></section>'
        (placeholder,) = find_placeholders(text)
        assert placeholder.context.tag_name == "section"

    def test_card_hint(self):
        ctx = infer_context('<div className="card shadow">')
        assert ctx.tag_name == "div"
        assert ctx.class_hint == "card shadow"

    def test_top_level(self):
        ctx = infer_context("plain text ")
        assert ctx.tag_name is None
        assert ctx.snippet == "plain text"

    def test_tag_split_by_placeholder(self):
        text = '<section><h1 className="<tw/>">Hi <text/></h1><p>{{ home.body }}</p></section>'
        found = find_placeholders(text)
        assert [p.context.tag_name for p in found] == ["h1", "h1", "p"]

    def test_running_context_matches_prefix_scan(self, sample_template):
        for source in sample_template.initial_version.source_files:
            literals: list[str] = []
            for segment in tokenize(source.content, source.path):
                if segment.placeholder is None:
                    literals.append(segment.text)
                    continue
                expected = infer_context("".join(literals), source.path)
                assert segment.placeholder.context == expected

    def test_many_placeholders_keep_innermost_tag(self):
        text = "<ul>" + "<li><text/></li>" * 500 + "</ul><p><text/></p>"
        found = find_placeholders(text)
        assert len(found) == 501
        assert {p.context.tag_name for p in found[:-1]} == {"li"}
        assert found[-1].context.tag_name == "p"


@pytest.mark.unit
class TestRemaining:
    def test_counts_per_form(self):
        text = "<tw/> <tw/> {{ a }} done"
        counts = count_remaining(text)
        assert counts == {"tw": 2, "text": 0, "img": 0, "data": 0, "slot": 1}
        assert has_remaining(text) is True

    def test_clean_text(self):
        assert has_remaining('<img src="https://x/y.png" alt="y" />') is False
        assert sum(count_remaining("nothing here").values()) == 0
