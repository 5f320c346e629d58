"""Tests for the recursive-descent template parser."""

import pytest

from stache.errors import MustacheSyntaxError
from stache.template.delimiters import DEFAULT_DELIMITERS, Delimiters
from stache.template.nodes import GroupTag, PartialTag, PragmaTag, TagKind, Template
from stache.template.parser import MustacheParser, parse


def kinds(template: Template):
    return [template.tags[i].kind for i in template.children]


class TestPlainText:

    def test_empty_template(self):
        template = parse("")

        assert template.tags == ()
        assert template.children == ()
        assert template.reconstitute() == ""

    def test_plain_text_only(self):
        template = parse("Hello, world!\n")

        assert kinds(template) == [TagKind.PLAIN]
        assert template.tags[0].text == "Hello, world!\n"

    def test_failed_delimiter_prefix_stays_in_text(self):
        """A lone '{' is not an open delimiter and is kept verbatim."""
        template = parse("a { b {x} }")

        assert kinds(template) == [TagKind.PLAIN]
        assert template.tags[0].text == "a { b {x} }"

    def test_text_around_tags(self):
        template = parse("Hi {{ name }}!")

        assert kinds(template) == [TagKind.PLAIN, TagKind.NAME, TagKind.PLAIN]
        assert [t.text for t in template.tags] == ["Hi ", "name", "!"]


class TestTagClassification:
    """The first non-whitespace code point of a tag selects its kind."""

    @pytest.mark.parametrize("source, kind, text", [
        ("{{name}}", TagKind.NAME, "name"),
        ("{{  spaced name  }}", TagKind.NAME, "spaced name"),
        ("{{&raw}}", TagKind.UNESCAPED_NAME, "raw"),
        ("{{& raw }}", TagKind.UNESCAPED_NAME, "raw"),
        ("{{{triple}}}", TagKind.UNENCODED_NAME, "triple"),
        ("{{{ triple }}}", TagKind.UNENCODED_NAME, "triple"),
        ("{{! a comment }}", TagKind.COMMENT, "a comment"),
        ("{{!}}", TagKind.COMMENT, ""),
        ("{{> header }}", TagKind.PARTIAL, "header"),
        ("{{>parts/item}}", TagKind.PARTIAL, "parts/item"),
        ("{{%key:value}}", TagKind.PRAGMA, "key:value"),
        ("{{=<% %>=}}", TagKind.DELIMITERS, "<% %>"),
    ])
    def test_single_tag(self, source, kind, text):
        template = parse(source)

        assert len(template.children) == 1
        tag = template.tags[template.children[0]]
        assert tag.kind == kind
        assert tag.text == text
        assert tag.source == source

    def test_tag_classes(self):
        template = parse("{{>p}}{{%a}}{{#s}}{{/s}}")

        assert isinstance(template.tags[0], PartialTag)
        assert isinstance(template.tags[1], PragmaTag)
        assert isinstance(template.tags[2], GroupTag)

    def test_tag_positions(self):
        template = parse("line one\n  {{name}}")

        tag = template.tags[1]
        assert (tag.line, tag.column) == (2, 3)


class TestGroups:

    def test_nested_sections(self):
        template = parse("{{#a}}x{{^b}}y{{/b}}{{/a}}")

        assert template.children == (0,)
        outer, x, inner, y = template.tags
        assert outer.kind == TagKind.SECTION
        assert outer.children == (1, 2)
        assert outer.closing == "{{/a}}"
        assert inner.kind == TagKind.INVERTED_SECTION
        assert inner.children == (3,)
        assert inner.closing == "{{/b}}"
        assert outer.parent is None
        assert x.parent == 0
        assert inner.parent == 0
        assert y.parent == 2

    def test_sibling_sections(self):
        template = parse("{{#a}}1{{/a}}{{#b}}2{{/b}}")

        assert template.children == (0, 2)
        assert template.tags[0].children == (1,)
        assert template.tags[2].children == (3,)

    def test_close_name_mismatch(self):
        with pytest.raises(MustacheSyntaxError, match="closing tag name mismatch"):
            parse("{{#a}}...{{/b}}")

    def test_close_mismatch_inner(self):
        with pytest.raises(MustacheSyntaxError, match="mismatch"):
            parse("{{#a}}{{#b}}{{/a}}{{/b}}")

    def test_unterminated_section(self):
        with pytest.raises(MustacheSyntaxError, match="unterminated section"):
            parse("{{#a}}")

    def test_unterminated_outer_section(self):
        with pytest.raises(MustacheSyntaxError, match="unterminated section 'a'"):
            parse("{{#a}}{{^b}}{{/b}}")

    def test_close_without_open(self):
        with pytest.raises(MustacheSyntaxError, match="without open section"):
            parse("text {{/a}}")

    def test_error_position(self):
        with pytest.raises(MustacheSyntaxError) as exc_info:
            parse("line1\n{{/x}}")

        assert exc_info.value.line == 2
        assert exc_info.value.column == 1
        assert exc_info.value.position == 6


class TestMalformedTags:

    @pytest.mark.parametrize("source", [
        "{{name",
        "{{#a",
        "{{! never closed",
        "{{",
        "{{   ",
    ])
    def test_unterminated_tag(self, source):
        with pytest.raises(MustacheSyntaxError, match="unterminated tag"):
            parse(source)

    @pytest.mark.parametrize("source", ["{{}}", "{{  }}"])
    def test_empty_tag(self, source):
        with pytest.raises(MustacheSyntaxError, match="empty tag"):
            parse(source)

    @pytest.mark.parametrize("source", ["{{#}}", "{{> }}", "{{&}}", "{{{ }}}"])
    def test_empty_name(self, source):
        with pytest.raises(MustacheSyntaxError, match="empty tag name"):
            parse(source)

    def test_unencoded_without_extra_brace(self):
        with pytest.raises(MustacheSyntaxError, match="proper closing delimiters"):
            parse("{{{name}}")

    def test_unencoded_brace_after_close(self):
        """The extra '}' must come right before the close delimiter."""
        with pytest.raises(MustacheSyntaxError, match="proper closing delimiters"):
            parse("{{{a}}b}}}")

    def test_unencoded_extra_brace_left_as_text(self):
        template = parse("{{{a}}}}")

        assert kinds(template) == [TagKind.UNENCODED_NAME, TagKind.PLAIN]
        assert template.tags[1].text == "}"


class TestSetDelimiters:

    def test_new_delimiters_apply_to_following_tags(self):
        template = parse("{{=<% %>=}}<%name%> {{name}}")

        assert kinds(template) == [TagKind.DELIMITERS, TagKind.NAME, TagKind.PLAIN]
        assert template.tags[1].text == "name"
        assert template.tags[2].text == " {{name}}"

    def test_delimiter_snapshots(self):
        template = parse("{{=<% %>=}}<%name%>")

        assert template.tags[0].delimiters == DEFAULT_DELIMITERS
        assert template.tags[1].delimiters == Delimiters("<%", "%>")

    @pytest.mark.parametrize("source, text", [
        ("{{=| |=}}|x|", "x"),
        ("{{=<<< >>>=}}<<< x >>>", "x"),
        ("{{=[ ]=}}[#s][/s]", "s"),
    ])
    def test_delimiter_lengths(self, source, text):
        template = parse(source)

        assert template.tags[1].text == text

    def test_change_inside_section_persists(self):
        template = parse("{{#s}}{{=<% %>=}}<%/s%><%x%>")

        assert template.children == (0, 2)
        assert template.tags[2].kind == TagKind.NAME

    def test_triple_with_custom_delimiters(self):
        template = parse("{{=<% %>=}}<%{html}%>")

        assert template.tags[1].kind == TagKind.UNENCODED_NAME
        assert template.tags[1].text == "html"

    def test_close_delimiter_starting_with_equals(self):
        template = parse("{{=<% =%> =}}<% x =%>")

        assert template.tags[1].kind == TagKind.NAME
        assert template.tags[1].text == "x"
        assert template.tags[1].delimiters == Delimiters("<%", "=%>")

    def test_malformed_change(self):
        with pytest.raises(MustacheSyntaxError, match="setting delimiters"):
            parse("{{=<%%>=}}")


class TestPragmaCollection:

    def test_pragmas_collected_in_document_order(self):
        template = parse("{{%a:b}}{{#s}}{{%c}}{{/s}}")

        assert template.pragma_indices == (0, 2)
        assert template.collected_pragmas() == [{"a": "b"}, {"c": ""}]

    def test_no_pragmas(self):
        assert parse("{{x}}").collected_pragmas() == []


class TestParserReuse:

    def test_parser_holds_no_state_between_parses(self):
        parser = MustacheParser()

        first = parser.parse("{{=<% %>=}}<%a%>", name="first")
        second = parser.parse("{{b}}", name="second")

        assert first.name == "first"
        assert second.name == "second"
        assert second.tags[0].kind == TagKind.NAME
        assert second.tags[0].delimiters == DEFAULT_DELIMITERS

    def test_failed_parse_does_not_affect_next(self):
        parser = MustacheParser()
        with pytest.raises(MustacheSyntaxError):
            parser.parse("{{#open}}")

        template = parser.parse("ok")

        assert kinds(template) == [TagKind.PLAIN]
