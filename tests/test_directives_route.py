"""
Route directive tests - @route, @http* verbs and design-time newlines
"""

import pytest

from razorhost.lib.directives import DirectiveParser
from razorhost.lib.parser import ParserContext
from razorhost.models.generators import RouteCodeGenerator
from razorhost.models.syntax import AcceptedCharacters, BlockType, SpanKind, SymbolKind


def parse(source, design_time=False):
    parser = DirectiveParser("RazorPage", design_time=design_time)
    return parser, parser.parse(source)


class TestRoute:
    """Test route pattern extraction"""

    def test_quoted_pattern_with_verb(self):
        """@httpget keeps the pattern text as written"""
        _, result = parse('@httpget "/foo/{bar}"\n')

        assert result.errors == []
        assert result.generators() == [RouteCodeGenerator('"/foo/{bar}"', "get")]

    def test_bare_route(self):
        """@route has no verb"""
        _, result = parse("@route /foo\n")
        assert result.generators() == [RouteCodeGenerator("/foo", None)]

    @pytest.mark.parametrize("keyword, verb", [
        ("httpget", "get"),
        ("httpput", "put"),
        ("httppost", "post"),
        ("httpdelete", "delete"),
        ("httppatch", "patch"),
    ])
    def test_verbs(self, keyword, verb):
        """Every http keyword carries its verb"""
        _, result = parse(f"@{keyword} api/items/{{id}}\n")
        assert result.generators() == [RouteCodeGenerator("api/items/{id}", verb)]

    def test_spans_are_metacode(self):
        """Both route spans are MetaCode; block is a complete directive"""
        _, result = parse("@route   /a/b  \n<p/>")

        block = result.blocks[0]
        assert block.type == BlockType.DIRECTIVE
        assert block.complete
        assert [(s.kind, s.content) for s in block.children] == [
            (SpanKind.TRANSITION, "@"),
            (SpanKind.META_CODE, "route "),
            (SpanKind.META_CODE, "  /a/b  \n"),
        ]
        assert block.children[1].accepted_characters == AcceptedCharacters.NONE
        assert result.generators() == [RouteCodeGenerator("/a/b", None)]

    def test_comment_is_part_of_pattern(self):
        """Everything to end of line belongs to the pattern"""
        _, result = parse("@route /a//b\n")
        assert result.generators() == [RouteCodeGenerator("/a//b", None)]

    @pytest.mark.parametrize("source", ["@route\n", "@route   \n", "@route"])
    def test_empty_pattern_accepted(self, source):
        """An empty pattern is not an error"""
        _, result = parse(source)
        assert result.errors == []
        assert result.generators() == [RouteCodeGenerator("", None)]

    def test_empty_pattern_does_not_consume_next_line(self):
        """The following directive is still parsed"""
        _, result = parse("@route\n@httppost /save\n")
        assert result.generators() == [
            RouteCodeGenerator("", None),
            RouteCodeGenerator("/save", "post"),
        ]


class TestDesignTime:
    """Test that design-time mode leaves directive newlines in place"""

    @pytest.mark.parametrize("source", [
        "@route /foo\n<p/>",
        "@model Foo\n<p/>",
        "@inject IFoo Foo\n<p/>",
    ])
    def test_newline_consumed_at_runtime(self, source):
        """Normal compilation takes the newline into the directive block"""
        _, result = parse(source, design_time=False)
        assert result.blocks[0].content.endswith("\n")
        assert result.blocks[1].content == "<p/>"

    @pytest.mark.parametrize("source", [
        "@route /foo\n<p/>",
        "@model Foo\n<p/>",
        "@inject IFoo Foo\n<p/>",
    ])
    def test_newline_preserved_at_design_time(self, source):
        """Design-time leaves the newline for the markup that follows"""
        _, result = parse(source, design_time=True)
        assert not result.blocks[0].content.endswith("\n")
        assert result.blocks[1].content == "\n<p/>"

    def test_cursor_position_after_directive(self):
        """Handler stops on the newline at design time, after it otherwise"""
        for design_time, expected_kind in ((True, SymbolKind.NEWLINE), (False, SymbolKind.TEXT)):
            parser = DirectiveParser("RazorPage", design_time=design_time)
            parser.context = ParserContext(
                "@route /foo\n<p/>", design_time=design_time, directives=parser.directives.keywords()
            )
            parser.context.block_start(BlockType.EXPRESSION)
            parser.context.position = 1

            parser.directives.get("route")()

            assert parser.current.kind == expected_kind

    def test_descriptor_unchanged_by_design_time(self):
        """Patterns are the same in both modes"""
        _, runtime = parse("@httpget /foo\n")
        _, design = parse("@httpget /foo\n", design_time=True)
        assert runtime.generators() == design.generators()
