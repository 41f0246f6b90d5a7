"""
Host parser tests - markup, transitions, expressions and @inherits

Tests the document loop and shared grammar routines of CodeParser.
"""

import pytest

from razorhost.lib.parser import CodeParser, ParserContext
from razorhost.lib.directives import DirectiveRegistry
from razorhost.models.generators import SetBaseTypeCodeGenerator
from razorhost.models.syntax import AcceptedCharacters, BlockType, SourceLocation, SpanKind


def parse(source, design_time=False):
    return CodeParser(design_time=design_time).parse(source)


class TestDocumentLoop:
    """Test splitting of a document into blocks"""

    def test_empty_source(self):
        """Empty string parses to no blocks"""
        result = parse("")
        assert result.blocks == []
        assert result.errors == []
        assert result.success

    def test_markup_only(self):
        """Plain markup is one MARKUP block"""
        result = parse("<p>Hello</p>\n<p>World</p>")
        assert [b.type for b in result.blocks] == [BlockType.MARKUP, BlockType.MARKUP]
        assert "".join(b.content for b in result.blocks) == "<p>Hello</p>\n<p>World</p>"

    def test_implicit_expression(self):
        """@Model.Name becomes a CODE span in an EXPRESSION block"""
        result = parse("<p>@Model.Name</p>")

        assert [b.type for b in result.blocks] == [BlockType.MARKUP, BlockType.EXPRESSION, BlockType.MARKUP]
        expression = result.blocks[1]
        assert [s.kind for s in expression.children] == [SpanKind.TRANSITION, SpanKind.CODE]
        assert expression.children[1].content == "Model.Name"
        assert result.blocks[2].content == "</p>"

    def test_expressions_inside_attribute(self):
        """A quote after an inline expression does not hide the next one"""
        result = parse('<a href="@Url">@Text</a>\n')

        assert [b.type for b in result.blocks].count(BlockType.EXPRESSION) == 2
        codes = [s.content for s in result.spans() if s.kind == SpanKind.CODE]
        assert codes == ["Url", "Text"]
        assert result.errors == []

    def test_expressions_around_apostrophe(self):
        """An apostrophe in markup does not hide the next expression"""
        result = parse("<p>@Name's friend @Other</p>\n")

        assert [b.type for b in result.blocks].count(BlockType.EXPRESSION) == 2
        assert result.blocks[2].content == "'s friend "
        assert result.errors == []

    def test_lone_transition_reports_first_character(self):
        """Only the character after '@' is named in the error"""
        result = parse("a @ b</p>")
        assert result.errors[0].message == (
            '" " is not valid at the start of a code block after the "@" character.'
        )

    def test_trailing_dot_not_part_of_expression(self):
        """A dot not followed by an identifier ends the expression"""
        result = parse("@Name.")
        assert result.blocks[0].children[1].content == "Name"
        assert result.blocks[1].content == "."

    def test_escaped_transition_is_markup(self):
        """'@@' does not start a code block"""
        result = parse("mail@@example.com")
        assert [b.type for b in result.blocks] == [BlockType.MARKUP]

    def test_lone_transition_reports_error(self):
        """'@' followed by a non-identifier is reported and skipped"""
        result = parse("a @ b")
        assert len(result.errors) == 1
        assert "@" in result.errors[0].message
        assert "".join(b.content for b in result.blocks) == "a @ b"

    def test_transition_at_end_of_file(self):
        """'@' at end of input reports end-of-file"""
        result = parse("a @")
        assert len(result.errors) == 1
        assert "End-of-file" in result.errors[0].message

    def test_parse_is_lossless(self):
        """Concatenated blocks reproduce the source"""
        source = "@inherits Base\n<h1>@Title</h1>\n@unknown thing\n"
        result = parse(source)
        assert "".join(b.content for b in result.blocks) == source
        assert "".join(s.content for s in result.spans()) == source


class TestInheritsDirective:
    """Test @inherits handled by the base parser"""

    def test_inherits(self):
        """@inherits emits MetaCode keyword span and Code type span"""
        result = parse("@inherits MyApp.BasePage\n<p/>")

        block = result.blocks[0]
        assert block.type == BlockType.DIRECTIVE
        assert block.complete
        assert [s.kind for s in block.children] == [SpanKind.TRANSITION, SpanKind.META_CODE, SpanKind.CODE]
        assert block.children[1].content == "inherits "
        assert block.children[1].accepted_characters == AcceptedCharacters.NONE
        assert block.children[2].content == "MyApp.BasePage\n"
        assert result.generators() == [SetBaseTypeCodeGenerator("MyApp.BasePage")]
        assert result.errors == []

    def test_inherits_without_type(self):
        """Missing type name is reported, descriptor still emitted"""
        result = parse("@inherits\n")
        assert len(result.errors) == 1
        assert result.errors[0].message == (
            "The 'inherits' keyword must be followed by a type name on the same line."
        )
        assert result.generators() == [SetBaseTypeCodeGenerator("")]

    def test_keyword_without_whitespace_keeps_edit_policy(self):
        """Keyword span with no whitespace accepts any edit"""
        result = parse("@inherits")
        assert result.blocks[0].children[1].accepted_characters == AcceptedCharacters.ANY

    def test_descriptor_span_at_end_of_file(self):
        """@inherits at end of input still emits a descriptor-only span"""
        result = parse("@inherits")
        span = result.blocks[0].children[-1]
        assert span.symbols == ()
        assert span.start is None
        assert span.code_generator == SetBaseTypeCodeGenerator("")

    def test_extra_whitespace_is_code(self):
        """Only one whitespace character stays with the keyword"""
        result = parse("@inherits    Base")
        block = result.blocks[0]
        assert block.children[1].content == "inherits "
        assert block.children[2].content == "   Base"
        assert block.children[2].start == SourceLocation(10, 0, 10)
        assert result.generators() == [SetBaseTypeCodeGenerator("Base")]


class TestTypeNames:
    """Test the shared namespace-or-type-name routine"""

    @pytest.mark.parametrize("type_name", [
        "Foo",
        "A.B.C",
        "global::System.String",
        "List<int>",
        "Dictionary<string, List<int>>",
        "int?",
        "string[]",
        "List<int>[][]",
    ])
    def test_type_name_consumed_exactly(self, type_name):
        """Type name text is returned exactly as written"""
        parser = CodeParser(design_time=False)
        parser.context = ParserContext(f"@x {type_name} rest", directives=["x"])
        parser.context.position = 3

        assert parser.namespaceOrTypeName() == type_name

    def test_unbalanced_generic_stops_at_newline(self):
        """An unclosed '<' does not run into the next line"""
        parser = CodeParser(design_time=False)
        parser.context = ParserContext("@x List<int\n@y", directives=["x"])
        parser.context.position = 3

        assert parser.namespaceOrTypeName() == "List<int"
        assert parser.current.content == "\n"


class TestRegistry:
    """Test the keyword dispatch table"""

    def test_inherits_registered(self):
        """The base parser owns @inherits"""
        assert CodeParser(design_time=False).directives.keywords() == ["inherits"]

    def test_duplicate_registration(self):
        """A keyword can only be registered once"""
        registry = DirectiveRegistry()
        registry.register("model", lambda: None)
        with pytest.raises(ValueError, match="already registered"):
            registry.register("model", lambda: None)

    def test_lookup_is_exact(self):
        """Lookup is case-sensitive"""
        registry = DirectiveRegistry()
        registry.register("model", lambda: None)
        assert registry.get("model") is not None
        assert registry.get("Model") is None
        assert "model" in registry
        assert len(registry) == 1
