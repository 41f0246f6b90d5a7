"""
@model directive tests - dispatch, model/inherits conflicts, duplicates

Tests the per-document model state and the error positions it reports.
"""

import pytest

from razorhost.lib.directives import DirectiveParser, ROUTE_VERBS
from razorhost.models.errors import DirectiveAssertError
from razorhost.models.generators import ModelCodeGenerator, SetBaseTypeCodeGenerator
from razorhost.models.syntax import BlockType, SourceLocation, SpanKind


CONFLICT = "The 'inherits' keyword is not allowed when a 'model' keyword is used."
DUPLICATE = "Only one 'model' statement is allowed in a file."


def parse(source, base_type="RazorPage", design_time=False):
    parser = DirectiveParser(base_type, design_time=design_time)
    return parser, parser.parse(source)


class TestDispatch:
    """Test the directive table built at construction"""

    def test_keywords_registered(self):
        """Eight MVC keywords plus the base @inherits"""
        parser = DirectiveParser("RazorPage", design_time=False)
        assert parser.directives.keywords() == sorted([
            "inherits", "model", "inject",
            "route", "httpget", "httpput", "httppost", "httpdelete", "httppatch",
        ])

    def test_route_verbs(self):
        """Each route keyword maps to its lowercase verb"""
        assert ROUTE_VERBS["route"] is None
        assert ROUTE_VERBS["httppatch"] == "patch"
        assert len(ROUTE_VERBS) == 6

    def test_keyword_is_case_sensitive(self):
        """@Model is an expression, not a directive"""
        _, result = parse("@Model.Name")
        assert result.blocks[0].type == BlockType.EXPRESSION
        assert result.generators() == []

    def test_handler_on_wrong_keyword_aborts(self):
        """A mis-wired handler raises instead of recording an error"""
        parser = DirectiveParser("RazorPage", design_time=False)
        parser.directives.register("viewmodel", parser.modelDirective)

        with pytest.raises(DirectiveAssertError, match="'model'"):
            parser.parse("@viewmodel Foo\n")

    def test_default_base_type_from_settings(self):
        """base_type defaults to the configured value"""
        from razorhost.config import appsettings

        parser = DirectiveParser(design_time=False)
        assert parser.base_type == appsettings.base_type


class TestModelDirective:
    """Test a single @model directive"""

    def test_single_model(self):
        """One descriptor, no errors"""
        parser, result = parse("@model MyApp.Person\n<p>@Model.Name</p>")

        assert result.errors == []
        assert result.generators() == [ModelCodeGenerator("RazorPage", "MyApp.Person")]
        assert parser.state.model_statement_seen

    def test_spans(self):
        """Keyword is MetaCode, type is Code, block is a complete directive"""
        _, result = parse("@model Foo\n")

        block = result.blocks[0]
        assert block.type == BlockType.DIRECTIVE
        assert block.complete
        assert [(s.kind, s.content) for s in block.children] == [
            (SpanKind.TRANSITION, "@"),
            (SpanKind.META_CODE, "model "),
            (SpanKind.CODE, "Foo\n"),
        ]

    def test_generic_model(self):
        """Model type text is taken verbatim"""
        _, result = parse("@model IEnumerable<MyApp.Person>\n")
        model = result.generators()[0]
        assert model.model_type == "IEnumerable<MyApp.Person>"
        assert model.resolved_base_type == "RazorPage<IEnumerable<MyApp.Person>>"

    def test_model_without_type(self):
        """Missing type is reported; descriptor still emitted"""
        parser, result = parse("@model\n")

        assert [e.message for e in result.errors] == [
            "The 'model' keyword must be followed by a type name on the same line."
        ]
        assert result.errors[0].location == SourceLocation(6, 0, 6)
        assert result.generators() == [ModelCodeGenerator("RazorPage", "")]
        assert parser.state.model_statement_seen

    def test_does_not_consume_next_directive(self):
        """Each directive block ends at its own line"""
        _, result = parse("@model A\n@inject B C\n")
        assert [b.content for b in result.blocks] == ["@model A\n", "@inject B C\n"]

    def test_state_reset_between_documents(self):
        """A parser instance can parse several documents"""
        parser = DirectiveParser("RazorPage", design_time=False)
        parser.parse("@model A\n")
        result = parser.parse("@model B\n")
        assert result.errors == []


class TestDuplicateModel:
    """Test two @model directives in one document"""

    def test_second_model_reported(self):
        """Second model reports at its keyword end; both descriptors emitted"""
        parser, result = parse("@model A\n@model B\n")

        assert [e.message for e in result.errors] == [DUPLICATE]
        assert result.errors[0].location == SourceLocation(15, 1, 6)
        assert result.generators() == [
            ModelCodeGenerator("RazorPage", "A"),
            ModelCodeGenerator("RazorPage", "B"),
        ]
        assert parser.state.model_statement_seen


class TestInheritsAndModel:
    """Test the model/inherits conflict check"""

    def test_inherits_then_model(self):
        """Conflict reported once, at the inherits keyword end"""
        _, result = parse("@inherits Bar\n@model Foo\n")

        assert [e.message for e in result.errors] == [CONFLICT]
        assert result.errors[0].location == SourceLocation(9, 0, 9)
        assert result.generators() == [
            SetBaseTypeCodeGenerator("Bar"),
            ModelCodeGenerator("RazorPage", "Foo"),
        ]

    def test_model_then_inherits(self):
        """Conflict reported once when inherits completes the pair"""
        _, result = parse("@model Foo\n@inherits Bar\n")

        assert [e.message for e in result.errors] == [CONFLICT]
        assert result.errors[0].location == SourceLocation(20, 1, 9)
        assert len(result.generators()) == 2

    def test_inherits_alone(self):
        """No conflict without a model"""
        parser, result = parse("@inherits Bar\n")
        assert result.errors == []
        assert parser.state.inherits_end_location == SourceLocation(9, 0, 9)
        assert not parser.state.model_statement_seen

    def test_each_completion_reports(self):
        """Every directive completing the pair reports again"""
        _, result = parse("@model A\n@inherits B\n@model C\n")

        assert [e.message for e in result.errors] == [CONFLICT, DUPLICATE, CONFLICT]

    def test_check_without_change_is_silent_before_pair(self):
        """The check does nothing until both directives were seen"""
        parser, _ = parse("@model A\n")
        parser.inheritsAndModel_check()
        assert parser.context.errors == []
