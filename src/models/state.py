"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional CLI pipeline, the
pipeline() helper for composing transformation stages, and DirectiveState,
the per-document state shared by the model and inherits handlers.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

from .syntax import SourceLocation

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from ..lib.parser import ParseResult


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class DirectiveState:
    """
    Per-document state of the directive layer

    One instance lives for exactly one parse pass.

    Attributes:
        base_type: Default base class of the generated type, wrapped by
                   ``@model`` descriptors
        model_statement_seen: Flips to True on the first ``@model`` and is
                              never reset
        inherits_end_location: Location right after the ``inherits`` keyword,
                               recorded only to position the conflict error
    """
    base_type: str
    model_statement_seen: bool = False
    inherits_end_location: Optional[SourceLocation] = None

    def conflict_exists(self) -> bool:
        """True once both a model and an inherits directive have been parsed"""
        return self.model_statement_seen and self.inherits_end_location is not None


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, baseType,
          designTime, className, outputSubdir
        - env_check: inputSourceFile, generatedOutputdir, envOK
        - source_parse: parseResult
        - source_generate: generateResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source template
        outputdir: Base output directory for generated files
        verbosity: Logging verbosity level (1-3)
        inputFile: Input template filename (relative to inputdir)
        baseType: Default base type, overrides settings when given
        designTime: Preserve trailing directive newlines for tooling, overrides
                    settings when given
        className: Name of the generated class, overrides settings when given
        outputSubdir: Subdirectory within outputdir for output
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input template
        generatedOutputdir: Final output directory (outputdir + outputSubdir)
        parseResult: Blocks and errors from the directive parser
        generateResult: Generator results (output_file, source, routes, ...)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    baseType: Optional[str] = field(default=None)
    designTime: Optional[bool] = field(default=None)
    className: Optional[str] = field(default=None)
    outputSubdir: str = field(default=".")

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    generatedOutputdir: Path = field(default=Path("/"))
    parseResult: Optional["ParseResult"] = field(default=None)
    generateResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, baseType, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for generated output

        Returns:
            ProgramState instance with all known CLI options as attributes
        """
        import dataclasses

        options_dict = vars(options)
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown options (e.g. ones injected by the plugin wrapper) are ignored
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_parse,
            source_generate,
            results_report
        )

    This is equivalent to:
        results_report(source_generate(source_parse(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
