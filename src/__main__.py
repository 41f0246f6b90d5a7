#!/usr/bin/env python3
"""
razorhost - Razor template parser with MVC directives

Parses a Razor view template, recognising the MVC directives

    @model <type>
    @inject <type> <property>
    @route <pattern>
    @httpget / @httpput / @httppost / @httpdelete / @httppatch <pattern>

and generates the C# view class they describe.

Usage:
    razorhost inputdir/ outputdir/ --inputFile Index.cshtml

    The generated class is written to outputdir/ as <className>.cs.

Examples:
    # Basic generation
    razorhost views/ generated/ --inputFile Index.cshtml

    # Custom base class and class name
    razorhost views/ generated/ --inputFile Index.cshtml --baseType MyApp.BasePage --className Index

    # Design-time parse with verbose output
    razorhost views/ generated/ --inputFile Index.cshtml --designTime -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import DirectiveParser, ClassGenerator, __version__, LOG, state_connectToLogger
from .models import DirectiveAssertError, ProgramState, pipeline


DISPLAY_TITLE = r"""
  razorhost
  Razor template parser with MVC directives
"""

# Define CLI arguments
parser = ArgumentParser(
    description="razorhost - Razor template parser with MVC directives",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input Razor template (relative to inputdir)"
)

parser.add_argument(
    "--baseType",
    default=None,
    type=str,
    help="Default base class of the generated view. Defaults to RAZORHOST_BASE_TYPE",
)

parser.add_argument(
    "--designTime",
    default=None,
    action="store_true",
    help="Parse in design-time mode (directive newlines are left unconsumed). "
    "Defaults to RAZORHOST_DESIGN_TIME_MODE",
)

parser.add_argument(
    "--className",
    default=None,
    type=str,
    help="Name of the generated class. Defaults to RAZORHOST_CLASS_NAME",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the generated source",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the template
            - generatedOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.generatedOutputdir = state.outputdir / state.outputSubdir
    state.generatedOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.generatedOutputdir}", level=2)

    state.envOK = True
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read and parse the template into blocks of spans.

    Recoverable errors are printed and kept on the result; they only stop
    the pipeline in strict mode.

    Returns:
        ProgramState with added field:
            - parseResult: ParseResult for the template

    Exits:
        1 if the file cannot be read, a directive handler faults, or strict
        mode is on and errors were reported
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Parsing template...", level=1)
    try:
        directive_parser = DirectiveParser(base_type=state.baseType, design_time=state.designTime)
        state.parseResult = directive_parser.parse(source)
    except DirectiveAssertError as e:
        print(f"Internal parser error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Parsed {len(state.parseResult.blocks)} blocks", level=2)
    for error in state.parseResult.errors:
        print(f"{state.inputSourceFile.name}: {error}", file=sys.stderr)

    if appsettings.strict_mode and state.parseResult.errors:
        print(f"Error: {len(state.parseResult.errors)} parse error(s) in strict mode", file=sys.stderr)
        sys.exit(1)
    return state


def source_generate(inputstate: ProgramState) -> ProgramState:
    """
    Generate the view class from the parse result.

    Returns:
        ProgramState with added field:
            - generateResult: dict from ClassGenerator.generate()

    Exits:
        1 if parseResult is missing or generation fails
    """

    state = inputstate.copy()

    LOG("Generating view class...", level=1)

    if state.parseResult is None:
        print("Error: No parse result available", file=sys.stderr)
        sys.exit(1)

    try:
        generator = ClassGenerator(
            result=state.parseResult,
            output_dir=str(state.generatedOutputdir),
            class_name=state.className,
            default_base_type=state.baseType,
        )
        state.generateResult = generator.generate()
    except OSError as e:
        print(f"Generation error: {e}", file=sys.stderr)
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display generation results to the user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if generateResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.generateResult:
        print("Error: Generation failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Generation complete", level=1)
    LOG(f"  Output: {state.generateResult['output_file']}", level=1)
    LOG(f"  Base type: {state.generateResult['base_type']}", level=1)
    LOG(f"  Injections: {len(state.generateResult['injections'])}", level=1)
    LOG(f"  Routes: {len(state.generateResult['routes'])}", level=1)
    LOG(f"  Errors: {state.generateResult['error_count']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="razorhost - Razor template parser with MVC directives",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - parse a Razor template and generate its view class.

    Orchestrates the pipeline:
        1. env_check: Validate paths and environment
        2. source_parse: Read and parse the template
        3. source_generate: Generate the class source
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_parse, source_generate, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
