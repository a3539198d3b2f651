#!/usr/bin/env python3
"""
pagedown - Markdown summary and transcript to paginated PDF

Composes an AI-generated Markdown summary and a plain-text transcript into
a themed, paginated PDF: header banner, rendered summary (headings, lists,
tables with repeated headers, quotes, code), transcript and page footers.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    pagedown inputdir/ outputdir/ --summaryFile summary.md

Examples:
    # Default template
    pagedown . output/ --summaryFile summary.md

    # Meeting template with transcript and model shown in the banner
    pagedown . output/ --summaryFile notes.md --transcriptFile call.txt \\
        --contentType meeting --modelId whisper-1 --outputFile notes.pdf

    # Verbose output
    pagedown . output/ --summaryFile summary.md -vv
"""

import sys
import traceback
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from pydantic import ValidationError

from .lib import (
    ExportError,
    ExportMetadata,
    TemplateDispatcher,
    pdf_export,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
                          _
  _ __   __ _  __ _  ___  __| | _____      ___ __
 | '_ \ / _` |/ _` |/ _ \/ _` |/ _ \ \ /\ / / '_ \
 | |_) | (_| | (_| |  __/ (_| | (_) \ V  V /| | | |
 | .__/ \__,_|\__, |\___|\__,_|\___/ \_/\_/ |_| |_|
 |_|          |___/

  Markdown summaries to paginated PDF
"""

# Define CLI arguments
parser = ArgumentParser(
    description="pagedown - Markdown summary and transcript to paginated PDF",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--summaryFile", required=True, type=str, help="Summary Markdown file (relative to inputdir)"
)

parser.add_argument(
    "--transcriptFile",
    default=None,
    type=str,
    help="Plain-text transcript file (relative to inputdir)",
)

parser.add_argument(
    "--contentType",
    default="other",
    type=str,
    help="Content type selecting the template (meeting, lecture, interview, podcast, ...)",
)

parser.add_argument(
    "--modelId", default="", type=str, help="Model identifier shown in the header banner"
)

parser.add_argument(
    "--outputFile",
    default="summary.pdf",
    type=str,
    help="Output PDF filename (relative to outputdir)",
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

    Verifies that the summary (and transcript, if given) exist, then creates
    the output directory.

    Returns:
        ProgramState with added fields:
            - summarySourceFile: Resolved path to the summary
            - transcriptSourceFile: Resolved path to the transcript, or None
            - pdfOutputFile: Path the PDF will be written to
            - envOK: True if environment is valid

    Exits:
        1 if an input file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    summary_file = state.inputdir / state.summaryFile
    if not summary_file.exists():
        print(f"Error: Summary file not found: {summary_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.summarySourceFile = summary_file
    LOG(f"Summary file: {summary_file}", level=2)

    if state.transcriptFile:
        transcript_file = state.inputdir / state.transcriptFile
        if not transcript_file.exists():
            print(f"Error: Transcript file not found: {transcript_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.transcriptSourceFile = transcript_file
        LOG(f"Transcript file: {transcript_file}", level=2)

    state.pdfOutputFile = state.outputdir / state.outputFile
    state.pdfOutputFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.pdfOutputFile}", level=2)

    state.envOK = True
    return state


def sources_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the summary and transcript from disk.

    Returns:
        ProgramState with added fields:
            - summaryText: Summary Markdown
            - transcriptText: Transcript text ("" when none was given)

    Exits:
        1 if a file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading sources...", level=1)

    try:
        state.summaryText = state.summarySourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.summaryText)} characters from {state.summarySourceFile.name}", level=2)
        if state.transcriptSourceFile:
            state.transcriptText = state.transcriptSourceFile.read_text(encoding="utf-8")
            LOG(f"Read {len(state.transcriptText)} characters from {state.transcriptSourceFile.name}", level=2)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def document_render(inputstate: ProgramState) -> ProgramState:
    """
    Compose the themed, paginated document.

    Returns:
        ProgramState with added field:
            - renderedDocument: RenderedDocument ready for the writer

    Exits:
        1 if metadata is invalid or the export fails
    """

    state = inputstate.copy()

    LOG("Rendering document...", level=1)

    try:
        metadata = ExportMetadata(
            contentType=state.contentType,
            modelId=state.modelId,
            fileName=state.summarySourceFile.stem,
        )
        state.renderedDocument = TemplateDispatcher().compose(
            state.summaryText, state.transcriptText, metadata
        )
        LOG(f"Rendered {state.renderedDocument.page_count} page(s)", level=2)
    except (ExportError, ValidationError) as e:
        print(f"Render error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            traceback.print_exc()
        sys.exit(1)

    return state


def pdf_write(inputstate: ProgramState) -> ProgramState:
    """
    Serialize the document and write the PDF.

    Returns:
        ProgramState with added field:
            - exportResult: Dict with output_file, page_count and bytes

    Exits:
        1 if there is no document or the file cannot be written
    """

    state = inputstate.copy()

    if not state.renderedDocument:
        print("Error: No rendered document available", file=sys.stderr)
        sys.exit(1)

    LOG("Writing PDF...", level=1)
    try:
        data = pdf_export(state.renderedDocument)
        state.pdfOutputFile.write_bytes(data)
    except OSError as e:
        print(f"Write error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            traceback.print_exc()
        sys.exit(1)

    state.exportResult = {
        "output_file": str(state.pdfOutputFile),
        "page_count": state.renderedDocument.page_count,
        "bytes": len(data),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display export results to the user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if exportResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.exportResult:
        print("Error: Export failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Export successful!", level=1)
        LOG(f"  Output: {state.exportResult['output_file']}", level=1)
        LOG(f"  Pages:  {state.exportResult['page_count']}", level=1)
        LOG(f"  Size:   {state.exportResult['bytes']} bytes", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="pagedown - Markdown summary to paginated PDF",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - export a summary (and transcript) to PDF.

    Orchestrates the full export pipeline:
        1. env_check: Validate paths and environment
        2. sources_read: Read summary and transcript
        3. document_render: Compose the themed document
        4. pdf_write: Serialize and write the PDF
        5. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, sources_read, document_render, pdf_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
