"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field

from .document import RenderedDocument


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the export pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the export progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, summaryFile, transcriptFile,
          contentType, modelId, outputFile
        - env_check: summarySourceFile, transcriptSourceFile, pdfOutputFile, envOK
        - sources_read: summaryText, transcriptText
        - document_render: renderedDocument
        - pdf_write: exportResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the summary and transcript files
        outputdir: Directory the PDF is written to
        verbosity: Logging verbosity level (1-3)
        summaryFile: Summary Markdown filename (relative to inputdir)
        transcriptFile: Optional transcript filename (relative to inputdir)
        contentType: Content type tag selecting the template
        modelId: Model identifier shown in the banner
        outputFile: Output PDF filename (relative to outputdir)
        envOK: Environment validation passed
        summaryText: Summary Markdown as read from disk
        transcriptText: Transcript text as read from disk ("" without one)
        renderedDocument: Composed, paginated document
        exportResult: Export results (output_file, page_count, bytes)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    summaryFile: str = field(default="summary.md")
    transcriptFile: Optional[str] = field(default=None)
    contentType: str = field(default="other")
    modelId: str = field(default="")
    outputFile: str = field(default="summary.pdf")

    # Pipeline state
    envOK: bool = field(default=False)
    summarySourceFile: Path = field(default=Path("/"))
    transcriptSourceFile: Optional[Path] = field(default=None)
    pdfOutputFile: Path = field(default=Path("/"))
    summaryText: str = field(default="")
    transcriptText: str = field(default="")
    renderedDocument: Optional[RenderedDocument] = field(default=None)
    exportResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (summaryFile, contentType, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for the exported PDF

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that are ProgramState fields
        valid_fields = {f.name for f in dataclasses.fields(cls)}
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
            sources_read,
            document_render,
            pdf_write,
            results_report
        )

    This is equivalent to:
        results_report(pdf_write(document_render(sources_read(env_check(initial_state)))))

    But reads left-to-right instead of inside-out.
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
