#!/usr/bin/env python3
"""
Pipeline Orchestration - RPSL BGP Emit Workflow

Implements the complete policy output pipeline:
1. Read RPSL text from a file or stdin
2. Parse and index the objects into a policy document
3. Resolve every aut-num's export tables
4. Render the document with the configured emitter to a file or stdout
"""

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO

from ..document import RpslDocument
from ..emitters import Emitter, get_emitter
from ..utils.config import RpslBgpConfig


@dataclass
class PipelineResult:
    """Complete pipeline execution results"""
    success: bool
    objects_read: int
    aut_nums: int
    emitter: str
    execution_time: float
    output_path: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)


def read_input(input_path: Optional[str] = None, encoding: str = "utf-8",
               stdin: Optional[TextIO] = None) -> str:
    """Read RPSL text from input_path, or from stdin when no path is given"""
    logger = logging.getLogger(__name__)

    if not input_path:
        logger.info("Reading RPSL objects from stdin")
        return (stdin or sys.stdin).read()

    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    logger.info(f"Reading RPSL objects from {path}")
    return path.read_text(encoding=encoding)


def write_output(text: str, output_path: Optional[str] = None, encoding: str = "utf-8",
                 stdout: Optional[TextIO] = None) -> None:
    """Write emitter output to output_path, or to stdout when no path is given"""
    if not output_path:
        out = stdout or sys.stdout
        out.write(text)
        if text and not text.endswith("\n"):
            out.write("\n")
        return

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding=encoding)
    logging.getLogger(__name__).info(f"Wrote {len(text)} characters to {path}")


def load_document(config: RpslBgpConfig, input_path: Optional[str] = None,
                  stdin: Optional[TextIO] = None) -> RpslDocument:
    """Read and index the configured input (input_path overrides the config)"""
    text = read_input(input_path or config.input.input_path, config.input.encoding, stdin)
    return RpslDocument.from_config(text, config)


class EmitPipeline:
    """Parse, resolve and emit one RPSL input batch"""

    def __init__(self, config: RpslBgpConfig, emitter: Optional[Emitter] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.emitter = emitter or get_emitter(config.emitter.name, config.emitter.arguments)
        self.document: Optional[RpslDocument] = None

    def run(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> PipelineResult:
        """Execute the pipeline; structural failures propagate in strict mode"""
        start_time = time.time()
        self.logger.info(f"Starting emit pipeline with emitter {self.emitter.name}")

        self.document = load_document(self.config, stdin=stdin)
        output = self.emitter.emit(self.document)
        write_output(output, self.config.input.output_path, self.config.input.encoding, stdout)

        diagnostics = [
            f"AS{asn}: {diagnostic}"
            for asn, aut_num in self.document.aut_nums.items()
            for diagnostic in aut_num.diagnostics
        ]

        result = PipelineResult(
            success=True,
            objects_read=len(self.document.objects),
            aut_nums=len(self.document.aut_nums),
            emitter=self.emitter.name,
            execution_time=time.time() - start_time,
            output_path=self.config.input.output_path,
            errors=[error.message for error in self.document.errors],
            diagnostics=diagnostics,
        )

        self.logger.info(
            f"Pipeline completed: {result.objects_read} objects, {result.aut_nums} aut-nums, "
            f"{len(result.errors)} skipped, {len(result.diagnostics)} diagnostics "
            f"in {result.execution_time:.2f}s"
        )
        return result


def run_pipeline(config: RpslBgpConfig, stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None) -> PipelineResult:
    """
    Convenience function to run the complete emit pipeline

    Args:
        config: Configuration naming input, output and emitter
        stdin: Stream read when no input path is configured
        stdout: Stream written when no output path is configured

    Returns:
        Pipeline execution results
    """
    return EmitPipeline(config).run(stdin=stdin, stdout=stdout)
