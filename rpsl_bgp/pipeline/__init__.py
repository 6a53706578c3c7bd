"""RPSL BGP pipeline orchestration"""

from .workflow import (
    EmitPipeline, PipelineResult, load_document, read_input, run_pipeline, write_output
)

__all__ = [
    'EmitPipeline', 'PipelineResult', 'load_document', 'read_input', 'run_pipeline', 'write_output',
]
