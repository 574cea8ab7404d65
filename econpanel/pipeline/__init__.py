"""econpanel Pipeline Package - Batch runner.

Public API:
- run_pipeline: Load, derive, aggregate, model and export in one run
- PipelineResult: Container for pipeline outputs
- main: Command line entry point
"""

from .results import PipelineResult
from .run import run_pipeline
from .cli import main

__all__ = [
    "PipelineResult",
    "run_pipeline",
    "main",
]
