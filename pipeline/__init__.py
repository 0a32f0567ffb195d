"""
Batch pipeline for churn risk scoring.

Usage:
    from pipeline import PipelineRunner, RunConfig

    # Run from YAML
    runner = PipelineRunner()
    result = runner.run_from_yaml("configs/example_run.yaml")
    print(result.summary())

    # Run programmatically
    config = RunConfig(
        name="adhoc",
        input_path="data/users.csv",
        risk_settings={"activeThreshold": 60},
    )
    result = runner.run(config)

CLI:
    python -m pipeline.run configs/example_run.yaml
    python -m pipeline.run --list
"""

from .config import RunConfig, EXPORT_KINDS
from .exports import ExportWriter, summary_frame, detailed_frame, json_document
from .logger import RunLogger
from .runner import PipelineRunner, RunResult

__all__ = [
    "RunConfig",
    "EXPORT_KINDS",
    "PipelineRunner",
    "RunResult",
    "RunLogger",
    "ExportWriter",
    "summary_frame",
    "detailed_frame",
    "json_document",
]
