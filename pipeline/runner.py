"""
Pipeline runner for churn risk batch scoring.

Single entry point for scoring a user export and writing its outputs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional
import uuid

import pandas as pd

from churnrisk.engine import ChurnRiskEngine, PipelineResult
from churnrisk.metrics import split_by_user_type
from churnrisk.validation import InvalidConfigError

from .config import RunConfig
from .exports import ExportWriter
from .logger import RunLogger


@dataclass
class RunResult:
    """Container for run results."""

    run_id: str
    config: RunConfig
    pipeline: PipelineResult
    timestamp: datetime
    duration_seconds: float
    output_files: list[Path] = field(default_factory=list)

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [f"[{self.run_id}] {self.config.name}"]
        lines.append(
            f"  Rows: {len(self.pipeline.records)} "
            f"(malformed: {len(self.pipeline.diagnostics)})"
        )
        for label, metrics in [
            ("Client", self.pipeline.client_metrics),
            ("Firm", self.pipeline.firm_metrics),
        ]:
            lines.append(
                f"  {label:<7} companies: {metrics.total_companies:>4}  "
                f"high: {metrics.high_risk_count:>3}  "
                f"medium: {metrics.medium_risk_count:>3}  "
                f"low: {metrics.low_risk_count:>3}  "
                f"inactive: {metrics.inactive_companies:>3}  "
                f"avg score: {metrics.average_churn_score}"
            )
        return "\n".join(lines)


class PipelineRunner:
    """
    Single entry point for pipeline runs.

    Usage:
        runner = PipelineRunner()

        # From YAML config
        result = runner.run_from_yaml("configs/example_run.yaml")

        # From RunConfig object
        config = RunConfig(name="adhoc", input_path="users.csv")
        result = runner.run(config)

        # Batch run
        results = runner.run_batch(["configs/q1.yaml", "configs/q2.yaml"])
    """

    def __init__(
        self,
        base_path: Optional[Path] = None,
        logs_dir: str = "logs",
    ):
        """
        Initialize runner.

        Args:
            base_path: Directory relative paths resolve against (default: cwd)
            logs_dir: Subdirectory for run logs
        """
        self.base_path = Path(base_path) if base_path else Path.cwd()
        self.logs_dir = self.base_path / logs_dir
        self.logger = RunLogger(self.logs_dir)

    def generate_run_id(self) -> str:
        """Generate unique run ID: run_YYYYMMDD_XXXX"""
        date_str = datetime.now().strftime("%Y%m%d")
        short_uuid = uuid.uuid4().hex[:4]
        return f"run_{date_str}_{short_uuid}"

    def _resolve(self, path: str) -> Path:
        resolved = Path(path)
        return resolved if resolved.is_absolute() else self.base_path / resolved

    def run(self, config: RunConfig) -> RunResult:
        """
        Run a single scoring pass.

        Args:
            config: RunConfig to run

        Returns:
            RunResult with pipeline output and written files

        Raises:
            InvalidConfigError: If the risk settings fail validation
        """
        run_id = self.generate_run_id()
        start_time = datetime.now()

        try:
            validation = config.resolve_risk_config(self.base_path)
            if not validation.is_valid:
                raise InvalidConfigError(validation.violation)

            text = self._resolve(config.input_path).read_text(encoding="utf-8")

            engine = ChurnRiskEngine(validation.config, config.build_classifier())
            pipeline = engine.run(text, as_of=config.as_of)

            writer = ExportWriter(self._resolve(config.output_dir))
            by_type = split_by_user_type(pipeline.companies)
            output_files = []
            for user_type in config.user_types:
                companies = by_type[user_type]
                output_files.extend(
                    writer.save_exports(
                        companies, user_type, config.exports, as_of=pipeline.as_of
                    )
                )
                if config.plot and companies:
                    output_files.append(
                        writer.plot_score_distribution(
                            companies, pipeline.config, user_type, as_of=pipeline.as_of
                        )
                    )

            result = RunResult(
                run_id=run_id,
                config=config,
                pipeline=pipeline,
                timestamp=start_time,
                duration_seconds=(datetime.now() - start_time).total_seconds(),
                output_files=output_files,
            )

            self.logger.log_run(result)
            return result

        except Exception as e:
            self.logger.log_failure(run_id, config, str(e))
            raise

    def run_from_yaml(self, config_path: str | Path) -> RunResult:
        """
        Load config from YAML and run.

        Args:
            config_path: Path to YAML config (relative to base_path or absolute)

        Returns:
            RunResult
        """
        config = RunConfig.from_yaml(self._resolve(str(config_path)))
        return self.run(config)

    def run_batch(
        self,
        config_paths: list[str | Path],
        stop_on_failure: bool = False,
    ) -> list[RunResult]:
        """
        Run multiple configs in sequence.

        Args:
            config_paths: List of paths to YAML configs
            stop_on_failure: Whether to stop if a run errors

        Returns:
            List of RunResults for the runs that completed
        """
        results = []
        for path in config_paths:
            try:
                result = self.run_from_yaml(path)
                results.append(result)
                print(result.summary())
                print()
            except Exception as e:
                print(f"ERROR: {path} - {e}")
                if stop_on_failure:
                    raise
        return results

    def list_runs(self) -> pd.DataFrame:
        """
        Get summary of all past runs.

        Returns:
            DataFrame with run history
        """
        return self.logger.get_summary_dataframe()
