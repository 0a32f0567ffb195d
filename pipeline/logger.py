"""
Run logging for the churn risk pipeline.

Writes one JSON log per run (success or failure).
"""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from .runner import RunResult
    from .config import RunConfig


class RunLogger:
    """Structured JSON logging for pipeline runs."""

    def __init__(self, logs_dir: Path):
        """
        Initialize logger.

        Args:
            logs_dir: Directory to write log files
        """
        self.logs_dir = logs_dir
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def log_run(self, result: "RunResult") -> Path:
        """
        Log run result to JSON file.

        Args:
            result: RunResult from runner

        Returns:
            Path to log file
        """
        pipeline = result.pipeline
        log_entry = {
            "run_id": result.run_id,
            "timestamp": result.timestamp.isoformat(),
            "duration_seconds": result.duration_seconds,
            "config": {
                "name": result.config.name,
                "description": result.config.description,
                "input_path": result.config.input_path,
                "classifier": result.config.classifier,
                "as_of": pipeline.as_of.isoformat(),
            },
            "risk_config": pipeline.config.to_dict(camel_case=True),
            "input": {
                "rows": len(pipeline.records),
                "malformed_rows": len(pipeline.diagnostics),
                "short_rows": sum(1 for d in pipeline.diagnostics if d.is_short),
            },
            "results": {
                "metrics": pipeline.metrics.to_dict(),
                "client_metrics": pipeline.client_metrics.to_dict(),
                "firm_metrics": pipeline.firm_metrics.to_dict(),
            },
            "output_files": [str(p) for p in result.output_files],
            "status": "OK",
        }

        log_path = self.logs_dir / f"{result.run_id}.json"
        with open(log_path, "w") as f:
            json.dump(log_entry, f, indent=2, default=str)

        return log_path

    def log_failure(
        self,
        run_id: str,
        config: "RunConfig",
        error: str,
    ) -> Path:
        """
        Log failed run.

        Args:
            run_id: Unique run ID
            config: RunConfig used
            error: Error message

        Returns:
            Path to log file
        """
        log_entry = {
            "run_id": run_id,
            "timestamp": datetime.now().isoformat(),
            "config": {
                "name": config.name,
                "description": config.description,
                "input_path": config.input_path,
            },
            "status": "ERROR",
            "error": error,
        }

        log_path = self.logs_dir / f"{run_id}.json"
        with open(log_path, "w") as f:
            json.dump(log_entry, f, indent=2)

        return log_path

    def get_all_logs(self) -> list[dict]:
        """
        Load all run logs.

        Returns:
            List of log dictionaries, sorted by file name
        """
        logs = []
        for log_file in sorted(self.logs_dir.glob("run_*.json")):
            with open(log_file) as f:
                logs.append(json.load(f))
        return logs

    def get_failed_runs(self) -> list[dict]:
        return [log for log in self.get_all_logs() if log.get("status") == "ERROR"]

    def get_summary_dataframe(self) -> pd.DataFrame:
        """
        Get summary of all runs as DataFrame.

        Returns:
            DataFrame with one row per run, newest first
        """
        logs = self.get_all_logs()
        if not logs:
            return pd.DataFrame()

        summary = []
        for log in logs:
            entry = {
                "run_id": log["run_id"],
                "name": log["config"]["name"],
                "timestamp": log["timestamp"],
                "status": log["status"],
            }

            if "results" in log:
                metrics = log["results"].get("metrics", {})
                for key in ["total_companies", "high_risk_count", "average_churn_score"]:
                    entry[key] = metrics.get(key)
                entry["malformed_rows"] = log.get("input", {}).get("malformed_rows")

            summary.append(entry)

        df = pd.DataFrame(summary)
        return df.sort_values("timestamp", ascending=False)
