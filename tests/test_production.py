"""
Production readiness tests.

Tests performance, scalability, error handling, and operational monitoring.
"""

import os
import time

import psutil
import pytest

from churnrisk import ChurnRiskEngine, generate_sample_csv


class TestProductionPerformance:
    """Production performance and scalability tests."""

    def test_scoring_performance_5k_users(self, as_of):
        """Should score 5K users in <5 seconds."""
        text = generate_sample_csv(n_users=5000, n_companies=500, seed=42, as_of=as_of)
        engine = ChurnRiskEngine()

        start = time.time()
        result = engine.run(text, as_of=as_of)
        elapsed = time.time() - start

        assert elapsed < 5.0, \
            f"Too slow: {elapsed:.2f}s for 5K users (target: <5s)"
        assert sum(c.user_count for c in result.companies) == 5000

    def test_memory_usage_reasonable(self, as_of):
        """Should not use >500MB for 20K users."""
        process = psutil.Process(os.getpid())
        mem_before = process.memory_info().rss / 1024 / 1024  # MB

        text = generate_sample_csv(n_users=20000, n_companies=2000, seed=42, as_of=as_of)
        ChurnRiskEngine().run(text, as_of=as_of)

        mem_after = process.memory_info().rss / 1024 / 1024  # MB
        mem_used = mem_after - mem_before

        assert mem_used < 500, \
            f"Excessive memory: {mem_used:.1f}MB (target: <500MB)"


class TestErrorHandling:
    """Malformed input degrades, never raises."""

    @pytest.mark.parametrize("text", [
        "",
        "header only",
        "\n\n\n",
        "header\n\n\n",
        "header\r\nU1,a,a@x.com\r\n",
        "header\n" + ",".join(["x"] * 40),
        "header\n@@@\n@\nuser@\n",
    ])
    def test_garbage_input_never_raises(self, engine, as_of, text):
        result = engine.run(text, as_of=as_of)

        assert all(0 <= c.churn_risk_score <= 100 for c in result.companies)
        assert result.metrics.total_companies == len(result.companies)

    def test_short_rows_reported(self, engine, as_of):
        result = engine.run("header\nU1,a,a@x.com\nU2\n", as_of=as_of)

        assert [d.line_number for d in result.diagnostics] == [2, 3]
        assert all(d.is_short for d in result.diagnostics)


class TestProductionMonitoring:
    """Output sanity checks on generated data."""

    @pytest.fixture
    def result(self, engine, as_of):
        text = generate_sample_csv(n_users=2000, n_companies=200, seed=7, as_of=as_of)
        return engine.run(text, as_of=as_of)

    def test_no_duplicate_domains(self, result):
        domains = [c.domain for c in result.companies]
        assert len(domains) == len(set(domains)), "Found duplicate domains in output"

    def test_every_user_accounted_for(self, result):
        assert sum(c.user_count for c in result.companies) == len(result.records)

    def test_high_risk_proportion_reasonable(self, result):
        """High-risk companies should not dominate generated data."""
        pct = result.metrics.high_risk_count / result.metrics.total_companies
        assert pct <= 0.9, f"Unusual high-risk proportion: {pct:.1%}"

    def test_sorted_descending(self, result):
        scores = [c.churn_risk_score for c in result.companies]
        assert scores == sorted(scores, reverse=True)
