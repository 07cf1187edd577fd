"""Tests for log contexts and metrics collection."""

import logging

from media_uploader.core.factories import LoggerAdapter, LoggerFactory
from media_uploader.core.observability import (
    LogContext,
    MetricsCollector,
    PerformanceMetrics,
    format_log_message,
)
from media_uploader.processors.common import log_final_statistics
from media_uploader.core.models import UploadBatchResult, UploadConfig, UploadOutcome


class TestLogContext:
    """Tests for LogContext."""

    def test_with_operation_keeps_correlation_id(self):
        context = LogContext(operation="validate", component="svc")

        derived = context.with_operation("decode")

        assert derived.correlation_id == context.correlation_id
        assert derived.operation == "decode"
        assert derived.component == "svc"
        assert context.operation == "validate"

    def test_with_metadata_does_not_mutate(self):
        context = LogContext().with_metadata(index=0)

        derived = context.with_metadata(key="a.jpg")

        assert context.metadata == {"index": 0}
        assert derived.metadata == {"index": 0, "key": "a.jpg"}


class TestFormatLogMessage:
    """Tests for format_log_message."""

    def test_without_context(self):
        assert format_log_message("plain") == "plain"

    def test_with_context_and_kwargs(self):
        context = LogContext(correlation_id="c1", operation="upload").with_metadata(
            key="a.jpg"
        )

        message = format_log_message("Uploaded", context, processing_time_ms=5)

        assert message == "[upload] [c1] Uploaded (key=a.jpg, processing_time_ms=5)"


class TestLoggerAdapter:
    """Tests for LoggerAdapter."""

    def test_renders_context(self, caplog):
        adapter = LoggerAdapter(logging.getLogger("test-adapter"))
        context = LogContext(correlation_id="c2")

        with caplog.at_level(logging.INFO, logger="test-adapter"):
            adapter.info("hello", context)
            adapter.debug("hidden")

        assert "[c2] hello" in caplog.text
        assert "hidden" not in caplog.text


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_summary(self):
        collector = MetricsCollector()
        collector.record_metric(PerformanceMetrics("upload_asset", 0.0, 0.5, True))
        collector.record_metric(PerformanceMetrics("upload_asset", 1.0, 2.0, False, "x"))
        collector.record_metric(PerformanceMetrics("other", 0.0, 9.0, True))

        summary = collector.get_summary("upload_asset")

        assert summary["total_operations"] == 2
        assert summary["success_rate"] == 0.5
        assert summary["avg_duration"] == 0.75
        assert summary["max_duration"] == 1.0
        assert len(collector.get_metrics()) == 3

    def test_duration_ms(self):
        assert PerformanceMetrics("op", 1.0, 1.25, True).duration_ms == 250.0

    def test_empty_and_clear(self):
        collector = MetricsCollector()
        assert collector.get_summary() == {}

        collector.record_metric(PerformanceMetrics("op", 0.0, 1.0, True))
        collector.clear_metrics()

        assert collector.get_metrics() == []

    def test_final_statistics_reports_per_asset_time(self, caplog):
        collector = MetricsCollector()
        collector.record_metric(PerformanceMetrics("upload_asset", 0.0, 0.2, True))
        result = UploadBatchResult(outcomes=[UploadOutcome(index=0, success=True)])
        uploader_logger = logging.getLogger("uploader")
        uploader_logger.propagate = True
        try:
            with caplog.at_level(logging.INFO, logger="uploader"):
                log_final_statistics(1.0, result, collector)
        finally:
            uploader_logger.propagate = False

        assert "Per-asset time: avg 200ms" in caplog.text


class TestServiceLogger:
    """Tests for LoggerFactory.create_service_logger."""

    def teardown_method(self):
        logging.getLogger("media_uploader").setLevel(logging.INFO)

    def test_debug_config_enables_debug(self):
        config = UploadConfig(bucket="b", region="us-east-1", debug=True)

        LoggerFactory.create_service_logger(config)

        assert logging.getLogger("media_uploader").isEnabledFor(logging.DEBUG)

    def test_default_config_stays_at_info(self):
        config = UploadConfig(bucket="b", region="us-east-1")

        LoggerFactory.create_service_logger(config)

        assert logging.getLogger("media_uploader").level == logging.INFO
