"""
Tests for observability module.

Tests Prometheus wiring, the option mutation counter and optional tracing.
"""
from unittest.mock import Mock, patch

from prometheus_client import REGISTRY

import services.options.app.core.observability as observability
from services.options.app.core.observability import (
    add_prometheus,
    add_tracing,
    record_option_mutation,
)


def _sample(kind: str, operation: str) -> float:
    value = REGISTRY.get_sample_value(
        "option_mutations_total", {"kind": kind, "operation": operation}
    )
    return value or 0.0


class TestAddPrometheus:
    """Test add_prometheus function."""

    def test_adds_middleware_and_route(self):
        mock_app = Mock()

        add_prometheus(mock_app, app_name="options-test")

        middleware_call = mock_app.add_middleware.call_args
        assert "PrometheusMiddleware" in str(middleware_call)
        assert middleware_call.kwargs["app_name"] == "options-test"
        assert mock_app.add_route.call_args[0][0] == "/metrics"


class TestRecordOptionMutation:
    """Tests for the option mutation counter."""

    def test_increments_by_one(self):
        before = _sample("reason_option", "create")
        record_option_mutation("reason_option", "create")
        assert _sample("reason_option", "create") == before + 1

    def test_increments_by_count(self):
        before = _sample("reason_option", "delete")
        record_option_mutation("reason_option", "delete", count=3)
        assert _sample("reason_option", "delete") == before + 3


class TestAddTracing:
    """Test add_tracing function."""

    def test_returns_false_without_opentelemetry(self):
        with patch.object(observability, "_HAS_OTEL", False):
            assert add_tracing(Mock(), app_name="options", endpoint=None) is False

    def test_instruments_app_when_available(self):
        if not observability._HAS_OTEL:
            return
        app = Mock()
        with patch.object(observability, "FastAPIInstrumentor") as instrumentor, patch.object(
            observability.trace, "set_tracer_provider"
        ):
            assert add_tracing(app, app_name="options", endpoint="http://otel:4318/v1/traces") is True
        instrumentor.instrument_app.assert_called_once_with(app)
