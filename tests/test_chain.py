# =============================================================================
# tests/test_chain.py - Interception Chain Tests
# =============================================================================
# Tests for:
# - Stages run in registration order, outermost first
# - Pass-through stages return the downstream response unchanged
# - A stage that declares a failure kind substitutes its own response
# - Undeclared failure kinds propagate past a stage
# - The stage list freezes once a request has been handled
# =============================================================================

import logging

import pytest

from core.chain import FunctionStage, InterceptionChain, Stage
from core.failures import ConfigurationFailure, HttpFailure, NotFoundFailure
from core.models.http import Request, Response
from core.stages import RequestLoggingStage


class RecordingStage(Stage):
    """Pass-through stage that records the order it ran in."""

    def __init__(self, label, calls):
        self.label = label
        self.calls = calls

    def process(self, request, call_next):
        self.calls.append(f"{self.label}:in")
        response = call_next(request)
        self.calls.append(f"{self.label}:out")
        return response


class CatchStage(Stage):
    """Substitutes a response for one failure class."""

    def __init__(self, failure_cls, response):
        self.failure_cls = failure_cls
        self.response = response

    def process(self, request, call_next):
        try:
            return call_next(request)
        except self.failure_cls:
            return self.response


def raising(failure):
    def handler(request):
        raise failure
    return handler


# =============================================================================
# Ordering
# =============================================================================

class TestOrdering:
    """Tests for execution order."""

    def test_registration_order_is_execution_order(self):
        """Test that the first stage added is the outermost."""
        calls = []
        chain = InterceptionChain(lambda request: calls.append("handler") or Response())
        chain.add(RecordingStage("a", calls)).add(RecordingStage("b", calls))

        chain.handle(Request())

        assert calls == ["a:in", "b:in", "handler", "b:out", "a:out"]

    def test_stages_from_constructor(self):
        """Test that constructor stages keep their order."""
        calls = []
        chain = InterceptionChain(
            lambda request: Response(),
            stages=[RecordingStage("x", calls), RecordingStage("y", calls)],
        )

        assert [s.label for s in chain.stages] == ["x", "y"]
        assert len(chain) == 2

    def test_no_stages_calls_handler(self):
        """Test that an empty chain is just the handler."""
        chain = InterceptionChain(lambda request: Response(body="direct"))

        assert chain.handle(Request()).body == "direct"


# =============================================================================
# Pass-through and substitution
# =============================================================================

class TestInterception:
    """Tests for interception by failure kind."""

    def test_pass_through_returns_downstream_response(self):
        """Test that a pass-through stage does not alter the response."""
        expected = Response(status_code=201, body="created")
        chain = InterceptionChain(lambda request: expected, stages=[RecordingStage("a", [])])

        assert chain.handle(Request()) == expected

    def test_declared_kind_is_substituted(self):
        """Test that the declaring stage's response wins."""
        substitute = Response(status_code=404, body="not here")
        chain = InterceptionChain(
            raising(NotFoundFailure("/x")),
            stages=[CatchStage(NotFoundFailure, substitute)],
        )

        assert chain.handle(Request(path="/x")) == substitute

    def test_failure_from_inner_stage_is_seen_by_outer_stage(self):
        """Test that failures raised by a later stage reach an earlier one."""
        def explode(request, call_next):
            raise HttpFailure(403)

        substitute = Response(status_code=403, body="no")
        chain = InterceptionChain(lambda request: Response(), stages=[
            CatchStage(HttpFailure, substitute),
            FunctionStage(explode),
        ])

        assert chain.handle(Request()).body == "no"

    def test_stage_registered_after_source_does_not_see_failure(self):
        """Test that a stage only sees failures from stages added after it."""
        def explode(request, call_next):
            raise NotFoundFailure(request.path)

        chain = InterceptionChain(lambda request: Response(), stages=[
            FunctionStage(explode),
            CatchStage(NotFoundFailure, Response(body="too late")),
        ])

        with pytest.raises(NotFoundFailure):
            chain.handle(Request())

    def test_undeclared_kind_propagates(self):
        """Test that a stage does not swallow kinds it does not declare."""
        chain = InterceptionChain(
            raising(ValueError("bad value")),
            stages=[CatchStage(NotFoundFailure, Response(body="nope"))],
        )

        with pytest.raises(ValueError, match="bad value"):
            chain.handle(Request())

    def test_nearest_declaring_stage_wins(self):
        """Test that the innermost declaring stage handles the failure."""
        chain = InterceptionChain(raising(HttpFailure(403)), stages=[
            CatchStage(HttpFailure, Response(body="outer")),
            CatchStage(HttpFailure, Response(body="inner")),
        ])

        assert chain.handle(Request()).body == "inner"

    def test_stage_can_derive_request(self):
        """Test that attributes added by a stage reach the handler only."""
        seen = {}

        def tag(request, call_next):
            return call_next(request.with_attribute("tag", "on"))

        def handler(request):
            seen["tag"] = request.attribute("tag")
            return Response()

        original = Request()
        InterceptionChain(handler, stages=[FunctionStage(tag)]).handle(original)

        assert seen["tag"] == "on"
        assert original.attribute("tag") is None

    def test_stage_can_post_process(self):
        """Test that an outer stage may adjust the response on the way out."""
        def stamp(request, call_next):
            return call_next(request).with_header("X-Stamp", "1").write("!")

        chain = InterceptionChain(lambda request: Response(body="hi"), stages=[FunctionStage(stamp)])
        response = chain.handle(Request())

        assert response.body == "hi!"
        assert response.headers["X-Stamp"] == "1"


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:
    """Tests for freezing the stage list."""

    def test_add_after_first_request_fails(self):
        chain = InterceptionChain(lambda request: Response())
        chain.handle(Request())

        assert chain.frozen
        with pytest.raises(ConfigurationFailure):
            chain.add(RecordingStage("late", []))

    def test_function_stage_name(self):
        def add_header(request, call_next):
            return call_next(request)

        assert FunctionStage(add_header).name == "add_header"
        assert RecordingStage("a", []).name == "RecordingStage"


# =============================================================================
# Request logging
# =============================================================================

class TestRequestLoggingStage:
    """Tests for the access log stage."""

    def test_logs_status(self, caplog):
        chain = InterceptionChain(lambda request: Response(status_code=201), stages=[RequestLoggingStage()])

        with caplog.at_level(logging.INFO, logger="core.stages.request_logging"):
            chain.handle(Request(method="POST", path="/items"))

        assert any("POST /items 201" in r.getMessage() for r in caplog.records)

    def test_logs_and_reraises_failures(self, caplog):
        chain = InterceptionChain(raising(NotFoundFailure("/x")), stages=[RequestLoggingStage()])

        with caplog.at_level(logging.WARNING, logger="core.stages.request_logging"):
            with pytest.raises(NotFoundFailure):
                chain.handle(Request(path="/x"))

        assert any("NotFoundFailure" in r.getMessage() for r in caplog.records)
