# =============================================================================
# core/chain.py - Sequential Interception Chain
# =============================================================================
# Runs an ordered list of stages S1..Sn that ends in a terminal handler H.
#
#     S1 -> S2 -> ... -> Sn -> H
#
# Each stage gets the request and a `call_next` callable for the rest of the
# chain. A stage may:
# 1. Pass the request through and return the downstream response unchanged
# 2. Catch a failure kind it declares and substitute its own response
# 3. Record a diagnostic and re-raise
#
# Registration order is execution order: the first stage added is the
# outermost one, so a stage only sees failures from stages added after it.
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable

from core.failures import ConfigurationFailure
from core.models.http import Request, Response

logger = logging.getLogger(__name__)

# Terminal handler: request in, response out
Handler = Callable[[Request], Response]

# What a stage calls to run everything after it
CallNext = Callable[[Request], Response]


class Stage(ABC):
    """
    One link in the interception chain.

    Subclasses implement process(). To pass through, return
    call_next(request). To intercept, wrap call_next in try/except for the
    failure classes the stage handles and let everything else propagate.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def process(self, request: Request, call_next: CallNext) -> Response:
        ...


class FunctionStage(Stage):
    """
    Adapt a plain function into a stage.

    Usage:
        def add_header(request, call_next):
            return call_next(request).with_header("X-Frame-Options", "DENY")

        chain.add(FunctionStage(add_header))
    """

    def __init__(self, func: Callable[[Request, CallNext], Response], name: str | None = None):
        self.func = func
        self._name = name or getattr(func, "__name__", "function_stage")

    @property
    def name(self) -> str:
        return self._name

    def process(self, request: Request, call_next: CallNext) -> Response:
        return self.func(request, call_next)


class InterceptionChain:
    """
    Fixed-order driver for stages and a terminal handler.

    Stages can be added until the first request is handled. After that the
    stage list is frozen and add() raises ConfigurationFailure.

    Usage:
        chain = InterceptionChain(router)
        chain.add(ErrorHandlingStage()).add(DiagnosticCaptureStage(sink))
        response = chain.handle(Request(path="/"))
    """

    def __init__(self, handler: Handler, stages: Iterable[Stage] = (), name: str = "chain"):
        self.handler = handler
        self.name = name
        self._stages: list[Stage] = []
        self._frozen = False
        for stage in stages:
            self.add(stage)

    @property
    def stages(self) -> tuple[Stage, ...]:
        return tuple(self._stages)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, stage: Stage) -> "InterceptionChain":
        """
        Append a stage inside every stage added so far.

        Returns the chain so calls can be chained.
        """
        if self._frozen:
            raise ConfigurationFailure(
                f"Cannot add stage {stage.name}: chain '{self.name}' has already handled a request",
                suggestion="Register all stages before the first request is dispatched",
                details={"chain": self.name, "stage": stage.name},
            )
        self._stages.append(stage)
        logger.debug(f"Chain '{self.name}': registered stage #{len(self._stages)} {stage.name}")
        return self

    def handle(self, request: Request) -> Response:
        """Run the request through every stage and the terminal handler."""
        self._frozen = True
        return self._dispatch(0, request)

    def _dispatch(self, index: int, request: Request) -> Response:
        if index >= len(self._stages):
            return self.handler(request)

        stage = self._stages[index]

        def call_next(next_request: Request) -> Response:
            return self._dispatch(index + 1, next_request)

        return stage.process(request, call_next)

    def __call__(self, request: Request) -> Response:
        return self.handle(request)

    def __len__(self) -> int:
        return len(self._stages)
