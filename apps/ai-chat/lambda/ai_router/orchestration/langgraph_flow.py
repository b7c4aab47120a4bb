"""LangGraph-based provider failover with the same contract as ``ProviderRouter``."""

from collections.abc import Sequence
from typing import Literal, NotRequired, TypedDict, cast

from langgraph.graph import END, START, StateGraph

from ai_router.errors import AllProvidersFailedError
from ai_router.providers.base import ProviderAdapter
from ai_router.schemas import ChatRequest, ChatResponse

from .base import RouterOptions, attempt_adapter, report_failure, validate_adapters


class ProviderRouteState(TypedDict):
    request: ChatRequest
    index: int
    failures: list[tuple[str, BaseException]]
    response: NotRequired[ChatResponse]


class LangGraphProviderRouter:
    name = "router"

    def __init__(
        self, adapters: Sequence[ProviderAdapter], options: RouterOptions | None = None
    ) -> None:
        self._adapters = validate_adapters(adapters)
        self._options = options or RouterOptions()
        graph = StateGraph(ProviderRouteState)
        graph.add_node("try_provider", self._try_provider)
        graph.add_edge(START, "try_provider")
        graph.add_conditional_edges(
            "try_provider",
            self._next_step,
            {"next_provider": "try_provider", "done": END},
        )
        self._graph = graph.compile()

    @property
    def adapters(self) -> tuple[ProviderAdapter, ...]:
        return self._adapters

    @property
    def options(self) -> RouterOptions:
        return self._options

    async def _try_provider(self, state: ProviderRouteState) -> dict[str, object]:
        index = state["index"]
        adapter = self._adapters[index]
        try:
            response = await attempt_adapter(adapter, state["request"], self._options)
        except Exception as error:
            report_failure(adapter, error, self._options)
            return {"index": index + 1, "failures": [*state["failures"], (adapter.name, error)]}
        return {"index": index + 1, "response": response}

    def _next_step(self, state: ProviderRouteState) -> Literal["next_provider", "done"]:
        if "response" in state or state["index"] >= len(self._adapters):
            return "done"
        return "next_provider"

    async def chat(self, request: ChatRequest) -> ChatResponse:
        initial_state: ProviderRouteState = {"request": request, "index": 0, "failures": []}
        result = cast(
            "ProviderRouteState",
            await self._graph.ainvoke(
                initial_state, config={"recursion_limit": len(self._adapters) + 2}
            ),
        )
        response = result.get("response")
        if response is not None:
            return response

        failures = result["failures"]
        last_error = failures[-1][1] if failures else None
        raise AllProvidersFailedError(failures=failures) from last_error
