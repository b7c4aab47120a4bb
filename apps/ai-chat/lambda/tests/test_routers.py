import asyncio
import unittest

from ai_router.errors import AiRouterError, AllProvidersFailedError, ProviderTimeoutError
from ai_router.orchestration.base import RouterOptions
from ai_router.orchestration.direct import ProviderRouter
from ai_router.orchestration.langgraph_flow import LangGraphProviderRouter
from ai_router.schemas import ChatMessage, ChatRequest, ChatResponse

ROUTER_LOGGER = "ai_router.orchestration.base"


class StubAdapter:
    def __init__(
        self,
        name: str,
        *,
        content: str = "ok",
        model: str | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
        reported_provider: str | None = None,
    ) -> None:
        self.name = name
        self._content = content
        self._model = model or f"{name}-model"
        self._delay = delay
        self._error = error
        self._reported_provider = reported_provider
        self.calls: list[ChatRequest] = []

    async def chat(self, request: ChatRequest) -> ChatResponse:
        self.calls.append(request)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return ChatResponse(
            message=ChatMessage(role="assistant", content=self._content),
            provider=self._reported_provider,
            model=self._model,
        )


def make_request(content: str = "hi") -> ChatRequest:
    return ChatRequest(app_id="test-app", messages=[ChatMessage(role="user", content=content)])


class RouterContractTests:
    """Behaviour shared by every router implementation."""

    router_cls: type

    def make_router(self, adapters, **options):
        return self.router_cls(adapters, RouterOptions(**options))

    async def test_returns_first_success_and_skips_remaining_adapters(self) -> None:
        first = StubAdapter("A", error=RuntimeError("rate limited"))
        second = StubAdapter("B", error=RuntimeError("server error"))
        third = StubAdapter("C", content="Hello")
        fourth = StubAdapter("D")
        router = self.make_router([first, second, third, fourth])

        response = await router.chat(make_request())

        self.assertEqual(response.message.content, "Hello")
        self.assertEqual(response.message.role, "assistant")
        self.assertEqual(response.provider, "C")
        self.assertEqual(response.model, "C-model")
        self.assertEqual([len(a.calls) for a in (first, second, third, fourth)], [1, 1, 1, 0])

    async def test_first_adapter_success_is_returned_immediately(self) -> None:
        first = StubAdapter("A", content="first")
        second = StubAdapter("B")
        router = self.make_router([first, second])

        response = await router.chat(make_request())

        self.assertEqual(response.provider, "A")
        self.assertEqual(second.calls, [])

    async def test_every_adapter_receives_the_same_request(self) -> None:
        request = make_request()
        first = StubAdapter("A", error=RuntimeError("boom"))
        second = StubAdapter("B")
        router = self.make_router([first, second])

        await router.chat(request)

        self.assertIs(first.calls[0], request)
        self.assertIs(second.calls[0], request)

    async def test_exhaustion_raises_aggregate_error_with_last_cause(self) -> None:
        errors = [RuntimeError("rate limited"), ValueError("bad payload"), OSError("offline")]
        adapters = [StubAdapter(name, error=error) for name, error in zip("ABC", errors)]
        router = self.make_router(adapters)

        with self.assertRaises(AllProvidersFailedError) as ctx:
            await router.chat(make_request())

        self.assertEqual(str(ctx.exception), "All providers failed")
        self.assertIs(ctx.exception.__cause__, errors[-1])
        self.assertEqual([name for name, _ in ctx.exception.failures], ["A", "B", "C"])
        self.assertEqual([error for _, error in ctx.exception.failures], errors)
        self.assertTrue(all(len(adapter.calls) == 1 for adapter in adapters))

    async def test_timeout_is_treated_as_failure(self) -> None:
        slow = StubAdapter("B", delay=0.5)
        fallback = StubAdapter("C", content="fallback")
        router = self.make_router([slow, fallback], provider_timeout_ms={"B": 20})

        response = await router.chat(make_request())

        self.assertEqual(response.provider, "C")
        self.assertEqual(response.message.content, "fallback")

    async def test_timeout_failure_is_last_cause_when_exhausted(self) -> None:
        router = self.make_router([StubAdapter("slow", delay=0.5)], per_provider_timeout_ms=20)

        with self.assertRaises(AllProvidersFailedError) as ctx:
            await router.chat(make_request())

        self.assertIsInstance(ctx.exception.__cause__, ProviderTimeoutError)
        self.assertIn("provider:slow timed out after 20ms", str(ctx.exception.__cause__))

    async def test_provider_timeout_override_wins_over_shared_default(self) -> None:
        patient = StubAdapter("A", delay=0.05, content="patient")
        router = self.make_router(
            [patient, StubAdapter("B")],
            per_provider_timeout_ms=10,
            provider_timeout_ms={"A": 1000},
        )

        response = await router.chat(make_request())

        self.assertEqual(response.provider, "A")

    async def test_router_overwrites_adapter_reported_provider(self) -> None:
        spoofing = StubAdapter("A", reported_provider="someone-else")
        router = self.make_router([spoofing])

        response = await router.chat(make_request())

        self.assertEqual(response.provider, "A")

    async def test_debug_logs_one_line_per_failed_adapter(self) -> None:
        rate_limited = StubAdapter("A", error=RuntimeError("rate limited"))
        slow = StubAdapter("B", delay=0.2)
        healthy = StubAdapter("C", content="Hello", model="c-model", delay=0.01)
        router = self.make_router(
            [rate_limited, slow, healthy], provider_timeout_ms={"B": 50}, debug=True
        )
        loop = asyncio.get_running_loop()
        started = loop.time()

        with self.assertLogs(ROUTER_LOGGER, level="WARNING") as logs:
            response = await router.chat(make_request())

        self.assertLess(loop.time() - started, 0.19)
        self.assertEqual(response.message, ChatMessage(role="assistant", content="Hello"))
        self.assertEqual(response.provider, "C")
        self.assertEqual(response.model, "c-model")
        self.assertEqual(len(logs.records), 2)
        self.assertIn("A", logs.records[0].getMessage())
        self.assertIn("rate limited", logs.records[0].getMessage())
        self.assertIn("B", logs.records[1].getMessage())
        self.assertIn("50ms", logs.records[1].getMessage())

    async def test_failures_are_silent_without_debug(self) -> None:
        router = self.make_router([StubAdapter("A", error=RuntimeError("boom")), StubAdapter("B")])

        with self.assertNoLogs(ROUTER_LOGGER, level="WARNING"):
            response = await router.chat(make_request())

        self.assertEqual(response.provider, "B")

    def test_empty_adapter_list_fails_at_construction(self) -> None:
        with self.assertRaisesRegex(AiRouterError, "at least one provider"):
            self.router_cls([])

    def test_duplicate_adapter_names_fail_at_construction(self) -> None:
        with self.assertRaisesRegex(AiRouterError, "Duplicate provider name"):
            self.router_cls([StubAdapter("A"), StubAdapter("A")])

    def test_options_are_read_only(self) -> None:
        timeouts = {"A": 100}
        router = self.make_router([StubAdapter("A")], provider_timeout_ms=timeouts)
        timeouts["A"] = 1

        self.assertEqual(router.options.provider_timeout_ms["A"], 100)
        with self.assertRaises(TypeError):
            router.options.provider_timeout_ms["A"] = 5


class ProviderRouterTests(RouterContractTests, unittest.IsolatedAsyncioTestCase):
    router_cls = ProviderRouter


class LangGraphProviderRouterTests(RouterContractTests, unittest.IsolatedAsyncioTestCase):
    router_cls = LangGraphProviderRouter

    async def test_handles_more_adapters_than_default_step_budget(self) -> None:
        adapters = [StubAdapter(f"p{i}", error=RuntimeError("down")) for i in range(30)]
        adapters.append(StubAdapter("last", content="finally"))
        router = self.router_cls(adapters)

        response = await router.chat(make_request())

        self.assertEqual(response.provider, "last")


if __name__ == "__main__":
    unittest.main()
