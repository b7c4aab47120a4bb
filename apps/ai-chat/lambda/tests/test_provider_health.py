import asyncio
import unittest

from ai_router.router_factory import ProviderConfig, RouterFactoryConfig
from ai_router.schemas import ChatMessage, ChatResponse
from ai_router.services.provider_health import ProviderHealthService


class ProbeAdapter:
    def __init__(self, name: str, *, error: Exception | None = None, delay: float = 0.0) -> None:
        self.name = name
        self._error = error
        self._delay = delay

    async def chat(self, request):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return ChatResponse(message=ChatMessage(role="assistant", content="ok"), model="m")


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def make_config(*configured: str) -> RouterFactoryConfig:
    return RouterFactoryConfig(
        providers={
            name: ProviderConfig(
                name=name, api_key="key" if name in configured else None, model=f"{name}-model"
            )
            for name in ("gemini", "openai", "anthropic")
        }
    )


class ProviderHealthServiceTests(unittest.IsolatedAsyncioTestCase):
    def make_service(self, config, *, errors=None, delay=0.0, probe_timeout_ms=500):
        errors = errors or {}
        self.probes: list[str] = []
        self.built_with = []

        def builder(provider, system_prompt, factory_config):
            self.probes.append(provider.name)
            self.built_with.append((system_prompt, factory_config.max_tokens))
            return ProbeAdapter(provider.name, error=errors.get(provider.name), delay=delay)

        self.clock = FakeClock()
        return ProviderHealthService(
            config,
            probe_timeout_ms=probe_timeout_ms,
            cache_ttl_ms=45000,
            adapter_builders={name: builder for name in ("gemini", "openai", "anthropic")},
            clock=self.clock,
        )

    async def test_reports_each_provider_in_display_order(self) -> None:
        service = self.make_service(
            make_config("openai", "gemini"), errors={"gemini": RuntimeError("quota exceeded")}
        )

        with self.assertLogs("ai_router.services.provider_health", level="WARNING"):
            snapshot = await service.get_snapshot()

        self.assertEqual(list(snapshot.providers), ["openai", "anthropic", "gemini"])
        self.assertEqual(snapshot.status, "red")
        self.assertEqual(snapshot.cache_ttl_ms, 45000)

        openai = snapshot.providers["openai"]
        self.assertTrue(openai.is_live)
        self.assertEqual(openai.status, "green")
        self.assertEqual(openai.reason, "Connection live")
        self.assertIsNotNone(openai.latency_ms)

        anthropic = snapshot.providers["anthropic"]
        self.assertFalse(anthropic.configured)
        self.assertEqual(anthropic.reason, "Missing ANTHROPIC_API_KEY")
        self.assertIsNone(anthropic.latency_ms)

        gemini = snapshot.providers["gemini"]
        self.assertTrue(gemini.configured)
        self.assertFalse(gemini.is_live)
        self.assertEqual(gemini.reason, "quota exceeded")

        self.assertEqual(sorted(self.probes), ["gemini", "openai"])
        self.assertTrue(all(built == ("health check", 1) for built in self.built_with))

    async def test_all_live_is_green(self) -> None:
        service = self.make_service(make_config("openai", "anthropic", "gemini"))

        snapshot = await service.get_snapshot()

        self.assertEqual(snapshot.status, "green")

    async def test_probe_timeout_is_reported_red(self) -> None:
        service = self.make_service(make_config("openai"), delay=1.0, probe_timeout_ms=20)

        with self.assertLogs("ai_router.services.provider_health", level="WARNING"):
            snapshot = await service.get_snapshot()

        self.assertEqual(snapshot.providers["openai"].reason, "OpenAI probe timed out after 20ms")

    async def test_snapshot_is_cached_until_ttl_expires(self) -> None:
        service = self.make_service(make_config("openai"))

        first = await service.get_snapshot()
        self.clock.now += 44.0
        second = await service.get_snapshot()
        self.clock.now += 2.0
        third = await service.get_snapshot()

        self.assertIs(first, second)
        self.assertIsNot(second, third)
        self.assertEqual(self.probes, ["openai", "openai"])

    async def test_force_refresh_bypasses_cache(self) -> None:
        service = self.make_service(make_config("openai"))

        first = await service.get_snapshot()
        refreshed = await service.get_snapshot(force_refresh=True)

        self.assertIsNot(first, refreshed)
        self.assertEqual(self.probes, ["openai", "openai"])

    async def test_concurrent_callers_share_one_computation(self) -> None:
        service = self.make_service(make_config("openai"), delay=0.02)

        first, second = await asyncio.gather(service.get_snapshot(), service.get_snapshot())

        self.assertIs(first, second)
        self.assertEqual(self.probes, ["openai"])

    async def test_serializes_with_camel_case_keys(self) -> None:
        service = self.make_service(make_config())

        payload = (await service.get_snapshot()).model_dump(by_alias=True)

        self.assertIn("checkedAt", payload)
        self.assertIn("cacheTtlMs", payload)
        self.assertEqual(
            set(payload["providers"]["openai"]),
            {
                "provider",
                "displayName",
                "envVar",
                "configured",
                "isLive",
                "status",
                "reason",
                "model",
                "latencyMs",
                "checkedAt",
            },
        )


if __name__ == "__main__":
    unittest.main()
