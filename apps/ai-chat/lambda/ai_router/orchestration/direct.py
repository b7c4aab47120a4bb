"""Sequential failover across provider adapters."""

from collections.abc import Sequence

from ai_router.errors import AllProvidersFailedError
from ai_router.providers.base import ProviderAdapter
from ai_router.schemas import ChatRequest, ChatResponse

from .base import RouterOptions, attempt_adapter, report_failure, validate_adapters


class ProviderRouter:
    """Try adapters strictly in list order and return the first success.

    Each adapter gets one attempt under its effective timeout. The returned
    response is tagged with the name of the adapter that produced it. When
    every adapter fails, ``AllProvidersFailedError`` is raised with the last
    failure as its cause.
    """

    name = "router"

    def __init__(
        self, adapters: Sequence[ProviderAdapter], options: RouterOptions | None = None
    ) -> None:
        self._adapters = validate_adapters(adapters)
        self._options = options or RouterOptions()

    @property
    def adapters(self) -> tuple[ProviderAdapter, ...]:
        return self._adapters

    @property
    def options(self) -> RouterOptions:
        return self._options

    async def chat(self, request: ChatRequest) -> ChatResponse:
        failures: list[tuple[str, BaseException]] = []
        last_error: Exception | None = None

        for adapter in self._adapters:
            try:
                return await attempt_adapter(adapter, request, self._options)
            except Exception as error:
                last_error = error
                failures.append((adapter.name, error))
                report_failure(adapter, error, self._options)

        raise AllProvidersFailedError(failures=failures) from last_error
