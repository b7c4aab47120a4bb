"""Domain-level exceptions for the AI chat router."""


class BadRequestError(ValueError):
    """Raised for client-side invalid requests at the domain layer."""


class AiRouterError(Exception):
    """Base class for provider routing failures."""


class ProviderConfigurationError(AiRouterError):
    """Raised before any network call when a provider cannot be used as configured."""


class ProviderTimeoutError(AiRouterError, TimeoutError):
    """Raised by the timeout guard when an operation outlives its deadline."""

    def __init__(self, label: str, timeout_ms: float) -> None:
        shown = int(timeout_ms) if float(timeout_ms).is_integer() else timeout_ms
        super().__init__(f"{label} timed out after {shown}ms")
        self.label = label
        self.timeout_ms = timeout_ms


class AllProvidersFailedError(AiRouterError):
    """Raised by a router once every adapter in its list has failed.

    ``__cause__`` is the last adapter's failure. ``failures`` keeps every
    ``(adapter_name, exception)`` pair in the order the adapters were tried.
    """

    def __init__(
        self,
        message: str = "All providers failed",
        failures: list[tuple[str, BaseException]] | None = None,
    ) -> None:
        super().__init__(message)
        self.failures: tuple[tuple[str, BaseException], ...] = tuple(failures or ())
