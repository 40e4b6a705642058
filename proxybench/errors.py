"""Error hierarchy for the proxy benchmark.

All benchmark-specific errors extend ProxyBenchError. The taxonomy decides how
the engine reacts to a failure:

- ConfigError: a proxy string or configuration document is unusable. A bad
  proxy string skips that proxy; a bad configuration file aborts startup.
- TransportSetupError / ConnectError / RequestError: one iteration failed and
  is counted as a failed sample. The run continues.
- ValidationError (and subclasses): a response body did not pass the
  configured checks. Counted as a failed request, never fatal.
- NoValidProxiesError / BenchmarkPhaseError: fatal, the run ends in FAILED.
"""

from __future__ import annotations


class ProxyBenchError(Exception):
    """Base error for all proxy benchmark errors."""

    message: str = "Proxy benchmark error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(ProxyBenchError):
    """Malformed proxy string, unsupported protocol or invalid config file."""

    message = "Invalid configuration"


# ---------------------------------------------------------------------------
# Transport / network
# ---------------------------------------------------------------------------


class TransportSetupError(ProxyBenchError):
    """A request client could not be built for a proxy."""

    message = "Failed to set up request transport"


class ConnectError(ProxyBenchError):
    """A bare TCP connection to the proxy could not be established."""

    message = "Failed to connect to proxy"

    def __init__(self, address: str, cause: BaseException | None = None) -> None:
        self.address = address
        self.cause = cause
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to connect to proxy {address}{reason}", address=address)


class RequestError(ProxyBenchError):
    """A request through the proxy failed in flight."""

    message = "Request through proxy failed"


# ---------------------------------------------------------------------------
# Response validation
# ---------------------------------------------------------------------------


class ValidationError(ProxyBenchError):
    """A response body failed a configured validation check."""

    message = "Response validation failed"

    def __init__(self, message: str | None = None, path: str | None = None, **kwargs: object) -> None:
        self.path = path
        if path is not None and message is not None:
            message = f"validation failed for path '{path}': {message}"
        super().__init__(message, path=path, **kwargs)


class MalformedPayload(ValidationError):
    """The response body is not a JSON object."""

    message = "Response body is not a valid JSON object"


class PathNotFound(ValidationError):
    """A key along the check path does not exist."""

    message = "Path not found"


class NotAnObject(ValidationError):
    """An intermediate value along the check path is not an object."""

    message = "Cannot navigate through non-object"


class TypeMismatch(ValidationError):
    """The resolved value has a different shape than the check expects."""

    message = "Type mismatch"


class ValueMismatch(ValidationError):
    """The resolved value differs from the expected value."""

    message = "Value mismatch"


# ---------------------------------------------------------------------------
# Run-level failures
# ---------------------------------------------------------------------------


class NoValidProxiesError(ProxyBenchError):
    """No enabled, well-formed proxies are configured."""

    message = "No valid proxies configured"


class BenchmarkPhaseError(ProxyBenchError):
    """A measurement phase hit a hard error and the run was aborted."""

    message = "Benchmark phase failed"


class UnsupportedProtocolError(BenchmarkPhaseError):
    """No transport implementation is registered for a proxy protocol."""

    message = "No transport registered for protocol"


class BenchmarkStateError(ProxyBenchError):
    """The engine was used out of lifecycle order."""

    message = "Benchmark engine used in the wrong state"
