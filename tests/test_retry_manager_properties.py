"""
Property-based tests for the Retry Manager.

Uses Hypothesis to verify exponential backoff, that definitive answers are
never retried and that the attempt count is bounded by max_retries.
"""

import asyncio

from hypothesis import given, settings
from hypothesis import strategies as st

from domain_intel.config import RetryConfig
from domain_intel.enums import RDAPErrorCode, RDAPStatus
from domain_intel.rdap_client import RDAPError, RDAPParsedFields, RDAPResponse
from domain_intel.retry_manager import RetryManager


@st.composite
def retry_config_strategy(draw) -> RetryConfig:
    """Generate valid RetryConfig objects."""
    return RetryConfig(
        max_retries=draw(st.integers(min_value=0, max_value=5)),
        base_delay_seconds=draw(st.floats(min_value=0.001, max_value=1.0)),
        max_delay_seconds=draw(st.floats(min_value=1.0, max_value=10.0)),
    )


def transient_response(code: RDAPErrorCode) -> RDAPResponse:
    return RDAPResponse(
        status=RDAPStatus.ERROR,
        http_status_code=503 if code == RDAPErrorCode.SERVER_ERROR else 0,
        parsed_fields=None,
        error=RDAPError(code=code, message=f"Transient error: {code.value}"),
    )


def found_response(domain: str = "example.com") -> RDAPResponse:
    return RDAPResponse(
        status=RDAPStatus.FOUND,
        http_status_code=200,
        parsed_fields=RDAPParsedFields(
            domain_name=domain, status=["active"], events=[], nameservers=[]
        ),
        error=None,
    )


def not_found_response() -> RDAPResponse:
    return RDAPResponse(
        status=RDAPStatus.NOT_FOUND,
        http_status_code=404,
        parsed_fields=None,
        error=None,
    )


class RecordingSleep:
    """Replacement for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class TestExponentialBackoff:
    """delay(n) = base * 2^n, capped at max_delay."""

    @given(config=retry_config_strategy(), attempt=st.integers(min_value=0, max_value=10))
    @settings(max_examples=100)
    def test_delay_formula(self, config: RetryConfig, attempt: int) -> None:
        manager = RetryManager(config)
        expected = min(config.base_delay_seconds * (2 ** attempt), config.max_delay_seconds)
        assert manager.calculate_delay(attempt) == expected

    @given(config=retry_config_strategy(), attempt=st.integers(min_value=0, max_value=10))
    @settings(max_examples=100)
    def test_delays_never_decrease(self, config: RetryConfig, attempt: int) -> None:
        manager = RetryManager(config)
        assert manager.calculate_delay(attempt + 1) >= manager.calculate_delay(attempt)


class TestRetryBehaviour:
    """Transient errors are retried up to max_retries; definitive answers never."""

    @given(
        config=retry_config_strategy(),
        code=st.sampled_from([
            RDAPErrorCode.TIMEOUT,
            RDAPErrorCode.SERVER_ERROR,
            RDAPErrorCode.RATE_LIMITED,
            RDAPErrorCode.NETWORK_ERROR,
        ]),
    )
    @settings(max_examples=100)
    def test_transient_errors_exhaust_retries(self, config: RetryConfig, code: RDAPErrorCode) -> None:
        sleep = RecordingSleep()
        manager = RetryManager(config, sleep=sleep)
        calls = 0

        async def operation() -> RDAPResponse:
            nonlocal calls
            calls += 1
            return transient_response(code)

        response, attempts = asyncio.run(manager.execute_rdap_with_retry(operation))

        assert response.status == RDAPStatus.ERROR
        assert attempts == calls == config.max_retries + 1
        assert sleep.delays == [manager.calculate_delay(n) for n in range(config.max_retries)]

    @given(
        config=retry_config_strategy(),
        definitive=st.sampled_from(["found", "not_found"]),
    )
    @settings(max_examples=100)
    def test_definitive_answers_are_not_retried(self, config: RetryConfig, definitive: str) -> None:
        sleep = RecordingSleep()
        manager = RetryManager(config, sleep=sleep)
        result = found_response() if definitive == "found" else not_found_response()

        async def operation() -> RDAPResponse:
            return result

        response, attempts = asyncio.run(manager.execute_rdap_with_retry(operation))
        assert response is result
        assert attempts == 1
        assert sleep.delays == []

    def test_success_after_transient_error(self) -> None:
        sleep = RecordingSleep()
        manager = RetryManager(RetryConfig(max_retries=3, base_delay_seconds=0.5), sleep=sleep)
        responses = [transient_response(RDAPErrorCode.TIMEOUT), found_response()]

        async def operation() -> RDAPResponse:
            return responses.pop(0)

        response, attempts = asyncio.run(manager.execute_rdap_with_retry(operation))
        assert response.status == RDAPStatus.FOUND
        assert attempts == 2
        assert sleep.delays == [0.5]

    def test_parse_errors_are_not_retried(self) -> None:
        manager = RetryManager(RetryConfig(max_retries=3), sleep=RecordingSleep())
        assert not manager.should_retry(transient_response(RDAPErrorCode.PARSE_ERROR))
        assert not manager.should_retry(transient_response(RDAPErrorCode.TLS_ERROR))
        assert manager.is_retryable_error("rate_limited")
