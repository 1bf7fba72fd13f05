"""
Tests for the RequestChainCoordinator.
"""

import logging
from typing import List
from unittest.mock import AsyncMock, Mock

import pytest

from datafetch.chain import ChainState, RequestChainCoordinator
from datafetch.exceptions import NetworkError, ServerError
from datafetch.fetcher import DataFetcher
from datafetch.models import RequestConfiguration

FIRST = RequestConfiguration(domain="api.example.com", path="/first")
SECOND = RequestConfiguration(domain="api.example.com", path="/second")


def progress_steps(states: List[ChainState]) -> List[float]:
    """Distinct progress values in the order they were published."""
    steps: List[float] = []
    for state in states:
        if not steps or steps[-1] != state.progress:
            steps.append(state.progress)
    return steps


@pytest.fixture
def mock_fetcher():
    """DataFetcher double whose fetch results are set per test."""
    return AsyncMock(spec=DataFetcher)


@pytest.fixture
def coordinator(mock_fetcher):
    return RequestChainCoordinator(mock_fetcher)


class TestRequestChainCoordinator:
    """Test chaining two requests."""

    def test_initial_state(self, coordinator: RequestChainCoordinator):
        """Test a new coordinator is idle."""
        assert coordinator.state == ChainState()
        assert not coordinator.is_loading
        assert coordinator.progress == 0.0
        assert coordinator.error is None

    @pytest.mark.asyncio
    async def test_success(self, coordinator: RequestChainCoordinator, mock_fetcher):
        """Test the second result is returned and derived from the first."""
        mock_fetcher.fetch.side_effect = [{"next": "/second"}, {"value": 42}]
        derive = Mock(return_value=SECOND)

        result = await coordinator.chain_two_requests(FIRST, derive, dict, dict)

        assert result == {"value": 42}
        derive.assert_called_once_with({"next": "/second"})
        assert mock_fetcher.fetch.await_args_list[0].args == (FIRST, dict)
        assert mock_fetcher.fetch.await_args_list[1].args == (SECOND, dict)
        assert coordinator.state == ChainState(is_loading=False, progress=1.0, error=None)

    @pytest.mark.asyncio
    async def test_progress_sequence(self, coordinator: RequestChainCoordinator, mock_fetcher):
        """Test observers see progress advance through each step."""
        mock_fetcher.fetch.side_effect = [{}, {}]
        states: List[ChainState] = []
        coordinator.subscribe(states.append)

        await coordinator.chain_two_requests(FIRST, lambda _: SECOND)

        assert progress_steps(states) == [0.0, 0.3, 0.6, 0.8, 1.0]
        assert states[0].is_loading
        assert states[-1] == ChainState(is_loading=False, progress=1.0, error=None)

    @pytest.mark.asyncio
    async def test_loading_while_fetching(
        self, coordinator: RequestChainCoordinator, mock_fetcher
    ):
        """Test is_loading is set while requests are in flight."""
        seen: List[bool] = []

        async def fetch(configuration, model=None):
            seen.append(coordinator.is_loading)
            return {}

        mock_fetcher.fetch.side_effect = fetch

        await coordinator.chain_two_requests(FIRST, lambda _: SECOND)

        assert seen == [True, True]
        assert not coordinator.is_loading

    @pytest.mark.asyncio
    async def test_first_failure_skips_derive(
        self, coordinator: RequestChainCoordinator, mock_fetcher
    ):
        """Test a failing first request stops the chain."""
        cause = ServerError(500)
        mock_fetcher.fetch.side_effect = cause
        derive = Mock(return_value=SECOND)
        states: List[ChainState] = []
        coordinator.subscribe(states.append)

        result = await coordinator.chain_two_requests(FIRST, derive)

        assert result is None
        derive.assert_not_called()
        assert mock_fetcher.fetch.await_count == 1
        assert isinstance(coordinator.error, NetworkError)
        assert coordinator.error.cause is cause
        assert not coordinator.is_loading
        assert coordinator.progress == 1.0
        assert 0.3 not in progress_steps(states)

    @pytest.mark.asyncio
    async def test_derive_failure(self, coordinator: RequestChainCoordinator, mock_fetcher):
        """Test an exception while deriving the second request is captured."""
        mock_fetcher.fetch.return_value = {}

        def derive(_):
            raise KeyError("forecast")

        result = await coordinator.chain_two_requests(FIRST, derive)

        assert result is None
        assert mock_fetcher.fetch.await_count == 1
        assert isinstance(coordinator.error.cause, KeyError)

    @pytest.mark.asyncio
    async def test_second_failure(self, coordinator: RequestChainCoordinator, mock_fetcher):
        """Test a failing second request is captured after partial progress."""
        mock_fetcher.fetch.side_effect = [{}, ServerError(404)]
        states: List[ChainState] = []
        coordinator.subscribe(states.append)

        assert await coordinator.chain_two_requests(FIRST, lambda _: SECOND) is None
        assert isinstance(coordinator.error.cause, ServerError)
        assert progress_steps(states) == [0.0, 0.3, 0.6, 1.0]

    @pytest.mark.asyncio
    async def test_new_chain_clears_error(
        self, coordinator: RequestChainCoordinator, mock_fetcher
    ):
        """Test starting a chain resets the previous error."""
        mock_fetcher.fetch.side_effect = [ServerError(500), {}, {"ok": True}]

        await coordinator.chain_two_requests(FIRST, lambda _: SECOND)
        assert coordinator.error is not None

        assert await coordinator.chain_two_requests(FIRST, lambda _: SECOND) == {"ok": True}
        assert coordinator.error is None

    def test_clear_error(self, coordinator: RequestChainCoordinator):
        """Test clear_error resets the error field."""
        coordinator._update(error=NetworkError(ValueError("x")))

        coordinator.clear_error()

        assert coordinator.error is None

    @pytest.mark.asyncio
    async def test_unsubscribe(self, coordinator: RequestChainCoordinator, mock_fetcher):
        """Test an unsubscribed listener receives nothing further."""
        mock_fetcher.fetch.side_effect = [{}, {}]
        states: List[ChainState] = []
        unsubscribe = coordinator.subscribe(states.append)

        unsubscribe()
        await coordinator.chain_two_requests(FIRST, lambda _: SECOND)

        assert states == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_chain(
        self, coordinator: RequestChainCoordinator, mock_fetcher, caplog
    ):
        """Test a raising listener is logged and the chain completes."""
        mock_fetcher.fetch.side_effect = [{}, {"ok": True}]

        def broken(state):
            raise RuntimeError("listener bug")

        coordinator.subscribe(broken)

        with caplog.at_level(logging.ERROR, logger="datafetch.chain"):
            result = await coordinator.chain_two_requests(FIRST, lambda _: SECOND)

        assert result == {"ok": True}
        assert "Chain state listener failed" in caplog.text
