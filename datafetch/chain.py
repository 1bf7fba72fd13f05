"""
Two-step request chaining with observable progress.

This module provides the RequestChainCoordinator, which fetches a first
resource, derives a second request configuration from the decoded result and
fetches that, publishing loading, progress and error state along the way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional

from .exceptions import DataFetchError, NetworkError
from .fetcher import DataFetcher
from .models import RequestConfiguration

logger = logging.getLogger(__name__)

StateListener = Callable[["ChainState"], None]


@dataclass(frozen=True)
class ChainState:
    """Snapshot of a coordinator's observable fields."""

    is_loading: bool = False
    progress: float = 0.0
    error: Optional[DataFetchError] = None


class RequestChainCoordinator:
    """
    Runs two dependent fetches and publishes their progress.

    Both requests go straight to the network; chained follow-up endpoints are
    typically short-lived derived URLs, so nothing is cached.

    Observers registered with ``subscribe`` receive a ChainState snapshot
    after every field change, in the order the changes are made. Changes are
    only made by the coroutine running the chain, so observers on the same
    event loop see a consistent sequence.

    Progress during a chain:
        0.0 on start, 0.3 after the first fetch, 0.6 after deriving the second
        configuration, 0.8 after the second fetch, 1.0 when finished (whether
        it succeeded or failed).

    Example:
        ```python
        coordinator = RequestChainCoordinator(fetcher)
        coordinator.subscribe(lambda state: print(state.progress))

        forecast = await coordinator.chain_two_requests(
            point_config,
            lambda point: fetcher.configure(domain="api.weather.gov", path=...),
            first_model=PointResponse,
            second_model=ForecastResponse,
        )
        if forecast is None:
            print(coordinator.error)
        ```
    """

    def __init__(self, fetcher: DataFetcher):
        """
        Initialize the coordinator.

        Args:
            fetcher: Fetcher used for both requests
        """
        self.fetcher = fetcher
        self._state = ChainState()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def progress(self) -> float:
        return self._state.progress

    @property
    def error(self) -> Optional[DataFetchError]:
        return self._state.error

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener for state changes.

        Returns:
            A callable that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_error(self) -> None:
        """Reset the error field."""
        self._update(error=None)

    async def chain_two_requests(
        self,
        first: RequestConfiguration,
        derive_second: Callable[[Any], RequestConfiguration],
        first_model: Optional[Any] = None,
        second_model: Optional[Any] = None,
    ) -> Optional[Any]:
        """
        Fetch first, derive the second configuration from its result, fetch it.

        Any failure is stored in ``error`` as a NetworkError wrapping the
        original exception, and the chain is abandoned without retrying.

        Args:
            first: Configuration of the first request
            derive_second: Builds the second configuration from the first result
            first_model: Type to decode the first response into
            second_model: Type to decode the second response into

        Returns:
            The decoded second response, or None if any step failed
        """
        self._update(is_loading=True)
        self._update(error=None)
        self._update(progress=0.0)

        try:
            first_result = await self.fetcher.fetch(first, first_model)
            self._update(progress=0.3)

            second = derive_second(first_result)
            self._update(progress=0.6)

            second_result = await self.fetcher.fetch(second, second_model)
            self._update(progress=0.8)
        except Exception as e:
            logger.warning(f"Request chain failed: {e}")
            self._update(error=NetworkError(e))
            return None
        finally:
            self._update(is_loading=False)
            self._update(progress=1.0)

        return second_result

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Chain state listener failed")
