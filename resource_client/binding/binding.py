"""
StatefulFetchBinding: drives one fetcher call per parameter through
IDLE -> LOADING -> RESOLVED | FAILED.

Each fetch is tagged with a generation number. A parameter change or
refetch bumps the generation and cancels the previous task; any result
that still arrives for an old generation is discarded, so a slow stale
response can never overwrite newer state.

Must be driven from a running asyncio event loop. Blocking fetchers
(e.g. RemoteResourceAccessor.fetch_resource) run in a worker thread.
"""
import asyncio
import functools
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from resource_client.binding.state import FetchState, FetchStatus, describe_error

logger = logging.getLogger(__name__)

Listener = Callable[[FetchState], None]


class StatefulFetchBinding:
    """Fetch lifecycle for a single mutable input parameter."""

    def __init__(
        self,
        fetcher: Callable[[Any], Any],
        name: Optional[str] = None,
        refetcher: Optional[Callable[[Any], Any]] = None,
    ):
        self._fetcher = fetcher
        # refetch() must bypass caches such as RemoteResourceAccessor's
        self._refetcher = refetcher if refetcher is not None else _fresh_variant(fetcher)
        self.name = name or getattr(fetcher, "__name__", "fetch")

        self._param: Any = None
        self._state = FetchState.idle()
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

    # ----- consumer surface -----

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def param(self) -> Any:
        return self._param

    @property
    def data(self) -> Any:
        return self._state.data

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    def snapshot(self) -> Dict[str, Any]:
        """Consumer-facing shape: data, loading, error, refetch."""
        state = self._state
        return {
            "data": state.data,
            "loading": state.loading,
            "error": state.error,
            "refetch": self.refetch,
        }

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for every state transition. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ----- triggers -----

    def set_param(self, param: Any) -> Optional[asyncio.Task]:
        """
        Point the binding at a new parameter.

        Equal parameters are a no-op. A falsy parameter settles to IDLE
        without any call. Anything else starts a fetch that supersedes
        the one in flight.
        """
        if param == self._param:
            return self._task

        self._param = param
        if not param:
            self._settle_idle()
            return None
        return self._start(self._fetcher)

    def refetch(self) -> Optional[asyncio.Task]:
        """Re-run the fetch for the current parameter even if unchanged."""
        if not self._param:
            self._settle_idle()
            return None
        return self._start(self._refetcher)

    async def wait(self) -> FetchState:
        """Wait until the current fetch (including any that supersede it) settles."""
        task = self._task
        while task is not None:
            await asyncio.wait({task})
            if self._task is task or self._task is None:
                break
            task = self._task
        return self._state

    def close(self) -> None:
        """Cancel in-flight work, settle to IDLE and drop listeners."""
        self._param = None
        self._settle_idle()
        self._listeners.clear()

    # ----- internals -----

    def _start(self, fetch: Callable[[Any], Any]) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        self._cancel_inflight()
        self._generation += 1
        generation = self._generation

        self._set_state(FetchState.loading_from(self._state))
        self._task = loop.create_task(self._run(generation, self._param, fetch))
        return self._task

    def _settle_idle(self) -> None:
        self._cancel_inflight()
        self._generation += 1
        if self._state != FetchState.idle():
            self._set_state(FetchState.idle())

    def _cancel_inflight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, generation: int, param: Any, fetch: Callable[[Any], Any]) -> None:
        try:
            if _is_coroutine_callable(fetch):
                payload = fetch(param)
            else:
                payload = await asyncio.to_thread(fetch, param)
            # Plain callables may still hand back a coroutine or future
            if inspect.isawaitable(payload):
                payload = await payload
        except asyncio.CancelledError:
            logger.debug(f"StatefulFetchBinding[{self.name}]: fetch for {param!r} cancelled")
            raise
        except Exception as e:
            if generation != self._generation:
                logger.debug(f"StatefulFetchBinding[{self.name}]: discarding stale failure for {param!r}")
                return
            message = describe_error(e)
            logger.info(f"StatefulFetchBinding[{self.name}]: fetch for {param!r} failed: {message}")
            self._set_state(FetchState.failed(message))
            return

        if generation != self._generation:
            logger.debug(f"StatefulFetchBinding[{self.name}]: discarding stale result for {param!r}")
            return

        logger.info(f"StatefulFetchBinding[{self.name}]: fetch for {param!r} resolved")
        self._set_state(FetchState.resolved(payload))

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"StatefulFetchBinding[{self.name}]: listener failed on {state.status.value}: {e}")


def _is_coroutine_callable(fn: Callable[..., Any]) -> bool:
    if isinstance(fn, functools.partial):
        fn = fn.func
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


def _fresh_variant(fetcher: Callable[..., Any]) -> Callable[[Any], Any]:
    """Bind refresh=True when the fetcher supports it, else reuse the fetcher."""
    try:
        parameters = inspect.signature(fetcher).parameters
    except (TypeError, ValueError):
        return fetcher
    if "refresh" in parameters:
        return functools.partial(fetcher, refresh=True)
    return fetcher


__all__ = ["StatefulFetchBinding", "FetchState", "FetchStatus"]
