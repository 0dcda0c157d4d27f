"""Session provider: the current authenticated identity and its listeners."""

from collections.abc import Awaitable, Callable

from src.core.logging import get_logger

logger = get_logger(__name__)

IdentityListener = Callable[[str | None], Awaitable[None]]


class SessionProvider:
    """Holds the bound identity and notifies subscribers when it changes.

    Starts in the loading state with no identity until the first
    sign-in or sign-out resolves it. Listeners are awaited in subscription
    order; an exception from a listener propagates to the caller.
    """

    def __init__(self) -> None:
        self._identity: str | None = None
        self._is_loading = True
        self._listeners: list[IdentityListener] = []

    @property
    def current_identity(self) -> str | None:
        return self._identity

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in(self, identity: str) -> None:
        await self._set_identity(identity)

    async def sign_out(self) -> None:
        await self._set_identity(None)

    async def _set_identity(self, identity: str | None) -> None:
        changed = self._is_loading or identity != self._identity
        self._identity = identity
        self._is_loading = False
        if not changed:
            return

        logger.info("identity_changed", user_id=identity)
        for listener in list(self._listeners):
            await listener(identity)
