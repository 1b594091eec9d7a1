"""App state — the registry of stores sharing one runtime.

    app = AppState(bootstrap=lambda app: app.register_store(CounterStore()))
    counter = app.store(CounterStore)

Stores are keyed by their class.  Derived stores are built by a factory
that can look up stores registered before them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapstore._errors import DuplicateRegistration, UnregisteredState
from snapstore.runtime import StoreRuntime

if TYPE_CHECKING:
    from collections.abc import Callable

    from snapstore._types import ServiceProvider
    from snapstore.config import RuntimeConfig
    from snapstore.observability.collector import RuntimeCollector
    from snapstore.store import BaseStore

    type StoreLookup = Callable[[type], Any]


class AppState:
    """Owns a StoreRuntime and the stores attached to it.

    Args:
        bootstrap: Called with the new app state at the end of construction,
            typically to register every store.
        services: Service lookup handed to the runtime.
        config: Runtime configuration.
        collector: Optional event collector handed to the runtime.

    """

    def __init__(
        self,
        bootstrap: Callable[[AppState], None] | None = None,
        *,
        services: ServiceProvider | None = None,
        config: RuntimeConfig | None = None,
        collector: RuntimeCollector | None = None,
    ) -> None:
        self._runtime = StoreRuntime(services, config=config, collector=collector)
        self._stores: dict[type, BaseStore[Any]] = {}
        if bootstrap is not None:
            bootstrap(self)

    @property
    def runtime(self) -> StoreRuntime:
        return self._runtime

    @property
    def services(self) -> ServiceProvider | None:
        return self._runtime.services

    def register_store[SS: BaseStore[Any]](self, store: SS) -> SS:
        """Attach ``store`` to the runtime and make it available by class.

        Raises:
            DuplicateRegistration: A store of the same class, or owning the same
                state type, is already registered.

        """
        store_type = type(store)
        if store_type in self._stores:
            msg = f"store of type {store_type.__name__} already registered"
            raise DuplicateRegistration(msg)
        store.attach(self._runtime)
        self._stores[store_type] = store
        return store

    def register_derived_store[SS: BaseStore[Any]](
        self,
        factory: Callable[[StoreLookup], SS],
    ) -> SS:
        """Build a store from already-registered ones and register it.

        ``factory`` receives :meth:`store` as its lookup function::

            app.register_derived_store(
                lambda lookup: SummaryStore(lookup(CounterStore)),
            )

        """
        return self.register_store(factory(self.store))

    def store[SS: BaseStore[Any]](self, store_type: type[SS]) -> SS:
        """Return the registered store of class ``store_type``.

        Raises:
            UnregisteredState: No such store is registered.

        """
        try:
            return self._stores[store_type]  # type: ignore[return-value]
        except KeyError:
            msg = f"store of type {store_type.__name__} not registered"
            raise UnregisteredState(msg) from None

    def has_store(self, store_type: type) -> bool:
        return store_type in self._stores

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._stores)
        return f"AppState(stores=[{names}])"
