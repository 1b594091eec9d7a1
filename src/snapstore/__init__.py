"""Snapstore — a reactive state-container runtime.

Immutable snapshots, one container per state type, and subscribers that
observe named subsets of a snapshot's fields ("topics") instead of the
whole object.

Quick start::

    from dataclasses import dataclass
    from snapstore import Snapshot, StoreRuntime

    @dataclass(frozen=True, slots=True)
    class CounterState(Snapshot):
        counter: int = 1
        enabled: bool = False

    runtime = StoreRuntime()
    container = runtime.register_state(CounterState())
    enabled = runtime.value_reaction(CounterState, lambda s: s.enabled,
                                     topics={"enabled"})
    container["enabled"] = True
    enabled.value  # True

Layers::

    state        Snapshot, StateContainer       (own and replace snapshots)
    reactive     ValueReaction, EffectReaction   (observe topics)
    runtime      StoreRuntime                    (register, notify, dispatch)
    store / app  BaseStore, StoreAction, AppState (stores, actions, wiring)

"""

__version__ = "0.1.0"
__all__ = [
    "SELF",
    "AppState",
    "BaseStore",
    "ConfigError",
    "DuplicateRegistration",
    "EffectReaction",
    "ReactionRegistry",
    "ReentrantMutation",
    "RuntimeConfig",
    "SnapStoreError",
    "Snapshot",
    "StateContainer",
    "StoreAction",
    "StoreRuntime",
    "TypeMismatch",
    "UnknownField",
    "UnregisteredState",
    "ValueReaction",
    "__version__",
    "action",
    "load_config",
]

# name -> defining module; resolved on first access
_LAZY: dict[str, str] = {
    "SELF": "snapstore.state.snapshot",
    "Snapshot": "snapstore.state.snapshot",
    "StateContainer": "snapstore.state.container",
    "EffectReaction": "snapstore.reactive.reaction",
    "ValueReaction": "snapstore.reactive.reaction",
    "ReactionRegistry": "snapstore.reactive.registry",
    "StoreRuntime": "snapstore.runtime",
    "RuntimeConfig": "snapstore.config",
    "load_config": "snapstore.config_loader",
    "BaseStore": "snapstore.store",
    "StoreAction": "snapstore.store",
    "action": "snapstore.store",
    "AppState": "snapstore.app",
    "SnapStoreError": "snapstore._errors",
    "ConfigError": "snapstore._errors",
    "DuplicateRegistration": "snapstore._errors",
    "ReentrantMutation": "snapstore._errors",
    "TypeMismatch": "snapstore._errors",
    "UnknownField": "snapstore._errors",
    "UnregisteredState": "snapstore._errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import snapstore`` fast while providing a flat top-level API.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    value = getattr(import_module(module_name), name)
    globals()[name] = value
    return value
