"""Name-to-class registries.

The entry point (``run_experiment.py``) looks experiment runners up by
name in ExperimentRegistry; runners add themselves with the
``@ExperimentRegistry.register("name")`` decorator.
"""

from functools import partial


class Registry:
    """Class registry base.

    Subclasses give themselves their own ``_items = {}`` and a
    ``_registry_label`` used in lookup errors. ``register`` is used either
    as ``@Reg.register("name")`` or bare as ``@Reg.register`` on a class
    that defines a string ``name`` attribute.
    """

    _items: dict[str, type] = {}
    _registry_label: str = "item"

    @classmethod
    def _add(cls, name: str, item: type) -> type:
        cls._items[name] = item
        return item

    @classmethod
    def register(cls, item_or_name):
        if isinstance(item_or_name, str):
            return partial(cls._add, item_or_name)
        if not isinstance(item_or_name, type):
            raise TypeError(
                f"{cls.__name__}.register() expects a string name or a class, "
                f"got {type(item_or_name).__name__}"
            )
        name = getattr(item_or_name, 'name', None)
        if not isinstance(name, str):
            raise TypeError(
                f"{item_or_name.__name__} has no string 'name' attribute; "
                f"use {cls.__name__}.register('name') instead"
            )
        return cls._add(name, item_or_name)

    @classmethod
    def get(cls, name: str) -> type:
        try:
            return cls._items[name]
        except KeyError:
            raise ValueError(
                f"Unknown {cls._registry_label}: '{name}'. "
                f"Available: {', '.join(cls.list_all())}"
            ) from None

    @classmethod
    def list_all(cls) -> list[str]:
        return sorted(cls._items)


class ExperimentRegistry(Registry):
    """Experiment runners by name."""

    _items = {}
    _registry_label = "experiment"

    @classmethod
    def get_all(cls) -> dict[str, type]:
        return dict(cls._items)
