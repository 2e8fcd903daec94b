"""Name-based lookup of parent selection strategies.

NSGAII accepts ``select="tournament"`` as well as a selector callable. Names
resolve through SelectionRegistry, which maps each name to a factory; the
factory receives keyword configuration and builds the ParentSelector.

Adding a strategy:
    ```python
    from eps_nsga.registry import SelectionRegistry, list_selections

    def first_member():
        def selector(arity, population, rng):
            return [population[0]] * arity
        return selector

    SelectionRegistry.register("first", first_member)
    list_selections()  # ["first", "random", "tournament"]
    ```
"""

from collections.abc import Callable

from eps_nsga.protocols import ParentSelector

SelectorFactory = Callable[..., ParentSelector]


class SelectionRegistry:
    """Process-wide table of selection strategy factories.

    Class Attributes:
        _registry: Strategy name to factory.
    """

    _registry: dict[str, SelectorFactory] = {}

    @classmethod
    def register(cls, name: str, factory: SelectorFactory) -> None:
        """Store factory under name, replacing any earlier registration."""
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs) -> ParentSelector:
        """Build the selector registered under name.

        Args:
            name: Registered strategy name.
            **kwargs: Forwarded to the factory, e.g. ``tournament_size=3``.

        Raises:
            KeyError: If nothing is registered under name. The message lists
                the registered names.
        """
        try:
            factory = cls._registry[name]
        except KeyError:
            available = ", ".join(cls.list()) or "none"
            raise KeyError(f"Selection strategy '{name}' not found. Available strategies: {available}") from None
        return factory(**kwargs)

    @classmethod
    def list(cls) -> list[str]:
        """Registered names in alphabetical order."""
        return sorted(cls._registry)


def list_selections() -> list[str]:
    """Shortcut for SelectionRegistry.list()."""
    return SelectionRegistry.list()
