from typing import TYPE_CHECKING, Optional, Type

if TYPE_CHECKING:
    from .config import DetectionConfig
    from .strategies import DetectionStrategy


class StrategyRegistry:
    """
    Registry for grid detection strategies.

    Strategies are registered by name and instantiated with a shared
    DetectionConfig.
    """

    _strategies: dict[str, Type["DetectionStrategy"]] = {}

    @classmethod
    def register(cls, strategy_class: Type["DetectionStrategy"]) -> Type["DetectionStrategy"]:
        """
        Register a strategy class.

        Can be used as a decorator:
            @StrategyRegistry.register
            class MyStrategy(DetectionStrategy):
                ...

        Args:
            strategy_class: The strategy class to register.

        Returns:
            The same strategy class (for decorator usage).
        """
        # The name property needs no config, so skip __init__
        temp_instance = object.__new__(strategy_class)

        name = temp_instance.name
        cls._strategies[name] = strategy_class
        return strategy_class

    @classmethod
    def get_strategy_class(cls, name: str) -> Type["DetectionStrategy"] | None:
        """
        Get a strategy class by name.

        Args:
            name: The strategy identifier.

        Returns:
            The strategy class, or None if not found.
        """
        return cls._strategies.get(name)

    @classmethod
    def create_strategy(
        cls,
        name: str,
        config: Optional["DetectionConfig"] = None,
    ) -> Optional["DetectionStrategy"]:
        """
        Create an instance of a strategy.

        Args:
            name: The strategy identifier.
            config: Shared detection configuration.

        Returns:
            A strategy instance, or None if the name is not registered.
        """
        strategy_class = cls.get_strategy_class(name)
        if strategy_class is None:
            return None
        return strategy_class(config)

    @classmethod
    def list_registered(cls) -> list[str]:
        """
        List all registered strategy names.

        Returns:
            List of registered strategy identifiers.
        """
        return list(cls._strategies.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a strategy is registered."""
        return name in cls._strategies
