"""
Strategy registry.

Maps strategy ids to strategy instances. Built once at startup with
build_default_registry() and passed to the engine.
"""

from typing import Optional

from whatsnext.exploration.strategy import ExplorationStrategy


class StrategyRegistry:
    def __init__(self, strategies: Optional[list[ExplorationStrategy]] = None):
        self._strategies: dict[str, ExplorationStrategy] = {}
        for strategy in strategies or []:
            self.register(strategy)

    def register(self, strategy: ExplorationStrategy) -> None:
        """Add a strategy, replacing any strategy with the same id."""
        self._strategies[strategy.id] = strategy

    def unregister(self, strategy_id: str) -> None:
        self._strategies.pop(strategy_id, None)

    def get(self, strategy_id: str) -> Optional[ExplorationStrategy]:
        return self._strategies.get(strategy_id)

    def all(self) -> list[ExplorationStrategy]:
        return list(self._strategies.values())

    def ids(self) -> list[str]:
        return list(self._strategies)

    def enabled(self, ids: list[str]) -> list[ExplorationStrategy]:
        """Strategies for the given ids, in order. Unknown and repeated ids are ignored."""
        result = []
        seen = set()
        for strategy_id in ids:
            strategy = self._strategies.get(strategy_id)
            if strategy is None or strategy_id in seen:
                continue
            seen.add(strategy_id)
            result.append(strategy)
        return result

    def info(self, strategy_id: str) -> Optional[tuple[str, str]]:
        """(name, description) for a strategy id, or None if unknown."""
        strategy = self._strategies.get(strategy_id)
        if strategy is None:
            return None
        return (strategy.name, strategy.description)


def build_default_registry() -> StrategyRegistry:
    """Registry pre-populated with the four built-in strategies."""
    from whatsnext.exploration.strategies import BUILTIN_STRATEGIES

    return StrategyRegistry([cls() for cls in BUILTIN_STRATEGIES])
