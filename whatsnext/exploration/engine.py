"""
Exploration engine.

Runs the enabled strategies for a directory concurrently, one worker per
strategy, and joins their results. A strategy that does not apply, raises,
or misses the deadline contributes nothing; it never aborts the batch.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional

from whatsnext.exploration.errors import ExplorationTimeout, NotADirectory
from whatsnext.exploration.registry import StrategyRegistry
from whatsnext.exploration.strategy import ExplorationStrategy
from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.types import ExplorationResult

logger = logging.getLogger(__name__)


class ExplorationEngine:
    def __init__(self, registry: StrategyRegistry):
        self.registry = registry

    def explore(self, path: Path, config: ExplorationConfig) -> list[ExplorationResult]:
        """Run every enabled strategy on a directory.

        Results come back in enabled-strategy order, but callers should not
        rely on any ordering.

        A branch that misses the deadline is dropped from the results but
        its thread keeps running until the strategy returns. Executor
        threads are joined at interpreter exit, so a short-lived process
        still waits for a slow strategy before exiting.

        Raises:
            NotADirectory: if path does not exist or is not a directory
        """
        path = Path(path).expanduser()
        if not path.is_dir():
            raise NotADirectory(str(path))

        strategies = self.registry.enabled(config.enabled_strategies)
        if not strategies:
            return []

        timeout = None
        if config.timeout_seconds > 0:
            timeout = min(config.timeout_seconds, threading.TIMEOUT_MAX)
        executor = ThreadPoolExecutor(max_workers=len(strategies), thread_name_prefix="explore")
        try:
            futures: list[tuple[ExplorationStrategy, Future]] = [
                (s, executor.submit(self._run_branch, s, path, config)) for s in strategies
            ]
            _, not_done = wait([f for _, f in futures], timeout=timeout)
        finally:
            # Don't block on branches that missed the deadline.
            executor.shutdown(wait=False, cancel_futures=True)

        results = []
        for strategy, future in futures:
            if future in not_done:
                logger.warning(f"Strategy {strategy.id} failed: {ExplorationTimeout(strategy.id, timeout)}")
                continue
            result = future.result()
            if result is not None:
                results.append(result)
        return results

    def _run_branch(
        self,
        strategy: ExplorationStrategy,
        path: Path,
        config: ExplorationConfig,
    ) -> Optional[ExplorationResult]:
        try:
            if not strategy.can_explore(path):
                logger.debug(f"Strategy {strategy.id} does not apply to {path}")
                return None
            return strategy.explore(path, config)
        except Exception as e:
            logger.warning(f"Strategy {strategy.id} failed: {e}")
            return None

    def run_strategy(
        self,
        strategy_id: str,
        path: Path,
        config: ExplorationConfig,
    ) -> Optional[ExplorationResult]:
        """Run one strategy in the calling thread.

        Returns None if the id is unknown or the strategy does not apply.
        Errors from the strategy propagate.
        """
        strategy = self.registry.get(strategy_id)
        if strategy is None:
            return None
        path = Path(path).expanduser()
        if not strategy.can_explore(path):
            return None
        return strategy.explore(path, config)

    def available_strategy_ids(self) -> list[str]:
        return self.registry.ids()

    def strategy_info(self, strategy_id: str) -> Optional[tuple[str, str]]:
        return self.registry.info(strategy_id)
