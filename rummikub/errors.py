class RummikubError(Exception):
    """Base class for engine errors."""


class MalformedTile(RummikubError, ValueError):
    pass


class SearchBudgetExceeded(RummikubError):
    def __init__(self, nodes: int, elapsed: float) -> None:
        super().__init__(f"search budget exceeded after {nodes} nodes ({elapsed:.3f}s)")
        self.nodes = nodes
        self.elapsed = elapsed


class GameFinished(RummikubError):
    pass


class TurnInProgress(RummikubError, RuntimeError):
    pass
