"""Exception types raised by the training loop and its handlers."""


class GANLoopError(Exception):
    """Base class for errors raised by ganloop."""


class ShapeMismatchError(GANLoopError, ValueError):
    """Tensor dimensions disagree between collaborating components.

    Raised when a generated batch does not match the real batch's
    per-sample shape, or when a data source is handed a tensor it cannot
    split into batches.
    """


class NumericalDivergenceError(GANLoopError, FloatingPointError):
    """A tracked loss became NaN or infinite."""

    def __init__(self, player: str, value: float, iteration: int):
        self.player = player
        self.value = value
        self.iteration = iteration
        super().__init__(
            f"{player} loss diverged to {value} at iteration {iteration}"
        )
