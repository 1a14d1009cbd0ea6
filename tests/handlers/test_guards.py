"""Tests for FiniteLossGuard and EarlyStopping."""

import pytest

from ganloop.errors import NumericalDivergenceError
from ganloop.handlers import EarlyStopping, FiniteLossGuard
from ganloop.loop import RunStatus, build_loop
from ganloop.state import RunningStat


class _Losses:
    """Minimal step state exposing losses()."""

    def __init__(self, g, d):
        self.g, self.d = g, d

    def losses(self):
        return {'generator/loss': self.g, 'discriminator/loss': self.d}


class TestFiniteLossGuard:

    def test_passes_finite(self):
        loop = build_loop(lambda s, b: s, lambda: _Losses(0.7, 0.6))
        FiniteLossGuard().attach(loop)
        assert loop.run([0, 0], epochs=1).status is RunStatus.COMPLETED

    def test_raises_on_nan(self):
        loop = build_loop(lambda s, b: _Losses(0.7, RunningStat().update(float('nan'), 0).value),
                          lambda: _Losses(0.7, 0.6))
        FiniteLossGuard().attach(loop)
        with pytest.raises(NumericalDivergenceError, match="discriminator loss diverged") as exc:
            loop.run([0], epochs=1)
        assert exc.value.iteration == 1

    def test_raises_on_inf(self):
        loop = build_loop(lambda s, b: _Losses(float('inf'), 0.1), lambda: None)
        FiniteLossGuard().attach(loop)
        with pytest.raises(FloatingPointError):
            loop.run([0], epochs=1)


class TestEarlyStopping:

    def test_halts_run(self):
        """max 3 over 3 epochs of 2 batches stops at iteration 3."""
        loop = build_loop(lambda s, b: s + 1, lambda: 0)
        EarlyStopping(max_iterations=3).attach(loop)
        final = loop.run([0, 0], epochs=3)
        assert final.status is RunStatus.HALTED
        assert final.iteration == 3
        assert final.step_state == 3

    def test_limit_beyond_run(self):
        loop = build_loop(lambda s, b: s + 1, lambda: 0)
        EarlyStopping(max_iterations=100).attach(loop)
        final = loop.run([0, 0], epochs=3)
        assert final.status is RunStatus.COMPLETED
        assert final.iteration == 6

    def test_rejects_zero(self):
        with pytest.raises(ValueError):
            EarlyStopping(0)
