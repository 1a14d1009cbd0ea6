"""Tests for ganloop/sinks/wandb.py — WandbSink."""

import sys
from unittest.mock import MagicMock

import numpy as np
import pytest

from ganloop.loop.events import Event


@pytest.fixture
def mock_wandb(monkeypatch):
    """A MagicMock standing in for the wandb module, with no active run."""
    wandb = MagicMock()
    wandb.run = None
    monkeypatch.setitem(sys.modules, "wandb", wandb)
    return wandb


@pytest.fixture
def wandb_sink(mock_wandb):
    from ganloop.sinks.wandb import WandbSink
    return WandbSink(project="test_project", group="test_group")


class TestWandbSinkInit:

    def test_stores_project(self, wandb_sink):
        assert wandb_sink._project == "test_project"

    def test_auto_group_when_none(self, mock_wandb):
        from ganloop.sinks.wandb import WandbSink
        assert "experiment_" in WandbSink(project="test")._group


class TestWandbSinkSetRunContext:

    def test_calls_init(self, wandb_sink, mock_wandb):
        wandb_sink.set_run_context(run="mnist_gan")
        call_kwargs = mock_wandb.init.call_args[1]
        assert call_kwargs['project'] == "test_project"
        assert call_kwargs['name'] == "mnist_gan"
        assert call_kwargs['group'] == "test_group"

    def test_finishes_previous_run(self, wandb_sink, mock_wandb):
        mock_wandb.run = MagicMock()
        wandb_sink.set_run_context(run="next")
        mock_wandb.finish.assert_called_once()


class TestWandbSinkEmit:

    def test_empty_metrics_no_op(self, wandb_sink, mock_wandb):
        wandb_sink.emit({}, 0, Event.ITERATION_COMPLETED)
        mock_wandb.log.assert_not_called()

    def test_no_run_no_op(self, wandb_sink, mock_wandb):
        wandb_sink.emit({"generator/loss": 1.0}, 0, Event.ITERATION_COMPLETED)
        mock_wandb.log.assert_not_called()

    def test_logs_scalars_at_step(self, wandb_sink, mock_wandb):
        mock_wandb.run = MagicMock()
        wandb_sink.emit({"generator/loss": 0.5, "epoch": 1}, 50, Event.ITERATION_COMPLETED)
        mock_wandb.log.assert_called_once_with({"generator/loss": 0.5, "epoch": 1}, step=50)

    def test_arrays_become_images(self, wandb_sink, mock_wandb):
        mock_wandb.run = MagicMock()
        wandb_sink.emit({"samples": np.zeros((3, 28, 28))}, 10, Event.EPOCH_COMPLETED)
        mock_wandb.Image.assert_called_once()
        logged = mock_wandb.log.call_args[0][0]
        assert logged["samples"] is mock_wandb.Image.return_value

    def test_flush_finishes_run(self, wandb_sink, mock_wandb):
        mock_wandb.run = MagicMock()
        wandb_sink.flush()
        mock_wandb.finish.assert_called_once()
