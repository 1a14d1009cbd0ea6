"""Tests for IterationLogger and ConsoleSink loss lines."""

from dataclasses import replace

import pytest

from ganloop.handlers import IterationLogger, loss_metrics
from ganloop.loop import Event, LoopState, build_loop
from ganloop.sinks import ConsoleSink, MetricSink
from ganloop.state import RunningStat


class RecordingSink(MetricSink):
    def __init__(self):
        self.records = []
        self.flushed = False

    def emit(self, metrics, step, event):
        self.records.append((step, dict(metrics)))

    def flush(self):
        self.flushed = True


def _with_losses(tiny_state, g, d):
    return replace(
        tiny_state,
        discriminator=replace(tiny_state.discriminator, loss=RunningStat(d, 1)),
        generator=replace(tiny_state.generator, loss=RunningStat(g, 1)),
    )


class TestLossMetrics:

    def test_record_fields(self, tiny_state):
        state = LoopState(epoch=2, iteration=17, epoch_iteration=5,
                          step_state=_with_losses(tiny_state, 0.5, 0.25))
        assert loss_metrics(state) == {
            'epoch': 2, 'batch': 5, 'iteration': 17,
            'generator/loss': 0.5, 'discriminator/loss': 0.25,
        }


class TestIterationLogger:

    def test_default_sink_is_console(self):
        logger = IterationLogger()
        assert len(logger.sinks) == 1
        assert isinstance(logger.sinks[0], ConsoleSink)

    def test_fires_every_n(self, tiny_state):
        sink = RecordingSink()
        loop = build_loop(lambda s, b: s, lambda: tiny_state)
        IterationLogger(every=2, sinks=[sink]).attach(loop)
        loop.run(list(range(5)), epochs=1)
        assert [step for step, _ in sink.records] == [2, 4]

    def test_flush_reaches_sinks(self):
        sink = RecordingSink()
        IterationLogger(sinks=[sink]).flush()
        assert sink.flushed


class TestConsoleSink:

    def test_loss_line_format(self):
        line = ConsoleSink().format_loss_line(
            {'epoch': 0, 'batch': 50, 'generator/loss': 0.5, 'discriminator/loss': 0.25}, 50,
        )
        assert "Epoch:" in line
        assert "batch:" in line
        assert "0.50000" in line
        assert "0.25000" in line

    def test_precision(self):
        line = ConsoleSink(precision=2).format_loss_line(
            {'generator/loss': 0.5, 'discriminator/loss': 0.25}, 3,
        )
        assert "0.50" in line and "0.500" not in line

    def test_trend_arrows(self):
        sink = ConsoleSink()
        sink.format_loss_line({'generator/loss': 1.0, 'discriminator/loss': 1.0}, 1)
        line = sink.format_loss_line({'generator/loss': 2.0, 'discriminator/loss': 0.5}, 2)
        assert ConsoleSink._ARROWS["up"] in line
        assert ConsoleSink._ARROWS["down"] in line

    def test_no_trend_when_disabled(self):
        sink = ConsoleSink(show_trend=False)
        sink.format_loss_line({'generator/loss': 1.0, 'discriminator/loss': 1.0}, 1)
        line = sink.format_loss_line({'generator/loss': 2.0, 'discriminator/loss': 0.5}, 2)
        assert ConsoleSink._ARROWS["up"] not in line

    @pytest.mark.parametrize("prev, curr, expected", [
        (1.0, 1.001, 'flat'),
        (1.0, 1.5, 'up'),
        (1.0, 0.5, 'down'),
        (0.0, 0.0, 'flat'),
    ])
    def test_classify_change(self, prev, curr, expected):
        assert ConsoleSink._classify_change(prev, curr) == expected

    def test_emit_other_metrics_does_not_raise(self):
        ConsoleSink().emit({'samples_saved': 3}, 10, Event.EPOCH_COMPLETED)
