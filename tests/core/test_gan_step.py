"""Tests for ganloop/gan_step.py — labels, loss and the two-player transition."""

import math

import pytest
import torch
import torch.nn as nn

from ganloop.errors import ShapeMismatchError
from ganloop.gan_step import (
    GANStep, FAKE_INDEX, REAL_INDEX, categorical_cross_entropy, make_labels,
)
from ganloop.optim import sgd


def _params_equal(a, b):
    return a.keys() == b.keys() and all(torch.equal(a[k], b[k]) for k in a)


class TestLabels:

    def test_fixed_columns(self):
        fake, real = make_labels(3)
        assert FAKE_INDEX == 0 and REAL_INDEX == 1
        assert torch.equal(fake, torch.tensor([[1.0, 0.0]] * 3))
        assert torch.equal(real, torch.tensor([[0.0, 1.0]] * 3))

    def test_mutually_exclusive(self):
        fake, real = make_labels(5)
        assert (fake * real).sum().item() == 0.0
        assert torch.equal(fake + real, torch.ones(5, 2))


class TestCategoricalCrossEntropy:

    def test_uniform_logits_give_log_two(self):
        _, real = make_labels(4)
        loss = categorical_cross_entropy(torch.zeros(4, 2), real)
        assert loss.item() == pytest.approx(math.log(2))

    def test_confident_correct_prediction_is_small(self):
        _, real = make_labels(2)
        logits = torch.tensor([[-10.0, 10.0], [-10.0, 10.0]])
        assert categorical_cross_entropy(logits, real).item() < 1e-6


class TestGANStep:

    def test_iteration_increments_by_one(self, tiny_step, tiny_state, real_batch):
        state = tiny_state
        for k in range(1, 4):
            state = tiny_step(state, real_batch)
            assert state.iteration == k

    def test_input_state_not_mutated(self, tiny_step, tiny_state, real_batch):
        g_before = {k: v.clone() for k, v in tiny_state.generator.model_state.params.items()}
        d_before = {k: v.clone() for k, v in tiny_state.discriminator.model_state.params.items()}
        tiny_step(tiny_state, real_batch)
        assert _params_equal(tiny_state.generator.model_state.params, g_before)
        assert _params_equal(tiny_state.discriminator.model_state.params, d_before)
        assert tiny_state.iteration == 0

    def test_both_players_updated(self, tiny_step, tiny_state, real_batch):
        new = tiny_step(tiny_state, real_batch)
        assert not _params_equal(new.generator.model_state.params,
                                 tiny_state.generator.model_state.params)
        assert not _params_equal(new.discriminator.model_state.params,
                                 tiny_state.discriminator.model_state.params)

    def test_deterministic(self, tiny_step, tiny_state, real_batch):
        """Identical inputs produce identical output states."""
        a = tiny_step(tiny_state, real_batch)
        b = tiny_step(tiny_state, real_batch)
        assert _params_equal(a.generator.model_state.params, b.generator.model_state.params)
        assert _params_equal(a.discriminator.model_state.params, b.discriminator.model_state.params)
        assert a.generator.loss == b.generator.loss
        assert a.discriminator.loss == b.discriminator.loss

    def test_noise_depends_on_iteration(self, tiny_step):
        assert not torch.equal(tiny_step.sample_noise(2, 0), tiny_step.sample_noise(2, 1))
        assert torch.equal(tiny_step.sample_noise(2, 5), tiny_step.sample_noise(2, 5))

    def test_noise_fn_pins_noise(self, tiny_generator, tiny_discriminator, tiny_state, real_batch):
        calls = []

        def noise_fn(batch_size, iteration):
            calls.append((batch_size, iteration))
            return torch.ones(batch_size, 3)

        step = GANStep(tiny_generator, tiny_discriminator, sgd(0.1), sgd(0.1),
                       latent_dim=3, noise_fn=noise_fn)
        step(tiny_state, real_batch)
        assert calls == [(2, 0)]

    def test_discriminator_uses_pre_update_generator(self, tiny_step, tiny_state, real_batch):
        """The discriminator loss is computed against the generator as it was."""
        noise = tiny_step.sample_noise(2, 0)
        fake_labels, real_labels = make_labels(2)
        expected, _ = tiny_step.discriminator_loss_fn(
            tiny_state.generator.model_state,
            tiny_state.discriminator.model_state.buffers,
            noise, real_batch, fake_labels, real_labels,
        )(tiny_state.discriminator.model_state.params)

        new = tiny_step(tiny_state, real_batch)
        assert new.discriminator.loss.value == pytest.approx(expected.item())

    def test_generator_uses_post_update_discriminator(self, tiny_step, tiny_state, real_batch):
        """The generator loss is computed against the already-updated discriminator."""
        noise = tiny_step.sample_noise(2, 0)
        _, real_labels = make_labels(2)
        new = tiny_step(tiny_state, real_batch)

        def generator_loss(d_model):
            loss, _ = tiny_step.generator_loss_fn(
                tiny_state.generator.model_state.buffers, d_model, noise, real_labels,
            )(tiny_state.generator.model_state.params)
            return loss.item()

        post = generator_loss(new.discriminator.model_state)
        pre = generator_loss(tiny_state.discriminator.model_state)
        assert new.generator.loss.value == pytest.approx(post)
        assert new.generator.loss.value != pytest.approx(pre)

    def test_generator_loss_invariant_to_later_generator_changes(self, tiny_step, tiny_state, real_batch):
        """Editing the input generator after the step changes neither the output nor its loss."""
        noise = tiny_step.sample_noise(2, 0)
        _, real_labels = make_labels(2)
        pre_params = {k: v.clone() for k, v in tiny_state.generator.model_state.params.items()}

        new = tiny_step(tiny_state, real_batch)
        stepped_params = {k: v.clone() for k, v in new.generator.model_state.params.items()}
        loss_fn = tiny_step.generator_loss_fn(
            tiny_state.generator.model_state.buffers, new.discriminator.model_state, noise, real_labels,
        )

        for p in tiny_state.generator.model_state.params.values():
            p.add_(100.0)

        loss, _ = loss_fn(pre_params)
        assert loss.item() == pytest.approx(new.generator.loss.value)
        assert _params_equal(new.generator.model_state.params, stepped_params)

    def test_running_losses_synchronized(self, tiny_step, tiny_state, real_batch):
        state = tiny_state
        for _ in range(3):
            state = tiny_step(state, real_batch)
        assert state.generator.loss.count == 3
        assert state.discriminator.loss.count == 3

    def test_shape_mismatch_raises(self, tiny_discriminator, real_batch):
        torch.manual_seed(0)
        wrong = nn.Linear(3, 5)
        step = GANStep(wrong, tiny_discriminator, sgd(0.1), sgd(0.1), latent_dim=3)
        state = step.init_state()
        with pytest.raises(ShapeMismatchError, match="per-sample shape"):
            step(state, real_batch)

    def test_generator_batchnorm_buffers_advance(self, tiny_discriminator, real_batch):
        """The generator's running statistics come from its own training pass."""
        torch.manual_seed(0)
        generator = nn.Sequential(nn.Linear(3, 4), nn.BatchNorm1d(4))
        step = GANStep(generator, tiny_discriminator, sgd(0.1), sgd(0.1), latent_dim=3)
        state = step.init_state()
        new = step(state, real_batch)
        before = state.generator.model_state.buffers['1.running_mean']
        after = new.generator.model_state.buffers['1.running_mean']
        assert torch.equal(before, torch.zeros(4))
        assert not torch.equal(after, before)
        assert new.generator.model_state.buffers['1.num_batches_tracked'].item() == 1
