"""Tests for ganloop/optim.py — functional SGD and Adam."""

import pytest
import torch

from ganloop.optim import sgd, adam, apply_updates, AdamState, SGDState


class TestSGD:

    def test_update_is_negative_scaled_gradient(self):
        opt = sgd(0.1)
        params = {'w': torch.tensor([1.0, 2.0])}
        state = opt.init(params)
        updates, new_state = opt.update({'w': torch.tensor([1.0, -2.0])}, state, params)
        assert torch.allclose(updates['w'], torch.tensor([-0.1, 0.2]))
        assert new_state == SGDState(count=1)
        assert state == SGDState(count=0)

    def test_rejects_non_positive_lr(self):
        with pytest.raises(ValueError, match="lr"):
            sgd(0.0)


class TestAdam:

    def test_init_zeros(self):
        params = {'w': torch.ones(3)}
        state = adam().init(params)
        assert isinstance(state, AdamState)
        assert state.count == 0
        assert torch.equal(state.mu['w'], torch.zeros(3))
        assert torch.equal(state.nu['w'], torch.zeros(3))

    def test_first_step_is_lr_times_sign(self):
        """With bias correction the first update is -lr * sign(grad)."""
        lr = 0.01
        opt = adam(lr)
        params = {'w': torch.zeros(3)}
        grads = {'w': torch.tensor([0.5, -3.0, 2.0])}
        updates, _ = opt.update(grads, opt.init(params), params)
        assert torch.allclose(updates['w'], torch.tensor([-lr, lr, -lr]), atol=1e-6)

    def test_update_does_not_mutate_state(self):
        opt = adam(1e-3, b1=0.5)
        params = {'w': torch.zeros(2)}
        state = opt.init(params)
        _, new_state = opt.update({'w': torch.ones(2)}, state, params)
        assert torch.equal(state.mu['w'], torch.zeros(2))
        assert new_state.count == 1
        assert torch.allclose(new_state.mu['w'], torch.full((2,), 0.5))

    def test_zero_gradient_gives_zero_update(self):
        opt = adam(1.0)
        params = {'w': torch.ones(2)}
        updates, _ = opt.update({'w': torch.zeros(2)}, opt.init(params), params)
        assert torch.equal(updates['w'], torch.zeros(2))

    def test_rejects_bad_betas(self):
        with pytest.raises(ValueError, match="betas"):
            adam(b1=1.0)


class TestApplyUpdates:

    def test_adds_elementwise_and_returns_new_tensors(self):
        params = {'w': torch.tensor([1.0, 2.0]), 'b': torch.tensor([0.5])}
        result = apply_updates(params, {'w': torch.tensor([0.5, -1.0]), 'b': torch.tensor([1.0])})
        assert torch.allclose(result['w'], torch.tensor([1.5, 1.0]))
        assert torch.allclose(result['b'], torch.tensor([1.5]))
        assert torch.equal(params['w'], torch.tensor([1.0, 2.0]))

    def test_missing_update_keeps_param(self):
        params = {'w': torch.tensor([1.0]), 'frozen': torch.tensor([3.0])}
        result = apply_updates(params, {'w': torch.tensor([1.0])})
        assert result['frozen'] is params['frozen']
