"""Tests for ganloop/player.py — value_and_grad and the player update."""

import pytest
import torch

from ganloop.optim import sgd
from ganloop.player import value_and_grad, update_player
from ganloop.state import ModelState, PlayerState, RunningStat


def _quadratic(params):
    return sum((p ** 2).sum() for p in params.values()), None


class TestValueAndGrad:

    def test_quadratic_gradient(self):
        params = {'w': torch.tensor([1.0, -2.0])}
        loss, grads, aux = value_and_grad(_quadratic, params)
        assert loss.item() == pytest.approx(5.0)
        assert torch.allclose(grads['w'], torch.tensor([2.0, -4.0]))
        assert aux is None

    def test_does_not_touch_input_tensors(self):
        params = {'w': torch.tensor([1.0])}
        value_and_grad(_quadratic, params)
        assert params['w'].grad is None
        assert not params['w'].requires_grad

    def test_empty_params(self):
        loss, grads, _ = value_and_grad(lambda p: (torch.tensor(3.0), None), {})
        assert grads == {}
        assert loss.item() == 3.0

    def test_unused_param_gets_zero_gradient(self):
        params = {'used': torch.tensor([2.0]), 'unused': torch.tensor([1.0, 1.0])}
        _, grads, _ = value_and_grad(lambda p: ((p['used'] ** 2).sum(), None), params)
        assert torch.equal(grads['unused'], torch.zeros(2))

    def test_returns_aux(self):
        _, _, aux = value_and_grad(
            lambda p: ((p['w'] ** 2).sum(), {'extra': 1}), {'w': torch.ones(1)},
        )
        assert aux == {'extra': 1}


class TestUpdatePlayer:

    @pytest.fixture
    def player(self):
        opt = sgd(0.1)
        params = {'w': torch.tensor([1.0, -2.0])}
        return PlayerState(
            ModelState(params=params, buffers={'stat': torch.zeros(1)}),
            opt.init(params),
            RunningStat(value=3.0, count=1),
        )

    def test_applies_gradient_step(self, player):
        new = update_player(player, _quadratic, sgd(0.1), iteration=1)
        assert torch.allclose(new.model_state.params['w'], torch.tensor([0.8, -1.6]))

    def test_loss_folded_at_iteration(self, player):
        new = update_player(player, _quadratic, sgd(0.1), iteration=1)
        assert new.loss.value == pytest.approx((3.0 * 1 + 5.0) / 2)
        assert new.loss.count == 2

    def test_input_player_unchanged(self, player):
        update_player(player, _quadratic, sgd(0.1), iteration=1)
        assert torch.equal(player.model_state.params['w'], torch.tensor([1.0, -2.0]))
        assert player.loss.value == 3.0

    def test_buffers_kept_when_aux_is_none(self, player):
        new = update_player(player, _quadratic, sgd(0.1), iteration=0)
        assert new.model_state.buffers is player.model_state.buffers

    def test_buffers_replaced_by_aux(self, player):
        fresh = {'stat': torch.ones(1)}

        def loss_fn(params):
            return (params['w'] ** 2).sum(), fresh

        new = update_player(player, loss_fn, sgd(0.1), iteration=0)
        assert new.model_state.buffers is fresh

    def test_optimizer_state_advances(self, player):
        new = update_player(player, _quadratic, sgd(0.1), iteration=0)
        assert new.optimizer_state.count == 1
