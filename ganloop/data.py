"""Restartable batch sources for the loop engine."""

from __future__ import annotations

import math
from typing import Iterator

import torch

from .errors import ShapeMismatchError


class BatchedTensorSource:
    """Split a tensor into fixed-size batches along its first dimension.

    Iterating the source always starts from the first batch, so the same
    object can be handed to ``Loop.run`` for any number of epochs. With
    ``shuffle=True`` the order is reshuffled each pass from a generator
    seeded by ``seed`` and the pass number.

    A trailing partial batch is dropped unless ``drop_last=False``.
    """

    def __init__(
        self,
        data: torch.Tensor,
        batch_size: int,
        drop_last: bool = True,
        shuffle: bool = False,
        seed: int = 0,
    ):
        if not isinstance(data, torch.Tensor):
            raise TypeError(f"data must be a torch.Tensor, got {type(data).__name__}")
        if data.dim() < 1 or data.shape[0] == 0:
            raise ShapeMismatchError(f"cannot batch a tensor of shape {tuple(data.shape)}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if drop_last and data.shape[0] < batch_size:
            raise ShapeMismatchError(
                f"{data.shape[0]} samples cannot fill a single batch of {batch_size}"
            )
        self.data = data
        self.batch_size = batch_size
        self.drop_last = drop_last
        self.shuffle = shuffle
        self.seed = seed
        self._passes = 0

    def __len__(self) -> int:
        n = self.data.shape[0]
        if self.drop_last:
            return n // self.batch_size
        return math.ceil(n / self.batch_size)

    @property
    def sample_shape(self) -> tuple[int, ...]:
        return tuple(self.data.shape[1:])

    def __iter__(self) -> Iterator[torch.Tensor]:
        if self.shuffle:
            rng = torch.Generator().manual_seed(self.seed + self._passes)
            order = torch.randperm(self.data.shape[0], generator=rng)
        else:
            order = None
        self._passes += 1
        for i in range(len(self)):
            start = i * self.batch_size
            end = start + self.batch_size
            if order is None:
                yield self.data[start:end]
            else:
                yield self.data[order[start:end]]
