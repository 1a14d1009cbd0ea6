"""MNIST image loading via HuggingFace datasets."""

import numpy as np
import torch
from datasets import load_dataset

from ganloop.console import GLConsole


def load_mnist_images(name: str = 'ylecun/mnist', split: str = 'train',
                      limit: int | None = None) -> torch.Tensor:
    """Load MNIST digits as a float tensor ``(N, 1, 28, 28)`` scaled to [0, 1]."""
    console = GLConsole()
    console.print(f"[label]Loading dataset:[/label] [metric.value]{name}[/metric.value] ({split})")

    dataset = load_dataset(path=name, split=split)
    if limit is not None:
        dataset = dataset.select(range(min(limit, len(dataset))))
    pixels = np.stack([np.asarray(image, dtype=np.uint8) for image in dataset['image']])
    images = torch.from_numpy(pixels).float().div_(255.0).unsqueeze(1)

    console.print(f"[label]Loaded[/label] [metric.value]{images.shape[0]:,}[/metric.value] [detail]images[/detail]")
    return images
