import numpy as np
import torch

from ..types import TrainingSetFloat, TrainingSetLike, VectorLike


def as_binary_vector(vector: VectorLike,
                     size: int,
                     name: str = "vector") -> torch.Tensor:
    """Convert input to a 1D float64 tensor and make sure it is a valid binary vector of the given length.

    Parameters:
        vector: Anything torch.as_tensor understands (list, numpy array, tensor).
        size: Required number of entries.
        name: Used in error messages, e.g. 'visible' or 'hidden'.

    Raises:
        ValueError: If the input is not 1D, has the wrong length, or contains anything other than 0 and 1.
    """
    tensor = torch.as_tensor(vector, dtype=torch.float64)
    if tensor.ndim != 1:
        raise ValueError(f"{name} vector must be one-dimensional, got shape {tuple(tensor.shape)}")
    if tensor.shape[0] != size:
        raise ValueError(f"{name} vector must have length {size}, got {tensor.shape[0]}")
    if not ((tensor == 0) | (tensor == 1)).all():
        raise ValueError(f"{name} vector must only contain 0s and 1s")
    return tensor


def as_training_set(training_set: TrainingSetLike,
                    size: int) -> TrainingSetFloat:
    """Stack a collection of binary visible vectors into an n x size tensor.

    Accepts 2D tensors/arrays as well as any iterable of vectors. Every row is checked with as_binary_vector.

    Raises:
        ValueError: If the collection is empty or any row is invalid.
    """
    if isinstance(training_set, (torch.Tensor, np.ndarray)) and training_set.ndim != 2:
        raise ValueError(f"training set must be two-dimensional, got shape {tuple(training_set.shape)}")
    rows = list(training_set)
    if not rows:
        raise ValueError("training set must contain at least one vector")
    return torch.stack([as_binary_vector(row, size, name=f"training vector {ind}") for ind, row in enumerate(rows)])


def check_positive(value: int,
                   name: str,
                   minimum: int = 1) -> int:
    """Validate integer configuration values such as layer sizes or iteration counts."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return int(value)


def check_index(index: int,
                size: int,
                name: str) -> int:
    """Validate a unit index into a layer of the given size."""
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise ValueError(f"{name} index must be an integer, got {index!r}")
    if not 0 <= index < size:
        raise ValueError(f"{name} index {index} out of range for {size} {name} units")
    return int(index)
