import torch

from ..types import LayerFloat


def sigmoid(x: torch.Tensor | float) -> torch.Tensor:
    """Logistic function 1 / (1 + exp(-x)).

    torch.sigmoid never evaluates exp of a large positive number, so extreme inputs saturate to 0 or 1 instead of
    overflowing. Everywhere else it agrees with the naive formula. Python floats are promoted to float64 tensors.
    """
    return torch.sigmoid(torch.as_tensor(x, dtype=torch.float64))


def uniform(generator: torch.Generator,
            size: tuple[int, ...] = ()) -> torch.Tensor:
    """Draw float64 values from [0, 1) using the given generator.

    Parameters:
        generator: Randomness source. Every draw advances it, so call order matters for reproducibility.
        size: Shape of the output. The default () gives a 0-d tensor, i.e. a single draw.
    """
    return torch.rand(size, generator=generator, dtype=torch.float64)


def bernoulli(generator: torch.Generator,
              probabilities: LayerFloat | float) -> torch.Tensor:
    """Elementwise Bernoulli samples: 1 where a fresh uniform draw is below p, else 0.

    One uniform value is consumed per entry of probabilities, in index order. Output has the same shape as the input
    and float64 dtype, so samples can go straight back into the conditional probabilities.
    """
    probabilities = torch.as_tensor(probabilities, dtype=torch.float64)
    return (uniform(generator, tuple(probabilities.shape)) < probabilities).to(torch.float64)
