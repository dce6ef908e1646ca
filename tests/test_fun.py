"""Tests for the numeric primitives: sigmoid, uniform and Bernoulli draws."""
import math
import warnings

import pytest
import torch

from cdrbm.common import bernoulli, sigmoid, uniform


class TestSigmoid:
    """Tests for the logistic function."""

    def test_zero(self):
        """sigmoid(0) is exactly one half."""
        assert sigmoid(0.0).item() == 0.5

    @pytest.mark.parametrize("x", [-5.0, -0.3, 0.7, 4.0])
    def test_matches_naive_formula(self, x):
        """Agrees with 1 / (1 + exp(-x)) in the ordinary range."""
        assert sigmoid(x).item() == pytest.approx(1.0 / (1.0 + math.exp(-x)), rel=1e-15)

    def test_extreme_inputs_do_not_overflow(self):
        """Very large magnitudes saturate without warnings or infinities."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = sigmoid(torch.tensor([-1e4, -800.0, 800.0, 1e4], dtype=torch.float64))
        assert torch.isfinite(result).all()
        assert result[0].item() == 0.0
        assert result[-1].item() == 1.0

    def test_returns_float64(self):
        """Python floats are promoted to float64 tensors."""
        assert sigmoid(1.5).dtype == torch.float64


class TestUniform:
    """Tests for uniform draws from an explicit generator."""

    def test_range_and_shape(self):
        """Values lie in [0, 1) with the requested shape."""
        generator = torch.Generator().manual_seed(0)
        draws = uniform(generator, (1000,))
        assert draws.shape == (1000,)
        assert draws.dtype == torch.float64
        assert (draws >= 0).all() and (draws < 1).all()

    def test_scalar_default(self):
        """Default size gives a single 0-d draw."""
        generator = torch.Generator().manual_seed(0)
        assert uniform(generator).ndim == 0

    def test_same_seed_same_values(self):
        """Two generators with the same seed give identical sequences."""
        first = uniform(torch.Generator().manual_seed(11), (20,))
        second = uniform(torch.Generator().manual_seed(11), (20,))
        assert torch.equal(first, second)


class TestBernoulli:
    """Tests for Bernoulli draws."""

    def test_certain_outcomes(self):
        """p=0 never fires and p=1 always fires."""
        generator = torch.Generator().manual_seed(3)
        assert bernoulli(generator, torch.zeros(500, dtype=torch.float64)).sum().item() == 0
        assert bernoulli(generator, torch.ones(500, dtype=torch.float64)).sum().item() == 500

    def test_threshold_against_uniform_draws(self):
        """A sample is 1 exactly where the matching uniform draw is below p."""
        probabilities = torch.tensor([0.1, 0.5, 0.9, 0.3], dtype=torch.float64)
        samples = bernoulli(torch.Generator().manual_seed(5), probabilities)
        draws = uniform(torch.Generator().manual_seed(5), (4,))
        assert torch.equal(samples, (draws < probabilities).to(torch.float64))

    def test_scalar_probability(self):
        """A float probability gives a single binary value."""
        sample = bernoulli(torch.Generator().manual_seed(1), 0.5)
        assert sample.ndim == 0
        assert sample.item() in (0.0, 1.0)

    def test_frequency(self):
        """Empirical frequency is close to p."""
        generator = torch.Generator().manual_seed(8)
        samples = bernoulli(generator, torch.full((20000,), 0.25, dtype=torch.float64))
        assert samples.mean().item() == pytest.approx(0.25, abs=0.02)
