import torch
from torch import nn

from ..common import as_binary_vector, bernoulli, check_index, check_positive, sigmoid
from ..types import (HiddenChainFloat, HiddenFloat, ScalarFloat, TrainingSetLike, VectorLike, VisibleChainFloat,
                     VisibleFloat)


DEFAULT_LEARNING_RATE = 0.05


class RBM(nn.Module):
    def __init__(self,
                 n_visible: int,
                 n_hidden: int,
                 chain_length: int,
                 generator: torch.Generator | int,
                 learning_rate: float = DEFAULT_LEARNING_RATE):
        """Binary RBM trained one example at a time with contrastive divergence.

        All parameters start at zero and are only ever changed by gradient_step. Everything else (probabilities,
        sampling, generation, energies) only reads them.

        Parameters:
            n_visible: Number of visible units d. Data vectors must have this length.
            n_hidden: Number of hidden units m.
            chain_length: Number of Gibbs steps k in each contrastive divergence chain.
            generator: Randomness source used by every sampling operation. Pass a torch.Generator to share one you
                       control, or an integer to create a private generator seeded with it. There is no default; runs
                       are reproducible given the seed.
            learning_rate: Step size for gradient_step.
        """
        super().__init__()
        self.n_visible = check_positive(n_visible, "n_visible")
        self.n_hidden = check_positive(n_hidden, "n_hidden")
        self.chain_length = check_positive(chain_length, "chain_length")
        if learning_rate < 0:
            raise ValueError(f"learning_rate must be non-negative, got {learning_rate}")
        self.learning_rate = learning_rate

        if isinstance(generator, int) and not isinstance(generator, bool):
            seed = generator
            generator = torch.Generator()
            generator.manual_seed(seed)
        elif not isinstance(generator, torch.Generator):
            raise ValueError(f"generator must be a torch.Generator or an integer seed, got {generator!r}")
        self.generator = generator

        self.w_v_to_h = nn.Parameter(torch.zeros(self.n_visible, self.n_hidden, dtype=torch.float64),
                                     requires_grad=False)
        self.bias_v = nn.Parameter(torch.zeros(self.n_visible, dtype=torch.float64), requires_grad=False)
        self.bias_h = nn.Parameter(torch.zeros(self.n_hidden, dtype=torch.float64), requires_grad=False)

    def check_visible(self,
                      visible: VectorLike) -> VisibleFloat:
        return as_binary_vector(visible, self.n_visible, name="visible")

    def check_hidden(self,
                     hidden: VectorLike) -> HiddenFloat:
        return as_binary_vector(hidden, self.n_hidden, name="hidden")

    def _hidden_p(self,
                  visible: VisibleFloat) -> HiddenFloat:
        return sigmoid(self.bias_h + visible @ self.w_v_to_h)

    def _visible_p(self,
                   hidden: HiddenFloat) -> VisibleFloat:
        return sigmoid(self.bias_v + self.w_v_to_h @ hidden)

    @torch.no_grad()
    def to_hidden_p(self,
                    visible: VectorLike) -> HiddenFloat:
        """Get conditional probabilities p(h_j=1|v) for all hidden units."""
        return self._hidden_p(self.check_visible(visible))

    @torch.no_grad()
    def to_visible_p(self,
                     hidden: VectorLike) -> VisibleFloat:
        """Get conditional probabilities p(v_i=1|h) for all visible units."""
        return self._visible_p(self.check_hidden(hidden))

    @torch.no_grad()
    def hidden_probability(self,
                           j: int,
                           visible: VectorLike) -> float:
        """p(h_j=1|v) = sigmoid(b_j + sum_i W_ij v_i) for a single hidden unit."""
        j = check_index(j, self.n_hidden, "hidden")
        visible = self.check_visible(visible)
        return sigmoid(self.bias_h[j] + visible @ self.w_v_to_h[:, j]).item()

    @torch.no_grad()
    def visible_probability(self,
                            i: int,
                            hidden: VectorLike) -> float:
        """p(v_i=1|h) = sigmoid(a_i + sum_j W_ij h_j) for a single visible unit."""
        i = check_index(i, self.n_visible, "visible")
        hidden = self.check_hidden(hidden)
        return sigmoid(self.bias_v[i] + self.w_v_to_h[i] @ hidden).item()

    def sample_hidden_unit(self,
                           j: int,
                           visible: VectorLike) -> int:
        return int(bernoulli(self.generator, self.hidden_probability(j, visible)))

    def sample_visible_unit(self,
                            i: int,
                            hidden: VectorLike) -> int:
        return int(bernoulli(self.generator, self.visible_probability(i, hidden)))

    @torch.no_grad()
    def sample_hidden_layer(self,
                            visible: VectorLike) -> HiddenFloat:
        """Sample all hidden units. They are independent given v, so this is one Bernoulli draw per unit."""
        return bernoulli(self.generator, self.to_hidden_p(visible))

    @torch.no_grad()
    def sample_visible_layer(self,
                             hidden: VectorLike) -> VisibleFloat:
        """Sample all visible units. They are independent given h, so this is one Bernoulli draw per unit."""
        return bernoulli(self.generator, self.to_visible_p(hidden))

    def hidden_unit_expectation(self,
                                j: int,
                                visible: VectorLike) -> float:
        """E[h_j|v], which for binary units is just p(h_j=1|v)."""
        return self.hidden_probability(j, visible)

    def hidden_layer_expectation(self,
                                 visible: VectorLike) -> HiddenFloat:
        """E[h|v] for all hidden units, i.e. the positive phase statistics."""
        return self.to_hidden_p(visible)

    @torch.no_grad()
    def sample_model(self,
                     visible: VectorLike) -> tuple[VisibleChainFloat, HiddenChainFloat]:
        """Run a fresh contrastive divergence chain starting at a data point.

        The first hidden sample (drawn from the data) only serves to get the chain going and is not part of the
        returned trajectory. From there, each of the chain_length steps samples v from the previous h, then h from
        that v:
            h' ~ p(h|data), v_0 ~ p(v|h'), h_0 ~ p(h|v_0), v_1 ~ p(v|h_0), h_1 ~ p(h|v_1), ...

        Parameters:
            visible: The data point to start the chain from.

        Returns:
            Tuple of k x d visible samples and k x m hidden samples, where row t holds step t of the chain.
        """
        visible = self.check_visible(visible)
        hidden = bernoulli(self.generator, self._hidden_p(visible))
        visible_chain = []
        hidden_chain = []
        for _ in range(self.chain_length):
            visible = bernoulli(self.generator, self._visible_p(hidden))
            hidden = bernoulli(self.generator, self._hidden_p(visible))
            visible_chain.append(visible)
            hidden_chain.append(hidden)
        return torch.stack(visible_chain), torch.stack(hidden_chain)

    @torch.no_grad()
    def gradient_step(self,
                      visible: VectorLike,
                      learning_rate: float | None = None) -> dict[str, ScalarFloat]:
        """One contrastive divergence update on a single data point.

        The positive phase uses the exact hidden expectations given the data. The negative phase averages over the
        whole trajectory returned by sample_model (not just its last step). All three updates are computed before
        any parameter is modified, so the model is never observable in a half-updated state.

        Parameters:
            visible: The data point.
            learning_rate: Overrides the model's learning rate for this step only.

        Returns:
            Dictionary with the squared reconstruction error of the first chain sample, for monitoring.
        """
        visible = self.check_visible(visible)
        if learning_rate is None:
            learning_rate = self.learning_rate
        elif learning_rate < 0:
            raise ValueError(f"learning_rate must be non-negative, got {learning_rate}")

        hidden_data = self._hidden_p(visible)
        visible_samples, hidden_samples = self.sample_model(visible)

        visible_model = visible_samples.mean(dim=0)
        hidden_model = hidden_samples.mean(dim=0)
        pairs_model = visible_samples.T @ hidden_samples / self.chain_length

        delta_v = learning_rate * (visible - visible_model)
        delta_h = learning_rate * (hidden_data - hidden_model)
        delta_w = learning_rate * (torch.outer(visible, hidden_data) - pairs_model)

        self.bias_v.add_(delta_v)
        self.bias_h.add_(delta_h)
        self.w_v_to_h.add_(delta_w)
        return {"reconstruction_error": ((visible - visible_samples[0])**2).mean()}

    def train(self,
              training_set: TrainingSetLike | bool | None = None,
              n_iterations: int | None = None,
              verbose: bool = False,
              **kwargs):
        """Train on a collection of binary vectors, picking one uniformly at random (with replacement) per iteration.

        Calling this with no arguments or a single bool keeps nn.Module's meaning (switching training mode), so the
        usual module machinery still works.

        Parameters:
            training_set: Non-empty collection of visible vectors.
            n_iterations: How many gradient steps to take.
            verbose: If True, print progress every 1000 iterations.
            kwargs: Passed on to RBMTrainer, e.g. use_tqdm or tensorboard_logdir.
        """
        no_data = training_set is None or isinstance(training_set, bool)
        if n_iterations is None:
            if no_data:
                return super().train(True if training_set is None else training_set)
            raise ValueError("n_iterations must be given when training on data")
        if no_data:
            raise ValueError(f"training_set must be a collection of visible vectors, got {training_set!r}")
        from .trainer import RBMTrainer

        RBMTrainer(self, training_set, n_iterations, verbose=verbose, **kwargs).train_model()

    @torch.no_grad()
    def generate(self,
                 n_steps: int,
                 return_probs: bool = False,
                 return_chain: bool = False) -> VisibleFloat | tuple[VisibleFloat, list[VisibleFloat]]:
        """Create a sample from the RBM distribution via a Markov chain from a random start.

        The chain starts from independent Bernoulli(0.5) visible units. One step means sampling from p(h|v) *and* then
        p(v|h). With zero steps the random start is returned as is.

        Parameters:
            n_steps: Markov Chain length. There is no convergence check, so choosing this is up to you.
            return_probs: If True, we return the visible probabilities for the last p(v|h) instead of sampling. This
                          gives smoother, less noisy samples. Needs at least one step.
            return_chain: If True, we also return the entire chain of visible samples as a list, starting with the
                          random start. Note that even if return_probs is True, this will contain the *binary samples*
                          for the last step.
        """
        n_steps = check_positive(n_steps, "n_steps", minimum=0)
        if return_probs and not n_steps:
            raise ValueError("return_probs needs at least one Gibbs step")

        visible = bernoulli(self.generator, torch.full((self.n_visible,), 0.5, dtype=torch.float64))
        full_chain = [visible]
        for _ in range(n_steps):
            hidden = bernoulli(self.generator, self._hidden_p(visible))
            visible = bernoulli(self.generator, self._visible_p(hidden))
            full_chain.append(visible)

        if return_probs:
            visible = self._visible_p(hidden)
        if return_chain:
            return visible, full_chain
        return visible

    @torch.no_grad()
    def energy(self,
               visible: VectorLike,
               hidden: VectorLike) -> ScalarFloat:
        """Our friendly RBM Energy function E(v, h) = -(a.v + b.h + v^T W h)."""
        visible = self.check_visible(visible)
        hidden = self.check_hidden(hidden)
        return -(visible @ self.bias_v + hidden @ self.bias_h + visible @ self.w_v_to_h @ hidden)

    @torch.no_grad()
    def free_energy(self,
                    visible: VectorLike) -> ScalarFloat:
        """F(v) = -log sum_h exp(-E(v, h)), with the hidden units summed out analytically."""
        visible = self.check_visible(visible)
        return -(visible @ self.bias_v) - nn.functional.softplus(self.bias_h + visible @ self.w_v_to_h).sum()

    @torch.no_grad()
    def reconstruction_error(self,
                             visible: VectorLike) -> ScalarFloat:
        """Mean squared difference between v and its deterministic mean-field reconstruction p(v|p(h|v))."""
        visible = self.check_visible(visible)
        return ((visible - self._visible_p(self._hidden_p(visible)))**2).mean()
