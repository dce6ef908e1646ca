from .model import RBM
from ..common import TrainerBase, as_training_set, uniform
from ..types import ScalarFloat, TrainingSetLike, VisibleFloat


class RBMTrainer(TrainerBase[RBM]):
    def __init__(self,
                 model: RBM,
                 training_set: TrainingSetLike,
                 n_iterations: int,
                 learning_rate: float | None = None,
                 **kwargs):
        """Trainer for Binary (!) Restricted Boltzmann Machines.

        Each iteration picks one training vector uniformly at random *with replacement* (no epochs, no shuffling) and
        applies one contrastive divergence step to it. The index draw uses the model's own generator, so a seeded model
        gives the exact same run every time.

        Parameters:
            model: The RBM to train. Modified in place.
            training_set: Non-empty collection of binary vectors of length model.n_visible.
            n_iterations: Number of gradient steps.
            learning_rate: If given, overrides the model's learning rate for this run.
            kwargs: See TrainerBase.
        """
        # validate data before the base class opens any TensorBoard writer
        training_set = as_training_set(training_set, model.n_visible)
        super().__init__(model, n_iterations, **kwargs)
        self.training_set = training_set
        self.learning_rate = learning_rate

    def next_example(self) -> VisibleFloat:
        n_examples = self.training_set.shape[0]
        index = int(uniform(self.model.generator).item() * n_examples)
        return self.training_set[index]

    def core_step(self,
                  example: VisibleFloat) -> dict[str, ScalarFloat]:
        """RBM training core step: both phases and the parameter update happen inside the model's gradient_step."""
        return self.model.gradient_step(example, learning_rate=self.learning_rate)
