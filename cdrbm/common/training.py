from __future__ import annotations

from collections import defaultdict
from time import perf_counter
from typing import Generic, TypeVar

import numpy as np
import torch
from torch import nn
from torch.utils.tensorboard import SummaryWriter
from tqdm.auto import tqdm

from .utils import check_positive
from ..types import ScalarFloat, VisibleFloat


Model = TypeVar("Model", bound=nn.Module)


class TrainerBase(Generic[Model]):
    def __init__(self,
                 model: Model,
                 n_iterations: int,
                 report_every: int = 1000,
                 verbose: bool = True,
                 use_tqdm: bool = False,
                 tensorboard_logdir: str | None = None):
        """Base class for training models one example at a time.

        Any Trainer for a specific kind of model should inherit from this and implement the next_example and core_step
        functions. There are no epochs: training runs for a fixed number of single-example updates.

        Parameters:
            model: The model to train.
            n_iterations: Number of updates to run. Training always runs for exactly this many; there is no convergence
                          check or early stopping.
            report_every: Metrics are averaged over windows of this many iterations. If verbose, each window produces
                          one line of output.
            verbose: If True, report on training progress throughout.
            use_tqdm: If True, and verbose is also True, show a progress bar.
            tensorboard_logdir: If given, will log the windowed training metrics to the specified directory for
                                visualization with TensorBoard. Pass None to disable logging.
        """
        self.model = model
        self.n_iterations = check_positive(n_iterations, "n_iterations")
        self.report_every = check_positive(report_every, "report_every")
        self.verbose = verbose
        self.use_tqdm = use_tqdm

        if tensorboard_logdir is not None:
            self.writer = SummaryWriter(tensorboard_logdir)
        else:
            self.writer = None

    def train_model(self) -> defaultdict[str, np.ndarray]:
        """The main training loop + housekeeping.

        Returns:
            Dictionary mapping each metric name to a numpy array with one entry per report window. If n_iterations is
            not a multiple of report_every, the last entry averages over the incomplete final window.
        """
        if self.verbose:
            print(f"Running {self.n_iterations} training iterations.")
        start_time = perf_counter()

        full_metrics = defaultdict(list)
        window_metrics = defaultdict(list)
        try:
            for iteration_ind in tqdm(iterable=range(self.n_iterations), desc="Training", leave=False,
                                      disable=not self.use_tqdm or not self.verbose):
                step_metrics = self.train_step(self.next_example())
                for key in step_metrics:
                    window_metrics[key].append(step_metrics[key].item())

                if not (iteration_ind + 1) % self.report_every:
                    self.finish_window(full_metrics, window_metrics, iteration_ind)
                    window_metrics = defaultdict(list)

            if window_metrics:
                self.finish_window(full_metrics, window_metrics, self.n_iterations - 1, report=False)
        finally:
            if self.writer is not None:
                self.writer.close()

        if self.verbose:
            print(f"Time taken: {perf_counter() - start_time:.4g} seconds")
        for key in full_metrics:
            full_metrics[key] = np.array(full_metrics[key])
        return full_metrics

    def finish_window(self,
                      full_run_metrics: dict[str, list[float]],
                      window_metrics: dict[str, list[float]],
                      iteration_ind: int,
                      report: bool = True):
        """Housekeeping after each report window.

        Averages the window, stores the result in full_run_metrics (modified in-place), prints a progress line and
        optionally writes TensorBoard summaries.

        Parameters:
            full_run_metrics: Should be the dictionary created at the start of train_model.
            window_metrics: Per-iteration metrics collected since the last window was finished.
            iteration_ind: Index of the last iteration in the window.
            report: If False, skip the progress line (used for a trailing incomplete window).
        """
        averaged = {key: float(np.mean(values)) for key, values in window_metrics.items()}
        for key, value in averaged.items():
            full_run_metrics[key].append(value)
            if self.writer is not None:
                self.writer.add_scalar(key, value, iteration_ind + 1)

        if self.verbose and report:
            summary = " | ".join(f"{key}: {value:.6g}" for key, value in averaged.items())
            print(f"Training iteration: {iteration_ind + 1} | {summary}")
        if self.writer is not None:
            self.writer.flush()

    @torch.no_grad()
    def train_step(self,
                   example: VisibleFloat) -> dict[str, ScalarFloat]:
        """Standard training step. The core step is expected to apply the parameter update itself."""
        return self.core_step(example)

    def next_example(self) -> VisibleFloat:
        """Pick the training example for the next step. Not implemented as it is model-dependent."""
        raise NotImplementedError

    def core_step(self,
                  example: VisibleFloat) -> dict[str, ScalarFloat]:
        """Main logic for one update. Not implemented as it is model-dependent.

        Generally this function should:
        - Compute whatever statistics the learning rule needs
        - Update the model parameters
        - Return a dictionary mapping names to scalar metrics for monitoring

        Parameters:
            example: One training example.
        """
        raise NotImplementedError
