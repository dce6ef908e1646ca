"""This module contains functionalities that are reused by the models in this package.

This mostly concerns the "Trainer" base class on one hand, and the numeric primitives (sigmoid, uniform and Bernoulli
draws) plus input validation helpers on the other.
"""
from .fun import bernoulli, sigmoid, uniform
from .training import TrainerBase
from .utils import as_binary_vector, as_training_set, check_index, check_positive
