"""This module contains functionalities for binary Restricted Boltzmann Machines.

This is a rather "old-school" model that can't really compete with modern generative models, but it can still be
instructive. Training uses k-step contrastive divergence on one example at a time, and sampling uses plain Gibbs
chains. Other training algorithms are possible, but haven't been implemented.
"""
from .model import DEFAULT_LEARNING_RATE, RBM
from .trainer import RBMTrainer
