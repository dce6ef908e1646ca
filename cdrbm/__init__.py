"""This module contains a small library for binary Restricted Boltzmann Machines.

Models are trained one example at a time with k-step contrastive divergence and sampled from with Gibbs chains. As in
larger generative model libraries, there is a generic training loop in common and the model-specific parts (how to
pick an example and how to update on it) live next to the model.

Loading datasets, storing parameters and plotting samples are left to the caller; everything here works on plain
binary vectors.
"""
from .rbm import RBM, RBMTrainer
