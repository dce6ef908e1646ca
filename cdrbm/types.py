"""This module uses jaxtyping to add various more specific tensor types."""
from collections.abc import Sequence
from typing import TypeAlias, Union

import numpy as np
from jaxtyping import Float
from torch import Tensor


VisibleFloat: TypeAlias = Float[Tensor, "d"]
HiddenFloat: TypeAlias = Float[Tensor, "m"]
LayerFloat: TypeAlias = Union[VisibleFloat, HiddenFloat]

VisibleChainFloat: TypeAlias = Float[Tensor, "k d"]
HiddenChainFloat: TypeAlias = Float[Tensor, "k m"]

TrainingSetFloat: TypeAlias = Float[Tensor, "n d"]
WeightsFloat: TypeAlias = Float[Tensor, "d m"]

ScalarFloat: TypeAlias = Float[Tensor, ""]

# what callers may hand in as a binary vector / a collection of them
VectorLike = Union[Tensor, np.ndarray, Sequence[int], Sequence[float]]
TrainingSetLike = Union[Tensor, np.ndarray, Sequence[VectorLike]]
