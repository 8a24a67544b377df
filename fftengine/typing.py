from __future__ import annotations

from typing import Any, Sequence, TypeAlias, Union

import numpy as np
import numpy.typing as npt

NDArrayFloat: TypeAlias = npt.NDArray[np.float64]
NDArrayComplex: TypeAlias = npt.NDArray[np.complexfloating[Any, Any]]
NDArrayInt: TypeAlias = npt.NDArray[np.integer[Any]]

# Anything numpy.asarray turns into a 1-D float64 buffer.
SignalLike: TypeAlias = Union[Sequence[float], npt.NDArray[Any]]
