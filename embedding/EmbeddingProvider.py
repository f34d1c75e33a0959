# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-14
# Description: EmbeddingProvider
# -----------------------------------------------------------------------------
from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    text -> fixed-length float32 vector.

    Implementations raise ProviderFailureError for failed or timed-out calls
    and EmptyInputError for blank text.
    """

    model: str

    def embed(self, text: str) -> np.ndarray:
        ...
