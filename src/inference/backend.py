"""
Inference backend interface.

Backends return RecognizedObjects in normalized coordinates; the
dispatcher maps them to the frame's pixel space.
"""

from __future__ import annotations

from typing import List, Protocol

import numpy as np

from models.observation import RecognizedObject


class InferenceModel(Protocol):
    def infer(self, frame: np.ndarray) -> List[RecognizedObject]:
        ...
