"""
Inference error taxonomy.

EngineInitError is terminal for the selected variant. InferenceError
covers a single frame; the frame is dropped and the stream continues.
"""


class InferenceEngineError(Exception):
    """Base class for inference engine failures."""


class EngineInitError(InferenceEngineError):
    """The model for a variant could not be created or loaded."""


class InferenceError(InferenceEngineError):
    """Inference failed for one frame."""
