"""
Inference engines for the classifier and detector variants.
"""

from __future__ import annotations

import logging
from typing import Optional

from models.config import InferenceConfig
from models.observation import ModelVariant
from .backend import InferenceModel
from .errors import EngineInitError, InferenceEngineError, InferenceError
from .ultralytics_backend import UltralyticsClassifier, UltralyticsDetector


def create_model(variant: ModelVariant, cfg: Optional[InferenceConfig] = None) -> InferenceModel:
    """
    Create the inference model for a variant.

    Raises:
        EngineInitError: If the model cannot be created. Logged once here;
            callers treat it as terminal for the variant.
    """
    cfg = cfg or InferenceConfig(variant=variant)
    try:
        if variant == ModelVariant.CLASSIFIER:
            return UltralyticsClassifier(cfg.classifier)
        if variant == ModelVariant.DETECTOR:
            return UltralyticsDetector(cfg.detector)
        raise EngineInitError(f"No inference engine for variant '{variant}'")
    except EngineInitError as e:
        logging.error(f"Inference engine initialization failed for {variant.value}: {e}")
        raise


__all__ = [
    "InferenceModel",
    "InferenceEngineError",
    "EngineInitError",
    "InferenceError",
    "UltralyticsClassifier",
    "UltralyticsDetector",
    "create_model",
]
