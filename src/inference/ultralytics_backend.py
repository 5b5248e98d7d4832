"""
CPU inference backends built on Ultralytics YOLO.

The package is imported lazily so the rest of the project (and its tests)
runs without it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import numpy as np

from models.config import ClassifierConfig, DetectorConfig
from models.geometry import NormalizedRect
from models.observation import LabelScore, RecognizedObject
from .backend import InferenceModel
from .errors import EngineInitError, InferenceError


def _load_yolo(model_name: str) -> Any:
    try:
        from ultralytics import YOLO  # type: ignore
    except Exception as e:  # pragma: no cover
        raise EngineInitError(
            "Ultralytics is not installed. Install with `pip install ultralytics`."
        ) from e

    try:
        return YOLO(model_name)
    except Exception as e:
        raise EngineInitError(f"Failed to load model '{model_name}': {e}") from e


def _to_numpy(value: Any) -> np.ndarray:
    return value.cpu().numpy() if hasattr(value, "cpu") else np.asarray(value)


def _confidence(value: Any) -> float:
    # float32 scores can land a hair outside [0, 1]
    return min(1.0, max(0.0, float(value)))


class UltralyticsClassifier(InferenceModel):
    """Whole-image classifier. Produces one RecognizedObject with no bounds."""

    def __init__(self, cfg: ClassifierConfig, model: Optional[Any] = None):
        self.cfg = cfg
        self._model = model if model is not None else _load_yolo(cfg.model)
        logging.info(f"Classifier ready: model={cfg.model}, top_k={cfg.top_k}")

    def infer(self, frame: np.ndarray) -> List[RecognizedObject]:
        try:
            results = self._model.predict(source=frame, verbose=False)
        except Exception as e:
            raise InferenceError(f"Classification failed: {e}") from e

        if not results:
            return []

        r0 = results[0]
        probs = getattr(r0, "probs", None)
        if probs is None:
            return []

        names: Dict[int, str] = getattr(r0, "names", None) or {}
        scores = _to_numpy(probs.data).ravel()
        if scores.size == 0:
            return []

        order = np.argsort(scores)[::-1][: max(1, self.cfg.top_k)]
        labels = [
            LabelScore(identifier=names.get(int(i), str(int(i))), confidence=_confidence(scores[i]))
            for i in order
        ]
        return [RecognizedObject(labels=labels)]


class UltralyticsDetector(InferenceModel):
    """Object detector. Produces one RecognizedObject per box, top-left origin."""

    def __init__(self, cfg: DetectorConfig, model: Optional[Any] = None):
        self.cfg = cfg
        self._model = model if model is not None else _load_yolo(cfg.model)
        logging.info(
            f"Detector ready: model={cfg.model}, conf={cfg.conf_threshold}, iou={cfg.iou_threshold}"
        )

    def infer(self, frame: np.ndarray) -> List[RecognizedObject]:
        try:
            results = self._model.predict(
                source=frame,
                conf=self.cfg.conf_threshold,
                iou=self.cfg.iou_threshold,
                classes=list(self.cfg.classes) if self.cfg.classes is not None else None,
                verbose=False,
            )
        except Exception as e:
            raise InferenceError(f"Detection failed: {e}") from e

        if not results:
            return []

        r0 = results[0]
        names: Dict[int, str] = getattr(r0, "names", None) or {}
        boxes = getattr(r0, "boxes", None)
        if boxes is None:
            return []

        xyxyn = _to_numpy(boxes.xyxyn)
        conf = _to_numpy(boxes.conf)
        cls = _to_numpy(boxes.cls)

        out: List[RecognizedObject] = []
        for (x1, y1, x2, y2), c, k in zip(xyxyn, conf, cls):
            class_id = int(k)
            class_name = (
                (self.cfg.class_name_overrides or {}).get(class_id)
                or names.get(class_id)
                or str(class_id)
            )
            out.append(
                RecognizedObject(
                    labels=[LabelScore(identifier=class_name, confidence=_confidence(c))],
                    bounds=NormalizedRect.from_xyxy(float(x1), float(y1), float(x2), float(y2)),
                )
            )

        return out
