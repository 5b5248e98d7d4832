"""
Tests for typed models: geometry, observations, frames and config.
"""

import time

import numpy as np
import pytest

from models.frame import FrameData
from models.geometry import NormalizedRect, Origin, PixelRect, normalized_to_pixel
from models.observation import LabelScore, ModelVariant, Observation, RecognizedObject
from models.config import Config, InferenceConfig


class TestNormalizedToPixel:
    def test_vga_scenario(self):
        rect = normalized_to_pixel(NormalizedRect(0.25, 0.5, 0.1, 0.2), 640, 480)
        assert rect.x == pytest.approx(160)
        assert rect.y == pytest.approx(240)
        assert rect.width == pytest.approx(64)
        assert rect.height == pytest.approx(96)
        assert rect.as_int_tuple() == (160, 240, 64, 96)

    def test_bottom_left_origin_is_flipped(self):
        box = NormalizedRect(0.25, 0.5, 0.1, 0.2, origin=Origin.BOTTOM_LEFT)
        rect = normalized_to_pixel(box, 640, 480)
        # Top edge sits at 1 - 0.5 - 0.2 = 0.3 of the height
        assert rect.x == pytest.approx(160)
        assert rect.y == pytest.approx(144)
        assert rect.height == pytest.approx(96)

    def test_bottom_left_full_frame(self):
        box = NormalizedRect(0.0, 0.0, 1.0, 1.0, origin=Origin.BOTTOM_LEFT)
        assert normalized_to_pixel(box, 320, 240).as_tuple() == (0.0, 0.0, 320.0, 240.0)

    def test_bottom_left_box_at_bottom_maps_to_bottom_rows(self):
        box = NormalizedRect(0.0, 0.0, 0.5, 0.25, origin=Origin.BOTTOM_LEFT)
        rect = normalized_to_pixel(box, 100, 100)
        assert rect.y == pytest.approx(75)
        assert rect.y2 == pytest.approx(100)

    def test_result_stays_inside_frame(self):
        values = np.linspace(0.0, 1.0, 7)
        for width, height in [(1, 1), (640, 480), (1920, 1080), (7, 3)]:
            for x in values:
                for y in values:
                    for w in values:
                        for h in values:
                            for origin in Origin:
                                rect = normalized_to_pixel(
                                    NormalizedRect(x, y, w, h, origin=origin), width, height
                                )
                                assert 0 <= rect.x <= width
                                assert 0 <= rect.y <= height
                                assert rect.width >= 0 and rect.height >= 0
                                assert rect.x2 <= width + 1e-9
                                assert rect.y2 <= height + 1e-9

    def test_rejects_empty_frame(self):
        with pytest.raises(ValueError):
            normalized_to_pixel(NormalizedRect(0, 0, 1, 1), 0, 480)

    def test_from_xyxy(self):
        rect = NormalizedRect.from_xyxy(0.1, 0.2, 0.5, 0.6)
        assert rect.as_tuple() == pytest.approx((0.1, 0.2, 0.4, 0.4))
        assert rect.origin == Origin.TOP_LEFT


class TestPixelRect:
    def test_properties(self):
        rect = PixelRect(x=100, y=100, width=100, height=50)
        assert rect.x2 == 200
        assert rect.y2 == 150
        assert rect.center == (150.0, 125.0)
        assert rect.area == 5000
        assert rect.as_xyxy() == (100, 100, 200, 150)


class TestObservation:
    def test_top_label(self):
        obj = RecognizedObject(labels=[LabelScore("dog", 0.4), LabelScore("cat", 0.9)])
        assert obj.top_label() == LabelScore("cat", 0.9)

    def test_top_label_empty(self):
        assert RecognizedObject(labels=[]).top_label() is None

    def test_confidence_range(self):
        with pytest.raises(ValueError):
            LabelScore("cat", 1.2)
        with pytest.raises(ValueError):
            Observation(label="cat", confidence=-0.1)

    def test_describe_and_dict(self):
        obs = Observation(
            label="person",
            confidence=0.8,
            bounds=PixelRect(10, 20, 30, 40),
            frame_index=3,
        )
        assert obs.describe() == "Object: person, Confidence: 0.800, Bounds: (10, 20, 30, 40)"
        d = obs.to_dict()
        assert d["label"] == "person"
        assert d["bounds"] == {"x": 10, "y": 20, "width": 30, "height": 40}

    def test_describe_without_bounds(self):
        obs = Observation(label="banana", confidence=0.5)
        assert obs.describe() == "Object: banana, Confidence: 0.500"
        assert "bounds" not in obs.to_dict()


class TestModelVariant:
    def test_parse(self):
        assert ModelVariant.parse("Classifier") is ModelVariant.CLASSIFIER
        assert ModelVariant.parse("detector") is ModelVariant.DETECTOR

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="classifier, detector"):
            ModelVariant.parse("yolov3")


class TestFrameData:
    def test_from_numpy(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        fd = FrameData.from_numpy(frame, timestamp=time.time(), frame_index=4, source="cam")
        assert fd.size == (640, 480)
        assert fd.frame_index == 4

    def test_rejects_empty_dimensions(self):
        with pytest.raises(ValueError):
            FrameData(frame=np.zeros((0, 0, 3)), width=0, height=0, timestamp=0.0)


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.inference.variant is ModelVariant.DETECTOR
        assert config.camera.resolution == [640, 480]
        assert config.reporting.sink == "log"

    def test_from_dict(self, valid_config):
        config = Config.from_dict(valid_config)
        assert config.inference.variant is ModelVariant.CLASSIFIER
        assert config.inference.classifier.top_k == 3
        assert config.inference.detector.conf_threshold == 0.3
        assert config.pipeline.max_consecutive_failures == 5

    def test_to_dict_round_trip(self, valid_config):
        config = Config.from_dict(valid_config)
        again = Config.from_dict(config.to_dict())
        assert again == config

    def test_inference_config_missing_sections(self):
        cfg = InferenceConfig.from_dict({"variant": "detector", "classifier": None})
        assert cfg.classifier.model == "yolov8n-cls.pt"
