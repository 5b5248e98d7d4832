"""
VisionHelper: stream camera frames through a classifier or detector and
report what it recognizes.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file
    --variant: Override inference.variant (classifier or detector)
    --max-frames: Stop after this many frames
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import yaml

from inference import EngineInitError, create_model
from models.config import Config
from models.observation import ModelVariant
from ops.logging import setup_logging
from pipeline.dispatcher import InferenceDispatcher
from pipeline.engine import create_engine_from_config
from reporting import AsyncReporter, create_reporter


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        config_dir = os.path.dirname(config_path)
        base_path = os.path.join(config_dir, "default.yaml")
        local_overrides_path = os.path.join(config_dir, "config.yaml")

        merged: Dict[str, Any] = _read_yaml(base_path) if os.path.exists(base_path) else {}
        if os.path.exists(local_overrides_path):
            merged = _deep_merge(merged, _read_yaml(local_overrides_path))

        if os.path.exists(config_path) and os.path.abspath(config_path) not in (
            os.path.abspath(local_overrides_path),
            os.path.abspath(base_path),
        ):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'inference', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    camera = config.get('camera') or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    if not isinstance(camera['device_id'], (int, str)) or isinstance(camera['device_id'], bool):
        return False, "camera.device_id must be an integer (index) or string (URL/path)"
    if isinstance(camera['device_id'], int) and camera['device_id'] < 0:
        return False, "camera.device_id integer must be non-negative"

    resolution = camera.get('resolution')
    if not isinstance(resolution, list) or len(resolution) != 2:
        return False, "camera.resolution must be a list of [width, height]"
    if not all(isinstance(x, int) and x > 0 for x in resolution):
        return False, "camera.resolution values must be positive integers"

    fps = camera.get('fps', 30)
    if not isinstance(fps, int) or fps <= 0:
        return False, "camera.fps must be a positive integer"

    inference = config.get('inference') or {}
    try:
        ModelVariant.parse(inference.get('variant', 'detector'))
    except ValueError:
        return False, "inference.variant must be one of: classifier, detector"

    classifier = inference.get('classifier') or {}
    if 'model' in classifier and (not isinstance(classifier['model'], str) or not classifier['model']):
        return False, "inference.classifier.model must be a non-empty string"
    if 'top_k' in classifier and (not isinstance(classifier['top_k'], int) or classifier['top_k'] <= 0):
        return False, "inference.classifier.top_k must be a positive integer"

    detector = inference.get('detector') or {}
    if 'model' in detector and (not isinstance(detector['model'], str) or not detector['model']):
        return False, "inference.detector.model must be a non-empty string"
    for key in ('conf_threshold', 'iou_threshold'):
        if key in detector:
            value = detector[key]
            if not isinstance(value, (int, float)) or not (0 <= value <= 1):
                return False, f"inference.detector.{key} must be a number between 0 and 1"

    pipeline = config.get('pipeline') or {}
    if 'max_consecutive_failures' in pipeline:
        mcf = pipeline['max_consecutive_failures']
        if not isinstance(mcf, int) or mcf <= 0:
            return False, "pipeline.max_consecutive_failures must be a positive integer"

    reporting = config.get('reporting') or {}
    if reporting.get('sink', 'log') not in ('log', 'jsonl'):
        return False, "reporting.sink must be one of: log, jsonl"
    if 'max_queue' in reporting and (not isinstance(reporting['max_queue'], int) or reporting['max_queue'] <= 0):
        return False, "reporting.max_queue must be a positive integer"

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='VisionHelper - live frame classification/detection')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--variant', choices=[v.value for v in ModelVariant],
                        help='Inference variant (overrides inference.variant)')
    parser.add_argument('--max-frames', type=int, default=None,
                        help='Stop after this many frames')
    args = parser.parse_args()

    raw = load_config(args.config)
    if args.variant:
        raw.setdefault('inference', {})['variant'] = args.variant
    if args.max_frames is not None:
        raw.setdefault('pipeline', {})['max_frames'] = args.max_frames

    is_valid, error_msg = validate_config(raw)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw)
    setup_logging(config.log_path, config.log_level)

    variant = config.inference.variant
    logging.info(f"Starting VisionHelper (variant={variant.value})")

    try:
        model = create_model(variant, config.inference)
    except EngineInitError:
        sys.exit(2)

    reporter = AsyncReporter(create_reporter(config.reporting), max_queue=config.reporting.max_queue)
    dispatcher = InferenceDispatcher(model, variant, reporter)
    engine = create_engine_from_config(config, dispatcher)
    try:
        engine.run()
    except RuntimeError as e:
        logging.error(f"Frame source failed: {e}")
        sys.exit(1)

    logging.info("VisionHelper stopped")


if __name__ == "__main__":
    main()
