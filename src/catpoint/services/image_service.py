"""
Image Service - cat-detection verdict boundary

The engine only consumes the boolean verdict. Implementations must raise
ImageClassificationError when no verdict can be produced; a failure is
never reported as "no cat".
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..exceptions import ImageClassificationError

logger = logging.getLogger(__name__)


class ImageService(ABC):
    """Classifier contract: image + threshold in [0, 100] -> contains a cat."""

    @abstractmethod
    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        pass

    @staticmethod
    def check_threshold(confidence_threshold: float) -> float:
        if not 0.0 <= confidence_threshold <= 100.0:
            raise ValueError(
                f"confidence_threshold must be within [0, 100], got {confidence_threshold}"
            )
        return float(confidence_threshold)


class FakeImageService(ImageService):
    """Random verdicts, for running the system without a model."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        self.check_threshold(confidence_threshold)
        if image is None:
            raise ImageClassificationError("No image supplied")
        verdict = self._random.random() < 0.5
        logger.debug("Fake classifier verdict: cat=%s", verdict)
        return verdict
