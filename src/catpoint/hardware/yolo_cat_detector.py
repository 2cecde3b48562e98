"""
YOLO 猫检测器 - ImageService backed by an ultralytics model

- 使用预训练 COCO 模型 (class "cat")
- YOLOv11n by default (fastest, CPU friendly)
- Accepts decoded frames (numpy BGR) or encoded image bytes
"""

import logging
import time
from typing import Any, Dict, Union

import cv2
import numpy as np

from ..exceptions import ImageClassificationError, InvalidImageError
from ..services.image_service import ImageService

# Ultralytics YOLO
try:
    from ultralytics import YOLO
    HAS_YOLO = True
except ImportError:
    YOLO = None
    HAS_YOLO = False

logger = logging.getLogger(__name__)

CAT_CLASS_NAME = "cat"


def decode_image(image: Union[bytes, bytearray, np.ndarray]) -> np.ndarray:
    """Return a BGR frame for raw bytes or pass an existing frame through."""
    if isinstance(image, np.ndarray):
        return image
    if isinstance(image, (bytes, bytearray)):
        frame = cv2.imdecode(np.frombuffer(image, dtype=np.uint8), cv2.IMREAD_COLOR)
        if frame is None:
            raise InvalidImageError("Image bytes could not be decoded")
        return frame
    raise InvalidImageError(f"Unsupported image type: {type(image).__name__}")


class YoloImageService(ImageService):
    """
    YOLO cat classifier

    A frame contains a cat when any "cat" detection reaches the
    confidence threshold (given in percent, converted to 0-1 for YOLO).
    """

    def __init__(
        self,
        model_name: str = "yolo11n.pt",
        device: str = "cpu",
    ):
        """
        Args:
            model_name: YOLO 模型名称
            device: 'cpu' 或 'cuda'
        """
        if not HAS_YOLO:
            raise RuntimeError("ultralytics not installed. Install: pip install catpoint-security[vision]")

        self.model_name = model_name
        self.device = device

        logger.info("Loading YOLO model %s on %s", model_name, device)
        self.model = YOLO(model_name)
        if device == "cuda":
            self.model.to("cuda")

        # COCO 类别 {0: 'person', 15: 'cat', ...}
        self.class_names: Dict[int, str] = self.model.names
        self.cat_class_ids = [
            class_id for class_id, class_name in self.class_names.items()
            if class_name == CAT_CLASS_NAME
        ]
        if not self.cat_class_ids:
            raise RuntimeError(f"Model {model_name} has no '{CAT_CLASS_NAME}' class")

        # 统计
        self.frame_count = 0
        self.cat_frame_count = 0
        self.total_inference_time = 0.0

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        threshold = self.check_threshold(confidence_threshold)
        frame = decode_image(image)

        start_time = time.time()
        try:
            results = self.model(
                frame,
                conf=threshold / 100.0,
                classes=self.cat_class_ids,
                verbose=False,
            )
        except Exception as e:
            raise ImageClassificationError(f"YOLO inference failed: {e}") from e
        self.total_inference_time += time.time() - start_time
        self.frame_count += 1

        best = 0.0
        for result in results:
            boxes = result.boxes
            for i in range(len(boxes)):
                if int(boxes.cls[i]) in self.cat_class_ids:
                    best = max(best, float(boxes.conf[i]))

        contains_cat = best > 0.0 and best * 100.0 >= threshold
        if contains_cat:
            self.cat_frame_count += 1
        logger.debug("YOLO verdict: cat=%s best_conf=%.3f threshold=%.1f", contains_cat, best, threshold)
        return contains_cat

    def get_stats(self) -> Dict:
        """获取统计信息"""
        return {
            "frame_count": self.frame_count,
            "cat_frame_count": self.cat_frame_count,
            "total_inference_time": self.total_inference_time,
            "avg_inference_time": self.total_inference_time / self.frame_count if self.frame_count > 0 else 0,
        }
