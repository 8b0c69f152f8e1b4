"""Image preprocessing before OCR.

Label photos are converted to grayscale, upscaled when too small, given
local contrast enhancement (CLAHE) and sharpened, then re-encoded as PNG.
Preprocessing is best-effort: any failure returns the original bytes so the
OCR step still runs.
"""

import logging
from typing import Optional

import cv2
import numpy as np

from .config_loader import PreprocessingConfig
from .engine import decode_image

logger = logging.getLogger(__name__)


class ImagePreprocessor:
    """Enhances label images for OCR.

    Args:
        config: Preprocessing configuration.
    """

    def __init__(self, config: Optional[PreprocessingConfig] = None):
        self.config = config or PreprocessingConfig()

    def preprocess(self, image_bytes: bytes) -> bytes:
        """Enhance an encoded image and return it re-encoded as PNG.

        Args:
            image_bytes: Encoded image (PNG, JPEG, ...)

        Returns:
            Enhanced PNG bytes, or the original bytes if processing fails.
        """
        try:
            image = decode_image(image_bytes)
            if image is None:
                logger.warning("Preprocessing skipped: image could not be decoded")
                return image_bytes

            image = self.enhance(image)

            ok, encoded = cv2.imencode(".png", image)
            if not ok:
                logger.warning("Preprocessing skipped: PNG encoding failed")
                return image_bytes
            return encoded.tobytes()

        except Exception as e:
            logger.warning(f"Image preprocessing failed, using original: {e}")
            return image_bytes

    def enhance(self, image: np.ndarray) -> np.ndarray:
        """Apply the configured enhancement steps to a decoded image."""
        config = self.config

        if config.grayscale and image.ndim == 3:
            if image.shape[2] == 4:
                image = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
            elif image.shape[2] == 3:
                image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            else:
                image = image[:, :, 0]

        if image.dtype != np.uint8:
            image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

        h, w = image.shape[:2]
        if config.min_height and h < config.min_height:
            new_height = config.min_height
            new_width = max(1, int(round(w * new_height / h)))
            image = cv2.resize(
                image, (new_width, new_height), interpolation=cv2.INTER_CUBIC
            )
            logger.debug(f"Resized image from {w}x{h} to {new_width}x{new_height}")

        if config.enable_clahe and image.ndim == 2:
            clahe = cv2.createCLAHE(
                clipLimit=config.clahe_clip_limit,
                tileGridSize=(config.clahe_tile_size, config.clahe_tile_size),
            )
            image = clahe.apply(image)

        if config.enable_sharpen and config.sharpen_amount > 0:
            # Unsharp mask: image + amount * (image - blurred)
            blurred = cv2.GaussianBlur(image, (0, 0), sigmaX=1.0)
            image = cv2.addWeighted(
                image, 1.0 + config.sharpen_amount, blurred, -config.sharpen_amount, 0
            )

        return image
