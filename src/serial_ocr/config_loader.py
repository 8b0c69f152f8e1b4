"""Configuration loader with Pydantic validation for serial number OCR.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class OCREngineConfig(BaseModel):
    """OCR engine configuration.

    Attributes:
        type: Engine type ("tesseract" or "rapidocr")
        lang: Tesseract language code(s), e.g. "eng" or "eng+spa"
        page_segmentation_mode: Tesseract PSM (7 = treat image as a single text line)
        ocr_engine_mode: Tesseract OEM (1 = LSTM only)
        char_whitelist: Characters the engine may emit (None disables the filter)
        char_blacklist: Characters the engine must never emit
        preserve_interword_spaces: Keep spaces between recognized words
        use_angle_cls: RapidOCR angle classification for rotated text
        use_gpu: RapidOCR GPU acceleration if available
        text_score: RapidOCR minimum text detection confidence (0.0-1.0)
    """

    type: str = "tesseract"
    lang: str = "eng"
    page_segmentation_mode: int = Field(default=7, ge=0, le=13)
    ocr_engine_mode: int = Field(default=1, ge=0, le=3)
    char_whitelist: Optional[str] = (
        "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-./: "
    )
    char_blacklist: Optional[str] = None
    preserve_interword_spaces: bool = True
    use_angle_cls: bool = True
    use_gpu: bool = False
    text_score: float = Field(default=0.5, ge=0.0, le=1.0)


class PreprocessingConfig(BaseModel):
    """Image preprocessing configuration.

    Attributes:
        enabled: Run the preprocessor before OCR
        grayscale: Convert to single-channel grayscale
        min_height: Upscale images shorter than this (pixels, 0 disables)
        enable_clahe: Enable CLAHE contrast enhancement
        clahe_clip_limit: CLAHE clip limit parameter
        clahe_tile_size: CLAHE tile grid size
        enable_sharpen: Enable unsharp-mask sharpening
        sharpen_amount: Weight of the sharpening detail layer
    """

    enabled: bool = True
    grayscale: bool = True
    min_height: int = Field(default=64, ge=0)
    enable_clahe: bool = True
    clahe_clip_limit: float = Field(default=2.0, gt=0.0)
    clahe_tile_size: int = Field(default=8, ge=1)
    enable_sharpen: bool = True
    sharpen_amount: float = Field(default=1.0, ge=0.0)


class ImageLimitsConfig(BaseModel):
    """Image buffer size limits.

    Attributes:
        max_bytes: Largest accepted image buffer (default 10 MiB)
        min_bytes: Smallest buffer considered suitable by validate_image_for_ocr
    """

    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    min_bytes: int = Field(default=1024, ge=0)


class CorrectionConfig(BaseModel):
    """Character correction configuration.

    Attributes:
        enabled: Enable contextual OCR confusion correction
    """

    enabled: bool = True


class ExtractionConfig(BaseModel):
    """Candidate extraction configuration.

    Attributes:
        max_candidates: Keep at most this many ranked candidates (None keeps all)
    """

    max_candidates: Optional[int] = Field(default=None, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration used by the command-line entry point.

    Attributes:
        level: Root log level name
    """

    level: str = "INFO"


class SerialOCRModuleConfig(BaseModel):
    """Complete serial number OCR configuration."""

    engine: OCREngineConfig = OCREngineConfig()
    preprocessing: PreprocessingConfig = PreprocessingConfig()
    image_limits: ImageLimitsConfig = ImageLimitsConfig()
    correction: CorrectionConfig = CorrectionConfig()
    extraction: ExtractionConfig = ExtractionConfig()
    logging: LoggingConfig = LoggingConfig()


class Config(BaseModel):
    """Root configuration container.

    Attributes:
        ocr: Serial number OCR configuration
    """

    ocr: SerialOCRModuleConfig = SerialOCRModuleConfig()


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from YAML file.

    The file may either contain the module settings at the top level or
    nest them under an ``ocr`` key.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated Config object with all settings

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("src/serial_ocr/config.yaml"))
        >>> print(config.ocr.engine.page_segmentation_mode)
        7
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    if "ocr" in config_dict:
        return Config(**config_dict)
    return Config(ocr=SerialOCRModuleConfig(**config_dict))


def get_default_config() -> Config:
    """Get default configuration from bundled config.yaml file.

    Returns:
        Config object loaded from src/serial_ocr/config.yaml, or the
        hard-coded defaults if the file is missing.
    """
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        return Config()
