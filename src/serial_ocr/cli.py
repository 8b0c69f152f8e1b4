"""
Command-line serial number extraction.

Usage:
    python -m src.serial_ocr.cli --text "Model XYZ S/N: AB12CD34EF56"
    python -m src.serial_ocr.cli --image label.jpg [label2.png ...]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config_loader import get_default_config, load_config
from .processor import SerialOCRProcessor


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Extract serial numbers from label text or images"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", type=str, help="OCR text to parse")
    source.add_argument("--image", type=str, nargs="+", help="Label image file(s)")
    parser.add_argument("--config", type=str, default=None, help="Configuration file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config)) if args.config else get_default_config()
    except FileNotFoundError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.ocr.logging.level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    images = []
    for path in args.image or []:
        try:
            images.append(Path(path).read_bytes())
        except OSError as e:
            parser.error(f"cannot read image {path}: {e.strerror or e}")

    processor = SerialOCRProcessor(config=config)

    if args.text is not None:
        result = processor.extract_serial_number(args.text)
        output = result.to_dict()
        success = result.success
    elif len(images) == 1:
        result = processor.process_image(images[0])
        output = result.to_dict()
        success = result.success
    else:
        batch = processor.process_images(images)
        output = batch.to_dict()
        success = batch.successful > 0

    print(json.dumps(output, indent=2))
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
