# FILE: backend/bizpage/editor/imaging.py
# PHOENIX PROTOCOL - CROP + ENCODE (PILLOW)
# 1. Fixed aspect per target: avatar 1:1, banner 16:9.
# 2. Output is always RGB JPEG; the original file is never uploaded.
# 3. Previews are temp files, released explicitly by the upload flow.

import io
import os
import tempfile
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import ValidationError

ASPECT_RATIOS: Dict[str, Fraction] = {
    "avatar": Fraction(1, 1),
    "banner": Fraction(16, 9),
}

CROPPED_CONTENT_TYPE = "image/jpeg"
CROPPED_FILENAME = "cropped-image.jpg"
JPEG_QUALITY = 90

@dataclass(frozen=True)
class CropRegion:
    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

def aspect_for(field: str) -> Fraction:
    try:
        return ASPECT_RATIOS[field]
    except KeyError:
        raise ValidationError(f"Images can only be set for: {', '.join(ASPECT_RATIOS)}")

def image_size(data: bytes) -> Tuple[int, int]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Selected file is not a readable image: {e}") from e

def default_crop(size: Tuple[int, int], aspect: Fraction) -> CropRegion:
    """Largest region of `aspect` centred in an image of `size`."""
    width, height = size
    crop_w = min(width, int(height * aspect))
    crop_h = min(height, int(crop_w / aspect))
    crop_w = max(1, crop_w)
    crop_h = max(1, crop_h)
    return CropRegion((width - crop_w) // 2, (height - crop_h) // 2, crop_w, crop_h)

def fit_region(region: CropRegion, aspect: Fraction, size: Tuple[int, int]) -> CropRegion:
    """Forces a user-drawn region to `aspect` (keeping its width) and clamps it inside the image."""
    width, height = size
    crop_w = max(1, min(region.width, width))
    crop_h = int(crop_w / aspect)
    if crop_h > height:
        crop_h = height
        crop_w = max(1, int(crop_h * aspect))
    crop_h = max(1, crop_h)

    x = min(max(region.x, 0), width - crop_w)
    y = min(max(region.y, 0), height - crop_h)
    return CropRegion(x, y, crop_w, crop_h)

def crop_to_jpeg(data: bytes, region: CropRegion, quality: int = JPEG_QUALITY) -> bytes:
    try:
        with Image.open(io.BytesIO(data)) as img:
            cropped = img.crop(region.box)
            if cropped.mode != "RGB":
                cropped = cropped.convert("RGB")
            buffered = io.BytesIO()
            cropped.save(buffered, format="JPEG", quality=quality)
            return buffered.getvalue()
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Could not crop image: {e}") from e

def create_preview(data: bytes, filename: str = "") -> Path:
    """Writes the selected file to a temp file that stands in for a local preview URL."""
    suffix = os.path.splitext(filename)[1]
    with tempfile.NamedTemporaryFile(prefix="bizpage-preview-", suffix=suffix, delete=False) as temp_file:
        temp_file.write(data)
        return Path(temp_file.name)

def release_preview(path: Optional[Path]) -> None:
    if path and path.exists():
        path.unlink()
