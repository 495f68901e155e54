from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from PIL import UnidentifiedImageError
from typing import Optional
import logging

from ..auth import get_current_session
from ..schemas.color import PixelColorResponse
from ..services.color import describe, sample_pixel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/color", tags=["color"])


@router.get("", response_model=PixelColorResponse)
async def convert_color(
    r: int = Query(..., ge=0, le=255),
    g: int = Query(..., ge=0, le=255),
    b: int = Query(..., ge=0, le=255),
    session: Optional[str] = Depends(get_current_session),
):
    """Convert an RGB triple to HEX, CMYK, HSV and HSL."""
    return PixelColorResponse(**describe(r, g, b))


@router.post("/sample", response_model=PixelColorResponse)
async def sample_color(
    image: UploadFile = File(...),
    x: int = Form(...),
    y: int = Form(...),
    session: Optional[str] = Depends(get_current_session),
):
    """Pick the pixel at (x, y) of an uploaded image and convert it."""
    content = await image.read()
    try:
        r, g, b, _alpha = sample_pixel(content, x, y)
    except UnidentifiedImageError:
        raise HTTPException(status_code=400, detail="Unsupported or corrupt image")

    logger.debug(f"Sampled ({x}, {y}) of {image.filename}: {r}, {g}, {b}")
    return PixelColorResponse(**describe(r, g, b))
