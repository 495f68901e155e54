from pydantic import BaseModel


class PixelColorResponse(BaseModel):
    """A sampled pixel in every notation the pipette shows."""
    hex: str
    rgb: str
    cmyk: str
    hsv: str
    hsl: str
