"""tgakit - Truevision TGA image decoder/encoder."""

from tgakit.codec import (
    ColorMap,
    RLEDecoder,
    TGADecoder,
    TGAEncoder,
    TGAHeader,
    TGAImage,
    read_header,
)
from tgakit.errors import ErrorKind, TGAError
from tgakit.types import ImageType, PixelFormat

__version__ = "0.1.0"

__all__ = [
    "ColorMap",
    "ErrorKind",
    "ImageType",
    "PixelFormat",
    "RLEDecoder",
    "TGADecoder",
    "TGAEncoder",
    "TGAError",
    "TGAHeader",
    "TGAImage",
    "read_header",
]
