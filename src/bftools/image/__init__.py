from .pipeline import (
    ImageConvertOptions,
    ConversionResult,
    convert_image,
)
from .mipmaps import generate_mipmaps, mip_dimensions
from .dxt import encode_blocks, encode_dxt1, encode_dxt3, encode_dxt5

__all__ = [
    "ImageConvertOptions",
    "ConversionResult",
    "convert_image",
    "generate_mipmaps",
    "mip_dimensions",
    "encode_blocks",
    "encode_dxt1",
    "encode_dxt3",
    "encode_dxt5",
]
