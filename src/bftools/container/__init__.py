from .constants import (
    MAGIC,
    MAX_SUPPORTED_VERSION,
    CURRENT_VERSION,
    HEADER_SIZE,
    Kind,
    ImageFormat,
)
from .header import (
    Header,
    ImageAdditional,
    validate,
    pack_image_additional,
    unpack_image_additional,
)
from .loader import Container, load, load_file
from .compression import compress, decompress

__all__ = [
    "MAGIC",
    "MAX_SUPPORTED_VERSION",
    "CURRENT_VERSION",
    "HEADER_SIZE",
    "Kind",
    "ImageFormat",
    "Header",
    "ImageAdditional",
    "validate",
    "pack_image_additional",
    "unpack_image_additional",
    "Container",
    "load",
    "load_file",
    "compress",
    "decompress",
]
