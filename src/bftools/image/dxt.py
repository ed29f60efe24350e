"""DXT1/DXT3/DXT5 (BC1/BC2/BC3) block encoders.

Blocks are produced with a vectorised "range fit": the two colour
endpoints are the block pixels lying furthest apart along the block's
principal axis, snapped to RGB565. Cluster fit gives better quality but
is far too slow in numpy.

Block layouts (little-endian):

    DXT1   u16 c0 | u16 c1 | u32 indices (2 bits per texel)
    DXT3   u64 alpha (4 bits per texel) | DXT1 colour block
    DXT5   u8 a0 | u8 a1 | 48 bits indices (3 bits per texel) | DXT1 colour block

Texel ``k`` of a block is row ``k // 4``, column ``k % 4`` and occupies the
lowest index bits first. Colour blocks are always emitted in four-colour
mode (``c0 > c1``) unless the block is flat.
"""

from __future__ import annotations

import numpy as np

from ..container.constants import BLOCK_SIZE, BlockCodec

__all__ = [
    "block_split",
    "encode_dxt1",
    "encode_dxt3",
    "encode_dxt5",
    "encode_blocks",
    "block_bytes",
    "encoded_size",
]

_TEXELS = BLOCK_SIZE * BLOCK_SIZE

_COLOR_BLOCK = np.dtype([("c0", "<u2"), ("c1", "<u2"), ("indices", "<u4")])
_DXT3_BLOCK = np.dtype(
    [("alpha", "<u8"), ("c0", "<u2"), ("c1", "<u2"), ("indices", "<u4")]
)

_BLOCK_BYTES = {
    BlockCodec.DXT1: 8,
    BlockCodec.DXT3: 16,
    BlockCodec.DXT5: 16,
}

# Weight of a1 (out of 7) for DXT5 alpha indices 0..7 in eight-alpha mode.
_DXT5_ALPHA_WEIGHTS = np.array([0, 7, 1, 2, 3, 4, 5, 6], dtype=np.float32)


def block_bytes(codec: BlockCodec) -> int:
    return _BLOCK_BYTES[codec]


def encoded_size(width: int, height: int, codec: BlockCodec) -> int:
    cols = -(-width // BLOCK_SIZE)
    rows = -(-height // BLOCK_SIZE)
    return cols * rows * block_bytes(codec)


def block_split(px: np.ndarray) -> np.ndarray:
    """Split ``(h, w, c)`` pixels into ``(n, 16, c)`` blocks in row-major block order.

    Partial blocks on the right and bottom edges are padded by repeating
    edge pixels.
    """
    if px.ndim == 2:
        px = px[:, :, None]
    h, w, chans = px.shape
    pad_h = (-h) % BLOCK_SIZE
    pad_w = (-w) % BLOCK_SIZE
    if pad_h or pad_w:
        px = np.pad(px, ((0, pad_h), (0, pad_w), (0, 0)), mode="edge")
    rows = px.shape[0] // BLOCK_SIZE
    cols = px.shape[1] // BLOCK_SIZE
    px = px.reshape(rows, BLOCK_SIZE, cols, BLOCK_SIZE, chans).swapaxes(1, 2)
    return px.reshape(-1, _TEXELS, chans)


def _to_565(rgb: np.ndarray) -> np.ndarray:
    r = np.rint(rgb[..., 0] * (31 / 255)).astype(np.uint16)
    g = np.rint(rgb[..., 1] * (63 / 255)).astype(np.uint16)
    b = np.rint(rgb[..., 2] * (31 / 255)).astype(np.uint16)
    return (r << 11) | (g << 5) | b


def _from_565(packed: np.ndarray) -> np.ndarray:
    r = (packed >> 11) & 0x1F
    g = (packed >> 5) & 0x3F
    b = packed & 0x1F
    return np.stack(
        [(r << 3) | (r >> 2), (g << 2) | (g >> 4), (b << 3) | (b >> 2)],
        axis=-1,
    ).astype(np.float32)


def _pack_indices(idx: np.ndarray, bits: int, dtype) -> np.ndarray:
    shifts = (bits * np.arange(_TEXELS)).astype(dtype)
    return np.bitwise_or.reduce(idx.astype(dtype) << shifts, axis=1)


def _encode_color(rgb: np.ndarray):
    """Encode ``(n, 16, 3)`` texels; returns ``(c0, c1, indices)`` arrays."""
    pts = rgb.astype(np.float32)
    n = pts.shape[0]
    centred = pts - pts.mean(axis=1, keepdims=True)
    cov = np.einsum("nki,nkj->nij", centred, centred)
    # eigh sorts eigenvalues ascending; the last vector is the principal axis
    _, vecs = np.linalg.eigh(cov)
    axis = vecs[:, :, -1]
    proj = np.einsum("nki,ni->nk", centred, axis)
    rows = np.arange(n)
    c0 = _to_565(pts[rows, proj.argmax(axis=1)])
    c1 = _to_565(pts[rows, proj.argmin(axis=1)])
    swap = c0 < c1
    c0, c1 = np.where(swap, c1, c0), np.where(swap, c0, c1)

    e0 = _from_565(c0)
    e1 = _from_565(c1)
    palette = np.stack(
        [e0, e1, (2 * e0 + e1) / 3, (e0 + 2 * e1) / 3], axis=1
    )
    diff = pts[:, :, None, :] - palette[:, None, :, :]
    idx = np.einsum("nkpc,nkpc->nkp", diff, diff).argmin(axis=2)
    idx[c0 == c1] = 0
    return c0, c1, _pack_indices(idx, 2, np.uint32)


def _split_rgba(pixels: np.ndarray):
    blocks = block_split(np.asarray(pixels, dtype=np.uint8))
    if blocks.shape[2] < 3:
        raise ValueError(
            f"Block encoding needs RGB or RGBA pixels, got {blocks.shape[2]} channels"
        )
    rgb = blocks[:, :, :3]
    if blocks.shape[2] >= 4:
        alpha = blocks[:, :, 3]
    else:
        alpha = np.full(blocks.shape[:2], 255, dtype=np.uint8)
    return rgb, alpha


def encode_dxt1(pixels: np.ndarray) -> bytes:
    rgb, _ = _split_rgba(pixels)
    c0, c1, indices = _encode_color(rgb)
    out = np.empty(len(c0), dtype=_COLOR_BLOCK)
    out["c0"] = c0
    out["c1"] = c1
    out["indices"] = indices
    return out.tobytes()


def encode_dxt3(pixels: np.ndarray) -> bytes:
    rgb, alpha = _split_rgba(pixels)
    c0, c1, indices = _encode_color(rgb)
    a4 = (alpha.astype(np.uint32) * 15 + 127) // 255
    out = np.empty(len(c0), dtype=_DXT3_BLOCK)
    out["alpha"] = _pack_indices(a4, 4, np.uint64)
    out["c0"] = c0
    out["c1"] = c1
    out["indices"] = indices
    return out.tobytes()


def encode_dxt5(pixels: np.ndarray) -> bytes:
    rgb, alpha = _split_rgba(pixels)
    c0, c1, indices = _encode_color(rgb)
    n = len(c0)
    a = alpha.astype(np.float32)
    a0 = a.max(axis=1)
    a1 = a.min(axis=1)
    palette = (
        (7 - _DXT5_ALPHA_WEIGHTS) * a0[:, None]
        + _DXT5_ALPHA_WEIGHTS * a1[:, None]
    ) / 7
    a_idx = np.abs(a[:, :, None] - palette[:, None, :]).argmin(axis=2)
    a_idx[a0 == a1] = 0
    a_bits = _pack_indices(a_idx, 3, np.uint64)

    color = np.empty(n, dtype=_COLOR_BLOCK)
    color["c0"] = c0
    color["c1"] = c1
    color["indices"] = indices

    out = np.empty((n, 16), dtype=np.uint8)
    out[:, 0] = a0.astype(np.uint8)
    out[:, 1] = a1.astype(np.uint8)
    out[:, 2:8] = a_bits.astype("<u8").view(np.uint8).reshape(n, 8)[:, :6]
    out[:, 8:] = color.view(np.uint8).reshape(n, 8)
    return out.tobytes()


_ENCODERS = {
    BlockCodec.DXT1: encode_dxt1,
    BlockCodec.DXT3: encode_dxt3,
    BlockCodec.DXT5: encode_dxt5,
}


def encode_blocks(pixels: np.ndarray, codec: BlockCodec) -> bytes:
    try:
        encoder = _ENCODERS[codec]
    except KeyError:
        raise ValueError(f"{codec!r} is not a block codec") from None
    return encoder(pixels)
