"""画像向きの正規化モジュール

ヘッダーの記述子ビットに従ってデコード済みバッファを左右・上下に反転し、
常に左上原点・左から右・上から下の並びにそろえる。
反転はピクセル単位の入れ替えでバッファを直接書き換える。
"""

from tgakit.codec.header import TGAHeader
from tgakit.errors import NoDataError


def pixel_offset(x: int, y: int, width: int, height: int, bytes_per_pixel: int) -> int:
    """座標 (x, y) のピクセルのバイトオフセットを返す

    範囲外の座標は最も近い端の座標に丸める。

    Args:
        x: X座標
        y: Y座標
        width: 画像の幅
        height: 画像の高さ
        bytes_per_pixel: 1ピクセルのバイト数

    Returns:
        行優先バッファ上のバイトオフセット
    """
    x = min(max(x, 0), width - 1)
    y = min(max(y, 0), height - 1)
    return (y * width + x) * bytes_per_pixel


def _check_buffer(buffer: bytearray, width: int, height: int, bytes_per_pixel: int) -> None:
    if not buffer:
        raise NoDataError("反転するピクセルデータがありません")
    expected = width * height * bytes_per_pixel
    if len(buffer) != expected:
        raise ValueError(f"バッファサイズが画像サイズと一致しません: {len(buffer)} != {expected}")


def flip_horizontal(buffer: bytearray, width: int, height: int, bytes_per_pixel: int) -> None:
    """バッファを左右反転する（列 i と列 width-1-i を全行で入れ替える）"""
    _check_buffer(buffer, width, height, bytes_per_pixel)

    for i in range(width // 2):
        for y in range(height):
            left = pixel_offset(i, y, width, height, bytes_per_pixel)
            right = pixel_offset(width - 1 - i, y, width, height, bytes_per_pixel)
            scratch = buffer[left : left + bytes_per_pixel]
            buffer[left : left + bytes_per_pixel] = buffer[right : right + bytes_per_pixel]
            buffer[right : right + bytes_per_pixel] = scratch


def flip_vertical(buffer: bytearray, width: int, height: int, bytes_per_pixel: int) -> None:
    """バッファを上下反転する（行 i と行 height-1-i を全列で入れ替える）"""
    _check_buffer(buffer, width, height, bytes_per_pixel)

    for i in range(height // 2):
        for x in range(width):
            top = pixel_offset(x, i, width, height, bytes_per_pixel)
            bottom = pixel_offset(x, height - 1 - i, width, height, bytes_per_pixel)
            scratch = buffer[top : top + bytes_per_pixel]
            buffer[top : top + bytes_per_pixel] = buffer[bottom : bottom + bytes_per_pixel]
            buffer[bottom : bottom + bytes_per_pixel] = scratch


def normalize_orientation(buffer: bytearray, header: TGAHeader) -> None:
    """記述子ビットに従ってバッファの向きを正規化する

    bit4 (0x10) が立っていれば左右反転、bit5 (0x20) が立っていれば上下反転する。
    どちらも立っていなければ何もしない。
    """
    bytes_per_pixel = header.bytes_per_pixel()
    if header.flip_horizontal:
        flip_horizontal(buffer, header.width, header.height, bytes_per_pixel)
    if header.flip_vertical:
        flip_vertical(buffer, header.width, header.height, bytes_per_pixel)
