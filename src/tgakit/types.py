"""共通型定義

TGAヘッダーから導出される画像種別・ピクセル形式と、CLIの終了コードを定義する。
"""

from enum import Enum, IntEnum

HEADER_SIZE = 18
"""TGAヘッダーのバイト数"""

MAX_IMAGE_DIMENSION = 65535
"""幅・高さの最大値（16ビットフィールド）"""


class ExitCode(IntEnum):
    """CLIの終了コード"""

    SUCCESS = 0
    ERROR = 1
    INVALID_INPUT = 2


class ImageType(IntEnum):
    """TGA画像種別

    ヘッダーの image_type バイトに対応する列挙型。
    """

    NO_DATA = 0
    COLOR_MAPPED = 1
    TRUE_COLOR = 2
    GRAYSCALE = 3
    RLE_COLOR_MAPPED = 9
    RLE_TRUE_COLOR = 10
    RLE_GRAYSCALE = 11

    @property
    def is_rle(self) -> bool:
        """RLE圧縮された種別かどうか"""
        return self in (
            ImageType.RLE_COLOR_MAPPED,
            ImageType.RLE_TRUE_COLOR,
            ImageType.RLE_GRAYSCALE,
        )

    @property
    def is_color_mapped(self) -> bool:
        """カラーマップ（パレット）を参照する種別かどうか"""
        return self in (ImageType.COLOR_MAPPED, ImageType.RLE_COLOR_MAPPED)


class PixelFormat(Enum):
    """デコード後のピクセル形式

    値はそのまま表示名として使う。
    """

    BW8 = "BW8"
    BW16 = "BW16"
    RGB555 = "RGB555"
    RGB24 = "RGB24"
    ARGB32 = "ARGB32"

    @property
    def bytes_per_pixel(self) -> int:
        """1ピクセルあたりのバイト数"""
        return _BYTES_PER_PIXEL[self]

    @property
    def is_grayscale(self) -> bool:
        """グレースケール形式かどうか"""
        return self in (PixelFormat.BW8, PixelFormat.BW16)


_BYTES_PER_PIXEL: dict[PixelFormat, int] = {
    PixelFormat.BW8: 1,
    PixelFormat.BW16: 2,
    PixelFormat.RGB555: 2,
    PixelFormat.RGB24: 3,
    PixelFormat.ARGB32: 4,
}
