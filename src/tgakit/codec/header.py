"""TGAヘッダーモジュール

18バイト固定長のTGAヘッダーの解析・検証と、
画像種別・ピクセル形式の導出を行う。
"""

import struct
from dataclasses import dataclass
from typing import BinaryIO

from tgakit.codec.stream import read_exact
from tgakit.errors import (
    IllegalHeaderError,
    InvalidImageDimensionsError,
    NoDataError,
    TruncatedDataError,
    UnsupportedColorMapTypeError,
    UnsupportedImageTypeError,
    UnsupportedPixelFormatError,
)
from tgakit.types import HEADER_SIZE, MAX_IMAGE_DIMENSION, ImageType, PixelFormat

HEADER_STRUCT = struct.Struct("<BBBHHBHHHHBB")
"""ヘッダーのワイヤ形式（リトルエンディアン固定）"""

FLIP_HORIZONTAL_BIT = 0x10
FLIP_VERTICAL_BIT = 0x20
ALPHA_BITS_MASK = 0x0F

_COLOR_MAPPED_FORMATS: dict[int, PixelFormat] = {
    15: PixelFormat.RGB555,
    16: PixelFormat.RGB555,
    24: PixelFormat.RGB24,
    32: PixelFormat.ARGB32,
}

_TRUE_COLOR_FORMATS: dict[int, PixelFormat] = {
    16: PixelFormat.RGB555,
    24: PixelFormat.RGB24,
    32: PixelFormat.ARGB32,
}

_GRAYSCALE_FORMATS: dict[int, PixelFormat] = {
    8: PixelFormat.BW8,
    16: PixelFormat.BW16,
}


def bits_to_bytes(bits: int) -> int:
    """ビット数を格納に必要なバイト数に切り上げる（例: 8→1, 9→2, 0→0）"""
    if bits <= 0:
        return 0
    return (bits - 1) // 8 + 1


def check_dimensions(width: int, height: int) -> None:
    """画像サイズが1〜65535の範囲に収まっているか検証する

    Raises:
        InvalidImageDimensionsError: 幅または高さが範囲外の場合
    """
    if not (0 < width <= MAX_IMAGE_DIMENSION and 0 < height <= MAX_IMAGE_DIMENSION):
        raise InvalidImageDimensionsError(f"不正な画像サイズです: {width}x{height}")


@dataclass(frozen=True)
class TGAHeader:
    """TGAヘッダー情報

    ヘッダーの各フィールドをワイヤ上の順序で保持する不変データクラス。
    画像種別・ピクセル形式は保持せず、呼び出しのたびにフィールドから導出する。

    Attributes:
        id_length: 画像IDフィールドのバイト数
        map_type: カラーマップ種別（0=なし、1=あり）
        image_type: 画像種別コード
        map_first_entry: カラーマップの先頭インデックス
        map_length: カラーマップのエントリ数
        map_entry_size: カラーマップ1エントリのビット数
        x_origin: X原点
        y_origin: Y原点
        width: 画像の幅（ピクセル）
        height: 画像の高さ（ピクセル）
        pixel_depth: 1ピクセルのビット数
        descriptor: 画像記述子（bit4=左右反転、bit5=上下反転、下位4ビット=アルファビット数）
    """

    id_length: int = 0
    map_type: int = 0
    image_type: int = 0
    map_first_entry: int = 0
    map_length: int = 0
    map_entry_size: int = 0
    x_origin: int = 0
    y_origin: int = 0
    width: int = 0
    height: int = 0
    pixel_depth: int = 0
    descriptor: int = 0

    @classmethod
    def parse(cls, data: bytes) -> "TGAHeader":
        """18バイトのヘッダーを解析して検証する

        Args:
            data: ヘッダーバイト列（先頭18バイトのみ使用）

        Returns:
            検証済みのヘッダー

        Raises:
            TruncatedDataError: 18バイトに満たない場合
            UnsupportedColorMapTypeError: map_type が1より大きい場合
            NoDataError: image_type が0の場合
            UnsupportedImageTypeError: 未知の image_type の場合
            InvalidImageDimensionsError: 幅または高さが0の場合
            UnsupportedPixelFormatError: ピクセル形式を決定できない場合
            IllegalHeaderError: カラーマップ画像のピクセル深度が8以外の場合
        """
        if len(data) < HEADER_SIZE:
            raise TruncatedDataError(
                f"ヘッダーが不完全です: {HEADER_SIZE}バイト必要ですが{len(data)}バイトしかありません"
            )

        header = cls(*HEADER_STRUCT.unpack_from(data))
        header.validate()
        return header

    def validate(self) -> None:
        """ヘッダーを検証する

        検証順序: カラーマップ種別 → データ有無 → 画像種別 → 画像サイズ → ピクセル形式
        """
        if self.map_type > 1:
            raise UnsupportedColorMapTypeError(f"未対応のカラーマップ種別です: {self.map_type}")

        if self.image_type == ImageType.NO_DATA:
            raise NoDataError("画像データがありません")

        self.image_kind()
        check_dimensions(self.width, self.height)
        self.pixel_format()

    def to_bytes(self) -> bytes:
        """ヘッダーを18バイトのワイヤ形式にパックする"""
        return HEADER_STRUCT.pack(
            self.id_length,
            self.map_type,
            self.image_type,
            self.map_first_entry,
            self.map_length,
            self.map_entry_size,
            self.x_origin,
            self.y_origin,
            self.width,
            self.height,
            self.pixel_depth,
            self.descriptor,
        )

    def image_kind(self) -> ImageType:
        """image_type バイトから画像種別を導出する

        Raises:
            NoDataError: image_type が0の場合
            UnsupportedImageTypeError: 未知の image_type の場合
        """
        try:
            kind = ImageType(self.image_type)
        except ValueError:
            raise UnsupportedImageTypeError(f"未対応の画像種別です: {self.image_type}") from None
        if kind == ImageType.NO_DATA:
            raise NoDataError("画像データがありません")
        return kind

    def pixel_format(self) -> PixelFormat:
        """画像種別・ピクセル深度・カラーマップエントリサイズからピクセル形式を導出する

        Returns:
            ピクセル形式

        Raises:
            NoDataError: image_type が0の場合
            UnsupportedImageTypeError: 未知の image_type の場合
            IllegalHeaderError: カラーマップ画像のピクセル深度が8以外の場合
            UnsupportedPixelFormatError: 対応表にない組み合わせの場合
        """
        kind = self.image_kind()

        if kind.is_color_mapped:
            if self.pixel_depth != 8:
                raise IllegalHeaderError(
                    f"カラーマップ画像のピクセル深度は8である必要があります: {self.pixel_depth}"
                )
            table, bits = _COLOR_MAPPED_FORMATS, self.map_entry_size
        elif kind in (ImageType.TRUE_COLOR, ImageType.RLE_TRUE_COLOR):
            table, bits = _TRUE_COLOR_FORMATS, self.pixel_depth
        else:
            table, bits = _GRAYSCALE_FORMATS, self.pixel_depth

        pixel_format = table.get(bits)
        if pixel_format is None:
            raise UnsupportedPixelFormatError(
                f"未対応のピクセル形式です: image_type={self.image_type}, bits={bits}"
            )
        return pixel_format

    def bytes_per_pixel(self) -> int:
        """デコード後の1ピクセルあたりのバイト数"""
        return self.pixel_format().bytes_per_pixel

    @property
    def flip_horizontal(self) -> bool:
        """記述子bit4（左右反転）が立っているか"""
        return bool(self.descriptor & FLIP_HORIZONTAL_BIT)

    @property
    def flip_vertical(self) -> bool:
        """記述子bit5（上下反転）が立っているか"""
        return bool(self.descriptor & FLIP_VERTICAL_BIT)

    @property
    def alpha_bits(self) -> int:
        """記述子下位4ビットのアルファ（属性）ビット数"""
        return self.descriptor & ALPHA_BITS_MASK

    @property
    def map_bytes_per_entry(self) -> int:
        """カラーマップ1エントリのバイト数"""
        return bits_to_bytes(self.map_entry_size)

    @property
    def color_map_size(self) -> int:
        """ヘッダー直後（画像IDの後）に続くカラーマップブロックのバイト数"""
        return self.map_length * self.map_bytes_per_entry

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def read_header(stream: BinaryIO) -> TGAHeader:
    """ストリームから18バイト読み取ってヘッダーを解析する

    Raises:
        TruncatedDataError: ヘッダーを読み切れない場合
        TGAError: ヘッダー検証に失敗した場合
    """
    return TGAHeader.parse(read_exact(stream, HEADER_SIZE, "ヘッダー"))
