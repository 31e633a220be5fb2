"""デコード済み画像モジュール

デコード結果を表す不変の TGAImage と、PIL.Image との相互変換を提供する。
ピクセルデータはTGAのワイヤ上のチャンネル順（BGR/BGRA、リトルエンディアン）のまま保持する。
"""

from dataclasses import dataclass, field

from PIL import Image

from tgakit.codec.header import check_dimensions
from tgakit.codec.orientation import flip_horizontal, flip_vertical, pixel_offset
from tgakit.errors import UnsupportedPixelFormatError
from tgakit.types import PixelFormat

# 16ビットを超える整数・浮動小数点のモード
UNREPRESENTABLE_MODES = ("I", "F")


@dataclass(frozen=True)
class TGAImage:
    """デコード済みTGA画像

    左上原点・行優先に正規化されたピクセルデータを保持する不変データクラス。

    Attributes:
        width: 画像の幅（ピクセル）
        height: 画像の高さ（ピクセル）
        pixel_format: ピクセル形式
        data: width * height * bytes_per_pixel バイトのピクセルデータ
        image_id: ヘッダー直後の画像IDフィールド
    """

    width: int
    height: int
    pixel_format: PixelFormat
    data: bytes
    image_id: bytes = field(default=b"", repr=False)

    def __post_init__(self) -> None:
        check_dimensions(self.width, self.height)
        # bytearray を渡されても外部から書き換えられないようにコピーする
        object.__setattr__(self, "data", bytes(self.data))
        object.__setattr__(self, "image_id", bytes(self.image_id))
        expected = self.width * self.height * self.bytes_per_pixel
        if len(self.data) != expected:
            raise ValueError(
                f"ピクセルデータのサイズが一致しません: {len(self.data)}バイト (期待値 {expected}バイト)"
            )

    @property
    def bytes_per_pixel(self) -> int:
        """1ピクセルあたりのバイト数"""
        return self.pixel_format.bytes_per_pixel

    def pixel(self, x: int, y: int) -> bytes:
        """座標 (x, y) のピクセルデータを返す（範囲外の座標は端に丸める）"""
        offset = pixel_offset(x, y, self.width, self.height, self.bytes_per_pixel)
        return self.data[offset : offset + self.bytes_per_pixel]

    def flipped_horizontal(self) -> "TGAImage":
        """左右反転した新しい画像を返す"""
        buffer = bytearray(self.data)
        flip_horizontal(buffer, self.width, self.height, self.bytes_per_pixel)
        return TGAImage(self.width, self.height, self.pixel_format, bytes(buffer), self.image_id)

    def flipped_vertical(self) -> "TGAImage":
        """上下反転した新しい画像を返す"""
        buffer = bytearray(self.data)
        flip_vertical(buffer, self.width, self.height, self.bytes_per_pixel)
        return TGAImage(self.width, self.height, self.pixel_format, bytes(buffer), self.image_id)

    def to_pil(self) -> Image.Image:
        """PIL.Imageオブジェクトに変換する

        BW8→L、BW16→I;16、RGB555/RGB24→RGB、ARGB32→RGBA。
        チャンネル順の並べ替え以外の色変換は行わない。

        Returns:
            変換されたPIL.Imageオブジェクト
        """
        size = (self.width, self.height)

        if self.pixel_format == PixelFormat.BW8:
            return Image.frombytes("L", size, self.data)
        if self.pixel_format == PixelFormat.BW16:
            return Image.frombytes("I;16", size, self.data)
        if self.pixel_format == PixelFormat.RGB555:
            return Image.frombytes("RGB", size, _expand_rgb555(self.data))
        if self.pixel_format == PixelFormat.RGB24:
            return Image.frombytes("RGB", size, self.data, "raw", "BGR")
        return Image.frombytes("RGBA", size, self.data, "raw", "BGRA")

    @classmethod
    def from_pil(cls, image: Image.Image) -> "TGAImage":
        """PIL.Imageオブジェクトから TGAImage を作成する

        L→BW8、I;16/I;16B→BW16、アルファ付き→ARGB32、それ以外→RGB24。
        32ビット整数・浮動小数点（I/F）は値を保てないため変換しない。

        Args:
            image: 変換元のPIL.Imageオブジェクト

        Returns:
            作成された TGAImage

        Raises:
            UnsupportedPixelFormatError: TGAで表現できないモードの場合
        """
        width, height = image.size

        if image.mode == "L":
            return cls(width, height, PixelFormat.BW8, image.tobytes())
        if image.mode in ("I;16", "I;16L"):
            return cls(width, height, PixelFormat.BW16, image.tobytes())
        if image.mode == "I;16B":
            return cls(width, height, PixelFormat.BW16, _swap_16bit(image.tobytes()))
        if image.mode in UNREPRESENTABLE_MODES:
            raise UnsupportedPixelFormatError(f"TGAで表現できない画像モードです: {image.mode}")

        has_alpha = image.mode in ("RGBA", "LA", "PA") or (
            image.mode == "P" and "transparency" in image.info
        )
        if has_alpha:
            rgba = image.convert("RGBA")
            return cls(width, height, PixelFormat.ARGB32, rgba.tobytes("raw", "BGRA"))

        rgb = image if image.mode == "RGB" else image.convert("RGB")
        return cls(width, height, PixelFormat.RGB24, rgb.tobytes("raw", "BGR"))


def _expand_rgb555(data: bytes) -> bytes:
    """16ビット（x1R5G5B5、リトルエンディアン）をRGB各8ビットに展開する"""
    rgb = bytearray(len(data) // 2 * 3)
    for i in range(len(data) // 2):
        value = data[i * 2] | (data[i * 2 + 1] << 8)
        r = (value >> 10) & 0x1F
        g = (value >> 5) & 0x1F
        b = value & 0x1F
        rgb[i * 3] = (r << 3) | (r >> 2)
        rgb[i * 3 + 1] = (g << 3) | (g >> 2)
        rgb[i * 3 + 2] = (b << 3) | (b >> 2)
    return bytes(rgb)


def _swap_16bit(data: bytes) -> bytes:
    """16ビット値のバイト順を入れ替える（ビッグエンディアン→リトルエンディアン）"""
    swapped = bytearray(len(data))
    swapped[0::2] = data[1::2]
    swapped[1::2] = data[0::2]
    return bytes(swapped)
