"""TGAエンコーダーモジュール

TGAImage を非圧縮のTGA形式にシリアライズする。
RLE圧縮やカラーマップは出力せず、常に最も単純な表現で書き出す。
"""

import io
from pathlib import Path
from typing import BinaryIO

from tgakit.codec.header import TGAHeader, check_dimensions
from tgakit.codec.image import TGAImage
from tgakit.codec.stream import write_all
from tgakit.errors import TGAWriteError
from tgakit.types import ImageType, PixelFormat

DESCRIPTOR_ORIGIN = 0x20
DESCRIPTOR_ALPHA8 = 0x08


class TGAEncoder:
    """TGA画像エンコーダー

    出力ヘッダー:
    - image_type: BW8/BW16はグレースケール(3)、それ以外はトゥルーカラー(2)
    - pixel_depth: bytes_per_pixel * 8
    - descriptor: ARGB32は0x28（アルファ8ビット+原点ビット）、それ以外は0x20
    - その他のフィールドは0
    """

    def build_header(self, image: TGAImage) -> TGAHeader:
        """画像に対応する非圧縮TGAのヘッダーを作成する

        Raises:
            InvalidImageDimensionsError: 幅または高さが範囲外の場合
        """
        check_dimensions(image.width, image.height)

        if image.pixel_format.is_grayscale:
            image_type = ImageType.GRAYSCALE
        else:
            image_type = ImageType.TRUE_COLOR

        descriptor = DESCRIPTOR_ORIGIN
        if image.pixel_format == PixelFormat.ARGB32:
            descriptor |= DESCRIPTOR_ALPHA8

        return TGAHeader(
            image_type=int(image_type),
            width=image.width,
            height=image.height,
            pixel_depth=image.bytes_per_pixel * 8,
            descriptor=descriptor,
        )

    def write(self, image: TGAImage, stream: BinaryIO) -> None:
        """ヘッダーとピクセルデータをストリームに書き込む

        Raises:
            TGAWriteError: 書き込みに失敗した場合
        """
        write_all(stream, self.build_header(image).to_bytes())
        write_all(stream, image.data)

    def encode(self, image: TGAImage) -> bytes:
        """画像をTGA形式のバイト列にエンコードする"""
        buffer = io.BytesIO()
        self.write(image, buffer)
        return buffer.getvalue()

    def save(self, image: TGAImage, path: Path) -> None:
        """画像をTGAファイルとして保存する

        Raises:
            TGAWriteError: ファイルを作成または書き込みできない場合
        """
        try:
            f = open(path, "wb")
        except OSError as e:
            raise TGAWriteError(f"ファイルを作成できません: {path}: {e}") from e
        with f:
            self.write(image, f)
