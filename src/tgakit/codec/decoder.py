"""TGAデコーダーモジュール

TGA形式のバイトストリームをデコードして TGAImage に変換する。
非圧縮/RLE圧縮、トゥルーカラー/グレースケール/カラーマップの全6種別に対応する。
"""

import io
from pathlib import Path
from typing import BinaryIO, Protocol

from tgakit.codec.colormap import ColorMap, skip_color_map
from tgakit.codec.header import TGAHeader, read_header
from tgakit.codec.image import TGAImage
from tgakit.codec.orientation import normalize_orientation
from tgakit.codec.rle import RLEDecoder
from tgakit.codec.stream import read_exact
from tgakit.errors import NoDataError, TGAIOError
from tgakit.types import ImageType


class TGADecoderProtocol(Protocol):
    """TGAデコーダーインターフェース"""

    def decode(self, stream: BinaryIO) -> TGAImage:
        """TGA形式のストリームをデコードする

        Args:
            stream: TGAデータの読み取り元（read/seek可能なバイナリストリーム）

        Returns:
            デコードされた画像

        Raises:
            TGAError: 不正なTGAデータ、または読み取りに失敗した場合
        """
        ...


class TGADecoder:
    """TGA画像デコーダー

    TGA形式の構造:
    - ヘッダー(18): 各フィールドはリトルエンディアン
    - 画像ID(id_length)
    - カラーマップ(map_length * ceil(map_entry_size / 8))
    - ピクセルデータ: 非圧縮なら width * height * ピクセルサイズ、RLEなら可変長パケット列

    デコード結果は記述子ビットに従って向きを正規化したものになる。
    """

    def __init__(self) -> None:
        """TGAデコーダーを初期化する"""
        self._rle = RLEDecoder()

    def decode(self, stream: BinaryIO) -> TGAImage:
        """TGA形式のストリームをデコードする

        Args:
            stream: TGAデータの読み取り元（read/seek可能なバイナリストリーム）

        Returns:
            デコードされた画像

        Raises:
            TGAError: 不正なTGAデータ、または読み取りに失敗した場合
        """
        header = read_header(stream)
        image_id = read_exact(stream, header.id_length, "画像ID")

        color_map: ColorMap | None = None
        if header.image_kind().is_color_mapped:
            color_map = ColorMap.read(stream, header)
        else:
            skip_color_map(stream, header)

        pixels = self.decode_pixels(header, color_map, stream)
        normalize_orientation(pixels, header)

        return TGAImage(
            width=header.width,
            height=header.height,
            pixel_format=header.pixel_format(),
            data=bytes(pixels),
            image_id=image_id,
        )

    def decode_bytes(self, data: bytes) -> TGAImage:
        """TGA形式のバイト列をデコードする"""
        return self.decode(io.BytesIO(data))

    def load(self, path: Path) -> TGAImage:
        """TGAファイルを読み込んでデコードする

        Raises:
            TGAIOError: ファイルを開けない場合
            TGAError: 不正なTGAデータの場合
        """
        try:
            f = open(path, "rb")
        except OSError as e:
            raise TGAIOError(f"ファイルを開けません: {path}: {e}") from e
        with f:
            return self.decode(f)

    def read_header(self, path: Path) -> TGAHeader:
        """TGAファイルのヘッダーのみを読み取る"""
        try:
            f = open(path, "rb")
        except OSError as e:
            raise TGAIOError(f"ファイルを開けません: {path}: {e}") from e
        with f:
            return read_header(f)

    def decode_pixels(
        self,
        header: TGAHeader,
        color_map: ColorMap | None,
        stream: BinaryIO,
    ) -> bytearray:
        """ヘッダーの画像種別に従ってピクセルデータをデコードする

        Args:
            header: 検証済みのヘッダー
            color_map: カラーマップ（カラーマップ画像のみ必須）
            stream: ピクセルデータ先頭に位置したストリーム

        Returns:
            width * height * bytes_per_pixel バイトのピクセルデータ（向きは未正規化）

        Raises:
            NoDataError: 画像種別がデータなしの場合
            ValueError: カラーマップ画像なのに color_map が指定されていない場合
            TruncatedDataError: ピクセルデータが不足している場合
            ColorMapIndexError: パレットインデックスが範囲外の場合
        """
        kind = header.image_kind()
        pixel_count = header.pixel_count

        if kind == ImageType.NO_DATA:
            raise NoDataError("画像データがありません")

        if kind.is_color_mapped and color_map is None:
            raise ValueError("カラーマップ画像のデコードにはカラーマップが必要です")

        if kind in (ImageType.TRUE_COLOR, ImageType.GRAYSCALE):
            size = pixel_count * header.bytes_per_pixel()
            return bytearray(read_exact(stream, size, "ピクセルデータ"))

        if kind == ImageType.COLOR_MAPPED:
            return self._decode_color_mapped(header, color_map, stream)

        if kind.is_color_mapped:
            # パレットインデックスはエントリサイズ単位で格納され、先頭バイトを使う
            return self._rle.decode(
                stream,
                pixel_count,
                color_map.bytes_per_entry,
                lambda unit: color_map.resolve(unit[0]),
            )

        return self._rle.decode(stream, pixel_count, header.bytes_per_pixel())

    def _decode_color_mapped(
        self,
        header: TGAHeader,
        color_map: ColorMap,
        stream: BinaryIO,
    ) -> bytearray:
        """非圧縮カラーマップ画像のピクセルデータをデコードする

        各ピクセルのパレットインデックスをカラーマップのエントリサイズ単位
        （リトルエンディアン）で読み取り、同じ位置をエントリの色で上書きする。
        """
        entry_size = color_map.bytes_per_entry
        output = bytearray(read_exact(stream, header.pixel_count * entry_size, "ピクセルデータ"))

        for offset in range(0, len(output), entry_size):
            raw_index = int.from_bytes(output[offset : offset + entry_size], "little")
            color_map.copy_to(output, offset, raw_index)
        return output
