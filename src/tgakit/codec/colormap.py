"""カラーマップ（パレット）モジュール

カラーマップ画像のパレットを保持し、パレットインデックスを色データに解決する。
カラーマップは1回のデコード中だけ存在し、デコード結果には含まれない。
"""

from dataclasses import dataclass
from typing import BinaryIO

from tgakit.codec.header import TGAHeader
from tgakit.codec.stream import read_exact, skip
from tgakit.errors import ColorMapIndexError


@dataclass(frozen=True)
class ColorMap:
    """カラーマップ

    Attributes:
        first_index: 先頭エントリのインデックス（map_first_entry）
        entry_count: エントリ数
        bytes_per_entry: 1エントリのバイト数
        table: entry_count * bytes_per_entry バイトの連続したエントリ列
    """

    first_index: int
    entry_count: int
    bytes_per_entry: int
    table: bytes

    @classmethod
    def read(cls, stream: BinaryIO, header: TGAHeader) -> "ColorMap":
        """ヘッダーの定義に従ってストリームからカラーマップを読み取る

        Raises:
            TruncatedDataError: カラーマップを読み切れない場合
        """
        table = read_exact(stream, header.color_map_size, "カラーマップ")
        return cls(
            first_index=header.map_first_entry,
            entry_count=header.map_length,
            bytes_per_entry=header.map_bytes_per_entry,
            table=table,
        )

    def resolve(self, raw_index: int) -> bytes:
        """パレットインデックスをエントリのバイト列に解決する

        Args:
            raw_index: ピクセルデータに格納されたインデックス（first_index 基準ではない生の値）

        Returns:
            bytes_per_entry バイトの色データ

        Raises:
            ColorMapIndexError: raw_index - first_index が範囲外の場合
        """
        index = raw_index - self.first_index
        if not 0 <= index < self.entry_count:
            raise ColorMapIndexError(
                f"カラーマップのインデックスが範囲外です: {raw_index} "
                f"(有効範囲 {self.first_index}〜{self.first_index + self.entry_count - 1})"
            )
        start = index * self.bytes_per_entry
        return self.table[start : start + self.bytes_per_entry]

    def copy_to(self, buffer: bytearray, offset: int, raw_index: int) -> None:
        """解決した色データを buffer の offset 位置に書き込む"""
        buffer[offset : offset + self.bytes_per_entry] = self.resolve(raw_index)


def skip_color_map(stream: BinaryIO, header: TGAHeader) -> None:
    """カラーマップ画像以外で宣言されたカラーマップブロックを読み飛ばす"""
    skip(stream, header.color_map_size, "カラーマップ")
