"""TGA RLE解凍モジュール

TGAのパケット形式（ランレングスパケット/RAWパケット）で圧縮された
ピクセルデータを解凍する。
"""

from collections.abc import Callable
from typing import BinaryIO, Protocol

from tgakit.codec.stream import read_exact

RUN_LENGTH_FLAG = 0x80
"""繰り返し数バイトのbit7: 1=ランレングスパケット、0=RAWパケット"""

COUNT_MASK = 0x7F
"""繰り返し数バイトの下位7ビット（パケットのピクセル数 - 1）"""

UnitResolver = Callable[[bytes], bytes]
"""読み取った1単位（パレットインデックス等）を出力ピクセルに変換する関数"""


class RLEDecoderProtocol(Protocol):
    """RLE解凍インターフェース"""

    def decode(
        self,
        stream: BinaryIO,
        pixel_count: int,
        unit_size: int,
        resolve: UnitResolver | None = None,
    ) -> bytearray:
        """RLE圧縮されたピクセルデータを解凍する

        Args:
            stream: 圧縮データの読み取り元
            pixel_count: 出力するピクセル数
            unit_size: ストリーム上の1ピクセルのバイト数
            resolve: 読み取った単位を出力ピクセルへ変換する関数（カラーマップ参照用）

        Returns:
            解凍されたピクセルデータ
        """
        ...


class RLEDecoder:
    """TGA RLE解凍クラス

    ストリームから1パケットずつ読み取るプル型のループで解凍する。

    パケット構造:
    - 繰り返し数バイト(1): bit7=パケット種別、下位7ビット+1=ピクセル数
    - ランレングスパケット: 1ピクセル分のデータをピクセル数だけ繰り返す
    - RAWパケット: ピクセル数分のデータがそのまま並ぶ

    出力ピクセル数に達した時点でパケットの途中でも終了し、それ以上は読み取らない。
    """

    def decode(
        self,
        stream: BinaryIO,
        pixel_count: int,
        unit_size: int,
        resolve: UnitResolver | None = None,
    ) -> bytearray:
        """RLE圧縮されたピクセルデータを解凍する

        Args:
            stream: 圧縮データの読み取り元
            pixel_count: 出力するピクセル数
            unit_size: ストリーム上の1ピクセルのバイト数
            resolve: 読み取った単位を出力ピクセルへ変換する関数（カラーマップ参照用）

        Returns:
            解凍されたピクセルデータ

        Raises:
            TruncatedDataError: パケットの途中でデータが尽きた場合
            ColorMapIndexError: resolve がインデックス範囲外を検出した場合
        """
        output = bytearray()
        pixels_remaining = pixel_count
        packet_count = 0
        is_run_length_packet = False

        while pixels_remaining > 0:
            if packet_count == 0:
                count_field = read_exact(stream, 1, "RLEパケットヘッダー")[0]
                is_run_length_packet = bool(count_field & RUN_LENGTH_FLAG)
                packet_count = (count_field & COUNT_MASK) + 1

            # パケットの残りと出力の残りの小さい方だけ処理する
            count = min(packet_count, pixels_remaining)

            if is_run_length_packet:
                pixel = self._read_unit(stream, unit_size, resolve)
                output += pixel * count
            else:
                for _ in range(count):
                    output += self._read_unit(stream, unit_size, resolve)

            packet_count -= count
            pixels_remaining -= count

        return output

    def _read_unit(
        self,
        stream: BinaryIO,
        unit_size: int,
        resolve: UnitResolver | None,
    ) -> bytes:
        unit = read_exact(stream, unit_size, "RLEピクセルデータ")
        if resolve is not None:
            return resolve(unit)
        return unit
