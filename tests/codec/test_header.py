"""TGAHeaderのテスト"""

import io
import struct

import pytest

from tgakit.codec.header import (
    TGAHeader,
    bits_to_bytes,
    check_dimensions,
    read_header,
)
from tgakit.errors import (
    ErrorKind,
    IllegalHeaderError,
    InvalidImageDimensionsError,
    NoDataError,
    TruncatedDataError,
    UnsupportedColorMapTypeError,
    UnsupportedImageTypeError,
    UnsupportedPixelFormatError,
)
from tgakit.types import ImageType, PixelFormat


def _header_bytes(
    *,
    id_length: int = 0,
    map_type: int = 0,
    image_type: int = 2,
    map_first_entry: int = 0,
    map_length: int = 0,
    map_entry_size: int = 0,
    width: int = 4,
    height: int = 2,
    pixel_depth: int = 24,
    descriptor: int = 0,
) -> bytes:
    return struct.pack(
        "<BBBHHBHHHHBB",
        id_length,
        map_type,
        image_type,
        map_first_entry,
        map_length,
        map_entry_size,
        0,
        0,
        width,
        height,
        pixel_depth,
        descriptor,
    )


class TestBitsToBytes:
    """bits_to_bytes()のテスト"""

    @pytest.mark.parametrize(
        "bits, expected",
        [
            pytest.param(0, 0, id="0ビット"),
            pytest.param(1, 1, id="1ビット"),
            pytest.param(8, 1, id="8ビット"),
            pytest.param(15, 2, id="15ビット"),
            pytest.param(16, 2, id="16ビット"),
            pytest.param(17, 3, id="17ビット"),
            pytest.param(24, 3, id="24ビット"),
            pytest.param(32, 4, id="32ビット"),
        ],
    )
    def test_bits_to_bytes(self, bits: int, expected: int) -> None:
        assert bits_to_bytes(bits) == expected


class TestTGAHeaderParse:
    """TGAHeader.parse()のテスト"""

    def test_parse_fields_little_endian(self) -> None:
        """多バイトフィールドがリトルエンディアンで解析される"""
        data = struct.pack(
            "<BBBHHBHHHHBB", 3, 1, 1, 0x0102, 0x0304, 24, 0x0506, 0x0708, 0x0201, 0x0403, 8, 0x25
        )

        header = TGAHeader.parse(data)

        assert header.id_length == 3
        assert header.map_type == 1
        assert header.image_type == 1
        assert header.map_first_entry == 0x0102
        assert header.map_length == 0x0304
        assert header.map_entry_size == 24
        assert header.x_origin == 0x0506
        assert header.y_origin == 0x0708
        assert header.width == 0x0201
        assert header.height == 0x0403
        assert header.pixel_depth == 8
        assert header.descriptor == 0x25

    def test_parse_grayscale_scenario(self) -> None:
        """1x1の8ビットグレースケールヘッダーを解析できる"""
        data = bytes([0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 1, 0, 8, 0])

        header = TGAHeader.parse(data)

        assert header.image_kind() == ImageType.GRAYSCALE
        assert header.pixel_format() == PixelFormat.BW8
        assert header.bytes_per_pixel() == 1
        assert header.width == 1
        assert header.height == 1

    def test_parse_ignores_trailing_bytes(self) -> None:
        """18バイトより後ろのデータは無視される"""
        header = TGAHeader.parse(_header_bytes() + b"\xff" * 10)
        assert header.width == 4

    def test_parse_too_short(self) -> None:
        """18バイトに満たないとTruncatedDataError"""
        with pytest.raises(TruncatedDataError, match="ヘッダーが不完全です"):
            TGAHeader.parse(_header_bytes()[:17])

    def test_to_bytes_matches_wire(self) -> None:
        """to_bytes()が解析元と同じバイト列を返す"""
        data = _header_bytes(image_type=10, width=300, height=200, pixel_depth=32, descriptor=0x28)
        assert TGAHeader.parse(data).to_bytes() == data


class TestTGAHeaderValidation:
    """ヘッダー検証の順序とエラー種別のテスト"""

    @pytest.mark.parametrize(
        "fields, error, kind",
        [
            pytest.param(
                {"map_type": 2},
                UnsupportedColorMapTypeError,
                ErrorKind.UNSUPPORTED_COLOR_MAP_TYPE,
                id="異常系: カラーマップ種別が2",
            ),
            pytest.param(
                {"image_type": 0},
                NoDataError,
                ErrorKind.NO_DATA,
                id="異常系: 画像種別0はデータなし",
            ),
            pytest.param(
                {"image_type": 4},
                UnsupportedImageTypeError,
                ErrorKind.UNSUPPORTED_IMAGE_TYPE,
                id="異常系: 未知の画像種別",
            ),
            pytest.param(
                {"image_type": 32},
                UnsupportedImageTypeError,
                ErrorKind.UNSUPPORTED_IMAGE_TYPE,
                id="異常系: Huffman圧縮の画像種別",
            ),
            pytest.param(
                {"width": 0},
                InvalidImageDimensionsError,
                ErrorKind.INVALID_IMAGE_DIMENSIONS,
                id="異常系: 幅が0",
            ),
            pytest.param(
                {"height": 0},
                InvalidImageDimensionsError,
                ErrorKind.INVALID_IMAGE_DIMENSIONS,
                id="異常系: 高さが0",
            ),
            pytest.param(
                {"pixel_depth": 8},
                UnsupportedPixelFormatError,
                ErrorKind.UNSUPPORTED_PIXEL_FORMAT,
                id="異常系: トゥルーカラーで8ビット",
            ),
            pytest.param(
                {"image_type": 1, "map_type": 1, "map_entry_size": 24, "pixel_depth": 16},
                IllegalHeaderError,
                ErrorKind.ILLEGAL_HEADER,
                id="異常系: カラーマップ画像で16ビット",
            ),
        ],
    )
    def test_validation_errors(self, fields: dict[str, int], error: type, kind: ErrorKind) -> None:
        with pytest.raises(error) as exc_info:
            TGAHeader.parse(_header_bytes(**fields))
        assert exc_info.value.kind == kind

    def test_map_type_checked_before_image_type(self) -> None:
        """カラーマップ種別の検証が画像種別より先に行われる"""
        with pytest.raises(UnsupportedColorMapTypeError):
            TGAHeader.parse(_header_bytes(map_type=5, image_type=0))

    def test_dimensions_checked_before_pixel_format(self) -> None:
        """画像サイズの検証がピクセル形式より先に行われる"""
        with pytest.raises(InvalidImageDimensionsError):
            TGAHeader.parse(_header_bytes(width=0, pixel_depth=7))

    def test_validation_errors_are_value_errors(self) -> None:
        """検証エラーはValueErrorとしても捕捉できる"""
        with pytest.raises(ValueError):
            TGAHeader.parse(_header_bytes(image_type=0))


class TestTGAHeaderPixelFormat:
    """TGAHeader.pixel_format()のテスト"""

    @pytest.mark.parametrize(
        "image_type, pixel_depth, map_entry_size, expected, bpp",
        [
            pytest.param(1, 8, 15, PixelFormat.RGB555, 2, id="カラーマップ 15ビットエントリ"),
            pytest.param(1, 8, 16, PixelFormat.RGB555, 2, id="カラーマップ 16ビットエントリ"),
            pytest.param(1, 8, 24, PixelFormat.RGB24, 3, id="カラーマップ 24ビットエントリ"),
            pytest.param(9, 8, 32, PixelFormat.ARGB32, 4, id="RLEカラーマップ 32ビットエントリ"),
            pytest.param(2, 16, 0, PixelFormat.RGB555, 2, id="トゥルーカラー 16ビット"),
            pytest.param(2, 24, 0, PixelFormat.RGB24, 3, id="トゥルーカラー 24ビット"),
            pytest.param(10, 32, 0, PixelFormat.ARGB32, 4, id="RLEトゥルーカラー 32ビット"),
            pytest.param(3, 8, 0, PixelFormat.BW8, 1, id="グレースケール 8ビット"),
            pytest.param(11, 16, 0, PixelFormat.BW16, 2, id="RLEグレースケール 16ビット"),
        ],
    )
    def test_resolution_table(
        self,
        image_type: int,
        pixel_depth: int,
        map_entry_size: int,
        expected: PixelFormat,
        bpp: int,
    ) -> None:
        header = TGAHeader(
            image_type=image_type,
            map_type=1 if map_entry_size else 0,
            map_entry_size=map_entry_size,
            width=1,
            height=1,
            pixel_depth=pixel_depth,
        )
        assert header.pixel_format() == expected
        assert header.bytes_per_pixel() == bpp

    @pytest.mark.parametrize(
        "image_type, pixel_depth, map_entry_size",
        [
            pytest.param(1, 8, 8, id="カラーマップ 8ビットエントリ"),
            pytest.param(9, 8, 0, id="RLEカラーマップ エントリサイズ0"),
            pytest.param(2, 15, 0, id="トゥルーカラー 15ビット"),
            pytest.param(3, 24, 0, id="グレースケール 24ビット"),
            pytest.param(11, 32, 0, id="RLEグレースケール 32ビット"),
        ],
    )
    def test_unsupported_combinations(
        self, image_type: int, pixel_depth: int, map_entry_size: int
    ) -> None:
        header = TGAHeader(
            image_type=image_type,
            map_entry_size=map_entry_size,
            width=1,
            height=1,
            pixel_depth=pixel_depth,
        )
        with pytest.raises(UnsupportedPixelFormatError):
            header.pixel_format()

    def test_pixel_format_is_pure(self) -> None:
        """繰り返し呼び出しても同じ値を返す"""
        header = TGAHeader(image_type=2, width=1, height=1, pixel_depth=32)
        results = {header.pixel_format() for _ in range(5)}
        assert results == {PixelFormat.ARGB32}

    def test_pixel_format_never_panics_on_byte_range(self) -> None:
        """全バイト値の組み合わせで既知の値か既知のエラーのみを返す"""
        for image_type in (1, 2, 3, 9, 10, 11):
            for depth in range(256):
                header = TGAHeader(
                    image_type=image_type, width=1, height=1, pixel_depth=depth, map_entry_size=depth
                )
                try:
                    assert header.pixel_format() in set(PixelFormat)
                except (UnsupportedPixelFormatError, IllegalHeaderError):
                    pass


class TestTGAHeaderDescriptor:
    """記述子ビットの導出プロパティのテスト"""

    @pytest.mark.parametrize(
        "descriptor, flip_h, flip_v, alpha",
        [
            pytest.param(0x00, False, False, 0, id="フラグなし"),
            pytest.param(0x10, True, False, 0, id="左右反転"),
            pytest.param(0x20, False, True, 0, id="上下反転"),
            pytest.param(0x38, True, True, 8, id="両方向反転+アルファ8ビット"),
        ],
    )
    def test_descriptor_bits(self, descriptor: int, flip_h: bool, flip_v: bool, alpha: int) -> None:
        header = TGAHeader(descriptor=descriptor)
        assert header.flip_horizontal is flip_h
        assert header.flip_vertical is flip_v
        assert header.alpha_bits == alpha

    def test_color_map_size(self) -> None:
        """カラーマップのバイト数はエントリ数×切り上げバイト数"""
        header = TGAHeader(map_length=10, map_entry_size=15)
        assert header.map_bytes_per_entry == 2
        assert header.color_map_size == 20


class TestCheckDimensions:
    """check_dimensions()のテスト"""

    @pytest.mark.parametrize(
        "width, height",
        [
            pytest.param(1, 1, id="最小サイズ"),
            pytest.param(65535, 65535, id="最大サイズ"),
        ],
    )
    def test_valid(self, width: int, height: int) -> None:
        check_dimensions(width, height)

    @pytest.mark.parametrize(
        "width, height",
        [
            pytest.param(0, 1, id="幅0"),
            pytest.param(1, 0, id="高さ0"),
            pytest.param(-1, 1, id="幅が負"),
            pytest.param(65536, 1, id="幅が最大値超"),
            pytest.param(1, 65536, id="高さが最大値超"),
        ],
    )
    def test_invalid(self, width: int, height: int) -> None:
        with pytest.raises(InvalidImageDimensionsError):
            check_dimensions(width, height)


class TestReadHeader:
    """read_header()のテスト"""

    def test_read_header_consumes_18_bytes(self) -> None:
        """ストリームからちょうど18バイト読み取る"""
        stream = io.BytesIO(_header_bytes() + b"\xaa\xbb")
        read_header(stream)
        assert stream.tell() == 18

    def test_read_header_truncated(self) -> None:
        with pytest.raises(TruncatedDataError):
            read_header(io.BytesIO(b"\x00" * 5))

    def test_dimension_guard_before_pixel_read(self) -> None:
        """幅0のヘッダーはピクセルデータを読む前に拒否される"""
        stream = io.BytesIO(_header_bytes(width=0) + b"\x01\x02\x03")
        with pytest.raises(InvalidImageDimensionsError):
            read_header(stream)
        assert stream.tell() == 18
