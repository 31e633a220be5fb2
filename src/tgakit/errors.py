"""TGAデコード/エンコードのエラー定義

ヘッダー検証・カラーマップ参照・入出力の失敗を表す閉じた例外階層。
すべての例外は TGAError を基底とし、kind 属性で種別を判別できる。
検証エラーは ValueError、入出力エラーは TGAIOError のサブクラスでもある。
"""

from enum import Enum


class ErrorKind(Enum):
    """エラー種別"""

    NO_DATA = "no_data"
    UNSUPPORTED_COLOR_MAP_TYPE = "unsupported_color_map_type"
    UNSUPPORTED_IMAGE_TYPE = "unsupported_image_type"
    UNSUPPORTED_PIXEL_FORMAT = "unsupported_pixel_format"
    ILLEGAL_HEADER = "illegal_header"
    INVALID_IMAGE_DIMENSIONS = "invalid_image_dimensions"
    COLOR_MAP_INDEX_FAILED = "color_map_index_failed"
    FILE_CANNOT_READ = "file_cannot_read"
    FILE_CANNOT_WRITE = "file_cannot_write"
    IO_ERROR = "io_error"


class TGAError(Exception):
    """TGA処理エラーの基底クラス"""

    kind: ErrorKind = ErrorKind.IO_ERROR


class NoDataError(TGAError, ValueError):
    """画像データが存在しない（image_type == 0）"""

    kind = ErrorKind.NO_DATA


class UnsupportedColorMapTypeError(TGAError, ValueError):
    """未対応のカラーマップ種別（map_type > 1）"""

    kind = ErrorKind.UNSUPPORTED_COLOR_MAP_TYPE


class UnsupportedImageTypeError(TGAError, ValueError):
    """未対応の画像種別"""

    kind = ErrorKind.UNSUPPORTED_IMAGE_TYPE


class UnsupportedPixelFormatError(TGAError, ValueError):
    """ピクセル深度とカラーマップエントリサイズの組み合わせが未対応"""

    kind = ErrorKind.UNSUPPORTED_PIXEL_FORMAT


class IllegalHeaderError(TGAError, ValueError):
    """ヘッダーの値が矛盾している（カラーマップ画像でピクセル深度が8以外）"""

    kind = ErrorKind.ILLEGAL_HEADER


class InvalidImageDimensionsError(TGAError, ValueError):
    """画像サイズが不正（0、または65535超）"""

    kind = ErrorKind.INVALID_IMAGE_DIMENSIONS


class ColorMapIndexError(TGAError, ValueError):
    """パレットインデックスがカラーマップの範囲外"""

    kind = ErrorKind.COLOR_MAP_INDEX_FAILED


class TGAIOError(TGAError):
    """入出力エラー

    元の OSError は __cause__ に保持される。
    """

    kind = ErrorKind.IO_ERROR


class TruncatedDataError(TGAIOError):
    """ストリームから必要なバイト数を読み取れなかった"""

    kind = ErrorKind.FILE_CANNOT_READ


class TGAWriteError(TGAIOError):
    """ストリームへの書き込みに失敗した"""

    kind = ErrorKind.FILE_CANNOT_WRITE
