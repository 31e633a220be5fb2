"""バイトストリーム読み書きヘルパー

デコーダー/エンコーダーが使うストリーム操作をまとめ、
OSError と読み取り不足を TGA のエラー階層に変換する。
"""

import os
from typing import BinaryIO

from tgakit.errors import TGAIOError, TGAWriteError, TruncatedDataError


def read_exact(stream: BinaryIO, size: int, what: str = "データ") -> bytes:
    """ストリームからちょうど size バイト読み取る

    Args:
        stream: 読み取り元のバイナリストリーム
        size: 読み取るバイト数
        what: エラーメッセージに使う読み取り対象の名前

    Returns:
        読み取ったバイト列

    Raises:
        TruncatedDataError: ストリームの残りが size バイトに満たない場合
        TGAIOError: 読み取り中に OSError が発生した場合
    """
    if size == 0:
        return b""
    try:
        data = stream.read(size)
    except OSError as e:
        raise TGAIOError(f"{what}の読み取りに失敗しました: {e}") from e
    if data is None or len(data) < size:
        got = 0 if data is None else len(data)
        raise TruncatedDataError(f"{what}が不完全です: {size}バイト必要ですが{got}バイトしかありません")
    return data


def skip(stream: BinaryIO, size: int, what: str = "データ") -> None:
    """ストリームを現在位置から size バイト先へシークする

    Raises:
        TGAIOError: シークに失敗した場合
    """
    if size == 0:
        return
    try:
        stream.seek(size, os.SEEK_CUR)
    except OSError as e:
        raise TGAIOError(f"{what}のスキップに失敗しました: {e}") from e


def write_all(stream: BinaryIO, data: bytes) -> None:
    """ストリームにバイト列を書き込む

    Raises:
        TGAWriteError: 書き込みに失敗した場合
    """
    try:
        stream.write(data)
    except OSError as e:
        raise TGAWriteError(f"書き込みに失敗しました: {e}") from e
