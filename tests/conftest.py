"""テスト共通フィクスチャ

テスト用のTGAバイト列を組み立てるヘルパーを提供する。
"""

import struct
from collections.abc import Callable

import pytest

TGABuilder = Callable[..., bytes]


def build_tga(
    *,
    image_type: int = 2,
    width: int = 1,
    height: int = 1,
    pixel_depth: int = 24,
    descriptor: int = 0,
    id_field: bytes = b"",
    map_type: int = 0,
    map_first_entry: int = 0,
    map_length: int = 0,
    map_entry_size: int = 0,
    color_map: bytes = b"",
    pixels: bytes = b"",
) -> bytes:
    """テスト用のTGAバイト列を生成する

    Args:
        image_type: 画像種別コード
        width: 画像の幅
        height: 画像の高さ
        pixel_depth: ピクセル深度（ビット）
        descriptor: 画像記述子
        id_field: 画像IDフィールド
        map_type: カラーマップ種別
        map_first_entry: カラーマップの先頭インデックス
        map_length: カラーマップのエントリ数
        map_entry_size: カラーマップエントリのビット数
        color_map: カラーマップのバイト列
        pixels: ピクセルデータ（非圧縮またはRLEパケット列）

    Returns:
        TGA形式のバイト列
    """
    header = struct.pack(
        "<BBBHHBHHHHBB",
        len(id_field),
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
    return header + id_field + color_map + pixels


@pytest.fixture
def tga_builder() -> TGABuilder:
    """TGAバイト列生成関数"""
    return build_tga
