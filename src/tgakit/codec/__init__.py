"""TGAコーデックパッケージ

TGA形式のヘッダー解析、カラーマップ参照、RLE解凍、向きの正規化、
デコードおよびエンコードを行う。
"""

from tgakit.codec.colormap import ColorMap
from tgakit.codec.decoder import TGADecoder
from tgakit.codec.encoder import TGAEncoder
from tgakit.codec.header import TGAHeader, read_header
from tgakit.codec.image import TGAImage
from tgakit.codec.rle import RLEDecoder

__all__ = [
    "ColorMap",
    "RLEDecoder",
    "TGADecoder",
    "TGAEncoder",
    "TGAHeader",
    "TGAImage",
    "read_header",
]
