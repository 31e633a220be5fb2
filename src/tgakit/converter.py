"""画像変換モジュール

TGA画像と標準的な画像形式（PNG等）との相互変換を行う。
TGAのデコード/エンコードは tgakit.codec、その他の形式の読み書きはPillowで行う。
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from PIL import Image

from tgakit.codec import TGADecoder, TGAEncoder, TGAImage
from tgakit.config import OutputConfig
from tgakit.errors import TGAError
from tgakit.logger import CodecLogger

TGA_EXTENSIONS = (".tga", ".tpic", ".icb", ".vda", ".vst")
"""TGAとして扱う拡張子"""

PIL_EXTENSIONS = (".png", ".bmp", ".jpg", ".jpeg", ".gif", ".webp", ".tif", ".tiff")
"""Pillow経由でTGAに変換する拡張子"""


class ConversionStatus(Enum):
    """変換ステータス

    ファイル変換処理の結果ステータスを表す列挙型。
    成功、スキップ、失敗の3状態を持つ。
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionResult:
    """変換結果を表すデータクラス

    Attributes:
        source_path: 変換元ファイルのパス
        dest_path: 変換先ファイルのパス（変換失敗時はNone）
        status: 変換ステータス
        message: 追加メッセージ（エラー詳細等）
        bytes_before: 変換前のファイルサイズ（バイト）
        bytes_after: 変換後のファイルサイズ（バイト）
    """

    source_path: Path
    dest_path: Path | None
    status: ConversionStatus
    message: str = ""
    bytes_before: int = 0
    bytes_after: int = 0

    @property
    def is_success(self) -> bool:
        """変換が成功したかどうかを返す"""
        return self.status == ConversionStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        """変換が失敗したかどうかを返す"""
        return self.status == ConversionStatus.FAILED


class TGAConverter:
    """TGA画像変換クラス

    - TGA → PNG: デコードした画像をPillowでPNG保存
    - TGA → TGA: 非圧縮・左上原点の標準形に再エンコード
    - PNG/BMP/JPG等 → TGA: Pillowで読み込み、非圧縮TGAにエンコード

    デコード/エンコードの失敗は例外ではなく FAILED の変換結果として返す。
    """

    def __init__(
        self,
        output_config: OutputConfig | None = None,
        logger: CodecLogger | None = None,
    ) -> None:
        """TGAConverterを初期化する

        Args:
            output_config: 出力設定（Noneの場合はデフォルト）
            logger: ロガー（Noneの場合はログ出力なし）
        """
        self._config = output_config or OutputConfig()
        self._logger = logger
        self._decoder = TGADecoder()
        self._encoder = TGAEncoder()

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        """対応する拡張子のタプルを返す"""
        return TGA_EXTENSIONS + PIL_EXTENSIONS

    def can_convert(self, file_path: Path) -> bool:
        """このConverterで変換可能なファイルかを判定する"""
        return file_path.suffix.lower() in self.supported_extensions

    def get_output_extension(self, source_path: Path) -> str:
        """変換後のファイル拡張子を返す

        TGAは出力設定の形式に、それ以外の形式はTGAに変換する。
        """
        if source_path.suffix.lower() in TGA_EXTENSIONS:
            return f".{self._config.format}"
        return ".tga"

    def get_output_path(self, source: Path, output_dir: Path | None = None) -> Path:
        """変換先のパスを決定する

        Args:
            source: 変換元ファイルのパス
            output_dir: 出力ディレクトリ（Noneの場合は変換元と同じディレクトリ）

        Returns:
            変換先ファイルのパス
        """
        directory = output_dir if output_dir is not None else source.parent
        dest = directory / (source.stem + self.get_output_extension(source))
        if dest.resolve() == source.resolve():
            # TGA→TGAの上書きを避ける
            dest = directory / f"{source.stem}.normalized{dest.suffix}"
        return dest

    def convert(self, source: Path, dest: Path) -> ConversionResult:
        """ファイルを変換する

        Args:
            source: 変換元ファイルのパス
            dest: 変換先ファイルのパス

        Returns:
            変換結果を表すConversionResultオブジェクト

        Raises:
            FileNotFoundError: 変換元ファイルが存在しない場合
            ValueError: 変換元がディレクトリの場合
        """
        self._validate_source(source)
        bytes_before = source.stat().st_size

        if dest.exists() and not self._config.overwrite:
            return self._finish(
                ConversionResult(
                    source_path=source,
                    dest_path=dest,
                    status=ConversionStatus.SKIPPED,
                    message="出力ファイルが既に存在します",
                    bytes_before=bytes_before,
                )
            )

        try:
            if source.suffix.lower() in TGA_EXTENSIONS:
                self._convert_from_tga(source, dest)
            else:
                self._convert_to_tga(source, dest)
        except (TGAError, OSError) as e:
            return self._finish(
                ConversionResult(
                    source_path=source,
                    dest_path=None,
                    status=ConversionStatus.FAILED,
                    message=str(e),
                    bytes_before=bytes_before,
                )
            )

        return self._finish(
            ConversionResult(
                source_path=source,
                dest_path=dest,
                status=ConversionStatus.SUCCESS,
                bytes_before=bytes_before,
                bytes_after=dest.stat().st_size,
            )
        )

    def convert_many(
        self,
        sources: Iterable[Path],
        output_dir: Path | None = None,
    ) -> list[ConversionResult]:
        """複数ファイルを順に変換する

        対応していない拡張子のファイルは SKIPPED として扱う。
        """
        results: list[ConversionResult] = []
        for source in sources:
            if not self.can_convert(source):
                results.append(
                    self._finish(
                        ConversionResult(
                            source_path=source,
                            dest_path=None,
                            status=ConversionStatus.SKIPPED,
                            message="未対応の拡張子です",
                        )
                    )
                )
                continue
            results.append(self.convert(source, self.get_output_path(source, output_dir)))
        return results

    def _convert_from_tga(self, source: Path, dest: Path) -> None:
        if self._logger:
            self._logger.log_header(source, self._decoder.read_header(source))

        tga_image = self._decoder.load(source)
        dest.parent.mkdir(parents=True, exist_ok=True)

        if dest.suffix.lower() in TGA_EXTENSIONS:
            self._encoder.save(tga_image, dest)
            return

        image = tga_image.to_pil()
        try:
            image.save(dest, "PNG")
        finally:
            image.close()

    def _convert_to_tga(self, source: Path, dest: Path) -> None:
        with Image.open(source) as image:
            tga_image = TGAImage.from_pil(image)
        dest.parent.mkdir(parents=True, exist_ok=True)
        self._encoder.save(tga_image, dest)

    def _finish(self, result: ConversionResult) -> ConversionResult:
        if self._logger:
            self._logger.log_conversion(result)
        return result

    def _validate_source(self, source: Path) -> None:
        """変換元ファイルの検証を行う

        Raises:
            FileNotFoundError: ファイルが存在しない場合
            ValueError: ファイルではなくディレクトリの場合
        """
        if not source.exists():
            raise FileNotFoundError(f"変換元ファイルが見つかりません: {source}")
        if source.is_dir():
            raise ValueError(f"変換元はファイルである必要があります: {source}")
