"""ログ出力のインターフェース定義

このモジュールは、tgakitの変換処理のログ出力を定義する。
VerboseLevel (詳細ログレベル)に応じた出力制御を行い、
必要に応じてタイムスタンプ付きのログファイルにも書き出す。
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from tgakit.codec.header import TGAHeader
    from tgakit.converter import ConversionResult


class VerboseLevel(IntEnum):
    """詳細ログレベル

    ログ出力の詳細度を制御するための列挙型。
    QUIET: エラーのみ出力
    NORMAL: 変換結果のサマリ出力
    VERBOSE: ファイルごとの変換結果も出力（-vオプション）
    DEBUG: ヘッダーの内容も出力（-vvオプション）
    """

    QUIET = -1
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass
class LogConfig:
    """ログ設定

    Attributes:
        verbose_level: ログの詳細度レベル
        log_file: ログ出力先ファイルパス（Noneの場合はファイル出力なし）
    """

    verbose_level: VerboseLevel = VerboseLevel.NORMAL
    log_file: Path | None = None


class CodecLogger:
    """変換ログ出力クラス

    VerboseLevelに応じてメッセージのフィルタリングを行う。

    使用例:
        >>> config = LogConfig(verbose_level=VerboseLevel.VERBOSE)
        >>> with CodecLogger(config) as logger:
        ...     logger.info("変換を開始します")
        ...     logger.verbose("image.tga を処理中")
    """

    _ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

    def __init__(self, config: LogConfig | None = None) -> None:
        """ロガーを初期化する

        Args:
            config: ログ設定（Noneの場合はデフォルト設定）
        """
        self._config = config or LogConfig()
        self._log_file: TextIO | None = None
        if self._config.log_file:
            # クラス自体がコンテキストマネージャとして動作し、__exit__でファイルを閉じる
            self._log_file = open(self._config.log_file, "w", encoding="utf-8")  # noqa: SIM115

    def __enter__(self) -> CodecLogger:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """ログファイルを閉じる"""
        if self._log_file:
            self._log_file.close()
            self._log_file = None

    @property
    def config(self) -> LogConfig:
        """ログ設定を取得する"""
        return self._config

    def _print(self, message: str, file: TextIO | None = None) -> None:
        if file is None:
            file = sys.stdout
        print(message, file=file)

    def _log_to_file(self, level: str, message: str) -> None:
        """ファイルにログ出力する

        Args:
            level: ログレベル文字列
            message: 出力するメッセージ
        """
        if self._log_file:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            clean_message = self._ANSI_ESCAPE_PATTERN.sub("", message)
            self._log_file.write(f"[{timestamp}] {level}: {clean_message}\n")
            self._log_file.flush()

    def info(self, message: str) -> None:
        """情報メッセージを出力する（NORMAL以上）"""
        if self._config.verbose_level >= VerboseLevel.NORMAL:
            self._print(message)
        self._log_to_file("INFO", message)

    def verbose(self, message: str) -> None:
        """詳細メッセージを出力する（VERBOSE以上）"""
        if self._config.verbose_level >= VerboseLevel.VERBOSE:
            self._print(message)
        self._log_to_file("VERBOSE", message)

    def debug(self, message: str) -> None:
        """デバッグメッセージを出力する（DEBUG以上）"""
        if self._config.verbose_level >= VerboseLevel.DEBUG:
            self._print(message)
        self._log_to_file("DEBUG", message)

    def error(self, message: str) -> None:
        """エラーメッセージを出力する（常に出力）"""
        self._print(f"エラー: {message}", file=sys.stderr)
        self._log_to_file("ERROR", message)

    def warning(self, message: str) -> None:
        """警告メッセージを出力する（QUIET以上）"""
        if self._config.verbose_level > VerboseLevel.QUIET:
            self._print(f"警告: {message}")
        self._log_to_file("WARNING", message)

    def log_header(self, path: Path, header: TGAHeader) -> None:
        """ヘッダーの内容をログする（DEBUG以上）

        Args:
            path: 読み込んだファイルのパス
            header: 解析済みのヘッダー
        """
        self.debug(
            f"ヘッダー: {path.name} type={header.image_type} "
            f"{header.width}x{header.height} depth={header.pixel_depth} "
            f"map={header.map_type}/{header.map_length}x{header.map_entry_size} "
            f"descriptor=0x{header.descriptor:02x}"
        )

    def log_conversion(self, result: ConversionResult) -> None:
        """ファイル変換をログする（VERBOSE以上、失敗は警告）

        Args:
            result: 変換結果
        """
        dest_name = result.dest_path.name if result.dest_path else "-"
        line = f"変換: {result.source_path.name} -> {dest_name} [{result.status.value}]"
        if result.message:
            line += f" {result.message}"
        if result.is_failed:
            self.warning(line)
        else:
            self.verbose(line)
