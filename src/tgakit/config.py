"""Configuration module for tgakit."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

SUPPORTED_OUTPUT_FORMATS = ("png", "tga")


class ConfigError(Exception):
    """設定ファイル読み込みエラー"""

    pass


@dataclass(frozen=True)
class OutputConfig:
    """出力設定"""

    format: str = "png"
    overwrite: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    """ログ設定"""

    verbose: int = 0
    log_file: Path | None = None


@dataclass(frozen=True)
class TgakitConfig:
    """ルート設定"""

    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path) -> TgakitConfig:
    """設定ファイルを読み込む

    Args:
        path: 設定ファイルパス

    Returns:
        TgakitConfig: 読み込んだ設定（デフォルトとマージ済み）

    Raises:
        ConfigError: ファイル読み込みまたはパースエラー、不正な値
    """
    if not path.exists():
        raise ConfigError(f"設定ファイルが見つかりません: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML解析エラー: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("設定ファイルはYAMLのマッピング形式である必要があります")

    default = get_default_config()

    return TgakitConfig(
        output=_merge_output_config(data.get("output", {}), default.output),
        logging=_merge_logging_config(data.get("logging", {}), default.logging),
    )


def get_default_config() -> TgakitConfig:
    """デフォルト設定を取得する"""
    return TgakitConfig()


def _merge_output_config(data: dict[str, Any], default: OutputConfig) -> OutputConfig:
    """出力設定をマージする"""
    if not isinstance(data, dict):
        return default

    output_format = str(data.get("format", default.format)).lower()
    if output_format not in SUPPORTED_OUTPUT_FORMATS:
        raise ConfigError(
            f"未対応の出力形式です: {output_format} (対応形式: {', '.join(SUPPORTED_OUTPUT_FORMATS)})"
        )

    return OutputConfig(
        format=output_format,
        overwrite=bool(data.get("overwrite", default.overwrite)),
    )


def _merge_logging_config(data: dict[str, Any], default: LoggingConfig) -> LoggingConfig:
    """ログ設定をマージする"""
    if not isinstance(data, dict):
        return default

    log_file = data.get("log_file", default.log_file)
    return LoggingConfig(
        verbose=int(data.get("verbose", default.verbose)),
        log_file=Path(log_file) if log_file else None,
    )
