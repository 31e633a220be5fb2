"""CLI entry point for tgakit."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from tgakit import __version__
from tgakit.codec import TGADecoder
from tgakit.config import (
    SUPPORTED_OUTPUT_FORMATS,
    ConfigError,
    OutputConfig,
    TgakitConfig,
    get_default_config,
    load_config,
)
from tgakit.converter import ConversionStatus, TGAConverter
from tgakit.errors import TGAError
from tgakit.logger import CodecLogger, LogConfig, VerboseLevel
from tgakit.types import ExitCode, ImageType

app = typer.Typer(help="TGA (Truevision TARGA) 画像の解析・変換を行うCLIツール")
console = Console()


def _format_size(size_bytes: int) -> str:
    """バイト数を人間が読みやすい形式に変換する"""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def _load_config(config_path: Path | None) -> TgakitConfig:
    if config_path is None:
        return get_default_config()
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT) from None


@app.command()
def info(
    input_path: Annotated[Path, typer.Argument(help="TGAファイルパス")],
) -> None:
    """TGAファイルのヘッダー情報を表示する"""
    if not input_path.is_file():
        console.print(f"[red]Error: ファイルが見つかりません: {input_path}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT)

    decoder = TGADecoder()
    try:
        header = decoder.read_header(input_path)
    except TGAError as e:
        console.print(f"[red]Error: ({e.kind.value}) {e}[/red]")
        raise typer.Exit(ExitCode.ERROR) from None

    table = Table(title=input_path.name)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Image Type", f"{ImageType(header.image_type).name} ({header.image_type})")
    table.add_row("Pixel Format", header.pixel_format().value)
    table.add_row("Size", f"{header.width} x {header.height}")
    table.add_row("Pixel Depth", f"{header.pixel_depth} bits")
    table.add_row("Origin", f"({header.x_origin}, {header.y_origin})")
    table.add_row("Alpha Bits", str(header.alpha_bits))
    table.add_row(
        "Flip",
        ", ".join(
            name
            for name, enabled in (
                ("horizontal", header.flip_horizontal),
                ("vertical", header.flip_vertical),
            )
            if enabled
        )
        or "none",
    )

    table.add_section()
    if header.map_type:
        table.add_row("Color Map", f"{header.map_length} entries x {header.map_entry_size} bits")
        table.add_row("  First Entry", str(header.map_first_entry))
    else:
        table.add_row("Color Map", "[dim]なし[/dim]")
    table.add_row("Image ID", f"{header.id_length} bytes")
    table.add_row("File Size", _format_size(input_path.stat().st_size))

    console.print(table)
    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def convert(
    sources: Annotated[list[Path], typer.Argument(help="変換元ファイル（TGA/PNG/BMP等）")],
    output_dir: Annotated[
        Path | None, typer.Option("-o", "--output-dir", help="出力ディレクトリ")
    ] = None,
    output_format: Annotated[
        str | None, typer.Option("--format", help="TGAの出力形式（png/tga）")
    ] = None,
    overwrite: Annotated[bool, typer.Option("--overwrite", help="既存ファイルを上書きする")] = False,
    verbose: Annotated[int, typer.Option("-v", "--verbose", count=True, help="詳細ログ出力")] = 0,
    quiet: Annotated[bool, typer.Option("-q", "--quiet", help="エラー以外を出力しない")] = False,
    config_path: Annotated[Path | None, typer.Option("--config", help="設定ファイル")] = None,
    log_file: Annotated[Path | None, typer.Option(help="ログファイル出力先")] = None,
) -> None:
    """TGAとPNG等の画像形式を相互に変換する"""
    config = _load_config(config_path)

    fmt = (output_format or config.output.format).lower()
    if fmt not in SUPPORTED_OUTPUT_FORMATS:
        console.print(f"[red]Error: 未対応の出力形式です: {fmt}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT)

    missing = [source for source in sources if not source.is_file()]
    if missing:
        for source in missing:
            console.print(f"[red]Error: ファイルが見つかりません: {source}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT)

    output_config = OutputConfig(
        format=fmt,
        overwrite=overwrite or config.output.overwrite,
    )

    if quiet:
        level = VerboseLevel.QUIET
    else:
        level = VerboseLevel(min(max(verbose, config.logging.verbose), VerboseLevel.DEBUG))

    log_config = LogConfig(verbose_level=level, log_file=log_file or config.logging.log_file)

    with CodecLogger(log_config) as logger:
        converter = TGAConverter(output_config, logger)
        results = converter.convert_many(sources, output_dir)

        succeeded = sum(1 for r in results if r.status == ConversionStatus.SUCCESS)
        skipped = sum(1 for r in results if r.status == ConversionStatus.SKIPPED)
        failed = sum(1 for r in results if r.status == ConversionStatus.FAILED)
        logger.info(f"変換完了: 成功 {succeeded} / スキップ {skipped} / 失敗 {failed}")

    if failed:
        raise typer.Exit(ExitCode.ERROR)
    raise typer.Exit(ExitCode.SUCCESS)


def version_callback(value: bool) -> None:
    """バージョン表示コールバック"""
    if value:
        typer.echo(f"tgakit {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="バージョンを表示する",
        ),
    ] = False,
) -> None:
    """tgakit CLI - TGA画像の解析・変換"""
    pass
