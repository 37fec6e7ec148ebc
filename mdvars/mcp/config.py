"""
MCP サーバー設定 — 環境変数・CLI 引数からの設定読み込み

環境変数または CLI 引数で MCP サーバーの動作を制御する。
CLI 引数 > 環境変数 > デフォルト値 の優先順位で適用される。

環境変数一覧:
  MDVARS_VARS_FILE          : 起動時に読み込む変数セット YAML（デフォルト: なし）
  MDVARS_MAX_FILE_SIZE      : 読み込みを許可する最大バイト数（デフォルト: 10485760）
  MDVARS_ALLOWED_EXTENSIONS : 許可する拡張子のカンマ区切り（デフォルト: .md,.txt）
  MDVARS_SORT_EXPORT        : エクスポート時に変数名でソートするか（true/false, デフォルト: true）
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.documents import DEFAULT_ALLOWED_EXTENSIONS, DEFAULT_MAX_FILE_SIZE

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# 環境変数キー定数
# ---------------------------------------------------------------------------

_ENV_VARS_FILE = "MDVARS_VARS_FILE"
_ENV_MAX_FILE_SIZE = "MDVARS_MAX_FILE_SIZE"
_ENV_ALLOWED_EXTENSIONS = "MDVARS_ALLOWED_EXTENSIONS"
_ENV_SORT_EXPORT = "MDVARS_SORT_EXPORT"


# ---------------------------------------------------------------------------
# 設定データクラス
# ---------------------------------------------------------------------------

@dataclass
class ServerConfig:
    """MCP サーバーの実行時設定。

    Attributes:
        vars_file: 起動時に読み込む変数セット YAML のパス
        max_file_size: 読み込みを許可する最大バイト数
        allowed_extensions: 読み書きを許可する拡張子
        sort_export: エクスポート時に変数名でソートするか
    """

    vars_file: Optional[str] = None
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    allowed_extensions: tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_ALLOWED_EXTENSIONS,
    )
    sort_export: bool = True


# ---------------------------------------------------------------------------
# 環境変数からの読み込み
# ---------------------------------------------------------------------------

def _parse_bool(value: str) -> bool:
    """文字列を bool に変換する。

    Args:
        value: "true", "1", "yes" → True、それ以外 → False

    Returns:
        変換結果
    """
    return value.lower() in ("true", "1", "yes")


def _parse_extensions(value: str) -> tuple[str, ...]:
    """カンマ区切りの拡張子リストを正規化する（小文字・先頭ドット付き）。"""
    exts = []
    for part in value.split(","):
        part = part.strip().lower()
        if not part:
            continue
        exts.append(part if part.startswith(".") else f".{part}")
    return tuple(exts)


def load_config_from_env() -> ServerConfig:
    """環境変数から ServerConfig を生成する。

    設定されていない環境変数はデフォルト値を使用する。

    Returns:
        環境変数から読み込んだ設定
    """
    config = ServerConfig()

    if os.environ.get(_ENV_VARS_FILE):
        config.vars_file = os.environ[_ENV_VARS_FILE]

    if _ENV_MAX_FILE_SIZE in os.environ:
        try:
            config.max_file_size = int(os.environ[_ENV_MAX_FILE_SIZE])
        except ValueError:
            logger.warning("MDVARS_MAX_FILE_SIZE の値が不正です: %s", os.environ[_ENV_MAX_FILE_SIZE])

    if _ENV_ALLOWED_EXTENSIONS in os.environ:
        exts = _parse_extensions(os.environ[_ENV_ALLOWED_EXTENSIONS])
        if exts:
            config.allowed_extensions = exts
        else:
            logger.warning("MDVARS_ALLOWED_EXTENSIONS が空です。デフォルトを使用します")

    if _ENV_SORT_EXPORT in os.environ:
        config.sort_export = _parse_bool(os.environ[_ENV_SORT_EXPORT])

    logger.info("設定を読み込みました: %s", config)
    return config


def build_cli_parser():
    """CLI 引数パーサーを構築する。

    Returns:
        argparse.ArgumentParser インスタンス
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="mdvars MCP Server - Markdown variable expansion",
    )
    parser.add_argument(
        "--vars", type=str, default=None, dest="vars_file",
        help="Variable set YAML to load on startup",
    )
    parser.add_argument(
        "--max-file-size", type=int, default=None,
        help="Maximum readable file size in bytes (default: 10485760)",
    )
    parser.add_argument(
        "--extensions", type=str, default=None,
        help="Comma separated allowed extensions (default: .md,.txt)",
    )
    parser.add_argument(
        "--unsorted-export", action="store_true", default=None,
        help="Export variables in store order instead of sorting by name",
    )
    return parser


def apply_cli_args(config: ServerConfig, args: Any) -> ServerConfig:
    """CLI 引数を ServerConfig に適用する。

    CLI 引数が指定されている場合のみ上書きする。

    Args:
        config: ベースとなる設定（環境変数から読み込み済み）
        args: argparse の解析結果

    Returns:
        CLI 引数が適用された設定
    """
    vars_file = getattr(args, "vars_file", None)
    if vars_file is not None:
        config.vars_file = vars_file

    max_file_size = getattr(args, "max_file_size", None)
    if max_file_size is not None:
        config.max_file_size = max_file_size

    extensions = getattr(args, "extensions", None)
    if extensions is not None:
        exts = _parse_extensions(extensions)
        if exts:
            config.allowed_extensions = exts
        else:
            logger.warning("--extensions が空です: %r", extensions)

    if getattr(args, "unsorted_export", None):
        config.sort_export = False

    return config
