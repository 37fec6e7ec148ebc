"""
mdvars MCP Server パッケージ

Markdown 変数展開の操作を MCP (Model Context Protocol) ツールとして公開する。

主な構成:
  - server: FastMCP サーバー本体（ツール定義）
  - config: 環境変数・CLI 引数からの設定読み込み
"""

from __future__ import annotations


def create_server(config=None, processor=None):  # type: ignore[no-untyped-def]
    """mdvars MCP サーバーを生成する（遅延インポート）。

    `python -m mdvars.mcp.server` 実行時の RuntimeWarning を回避するため、
    server モジュールの import をここで遅延させる。

    Args:
        config: ServerConfig インスタンス（None で環境変数から読み込み）
        processor: 共有する VariableProcessor（None で新規作成）

    Returns:
        設定済みの FastMCP サーバーインスタンス
    """
    from .server import create_server as _create
    return _create(config=config, processor=processor)


__all__ = [
    "create_server",
]
