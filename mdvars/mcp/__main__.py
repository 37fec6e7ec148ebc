"""
mdvars MCP Server CLI エントリポイント

python -m mdvars.mcp で MCP サーバーを起動する。
CLI 引数と環境変数でサーバー設定を制御できる。

使用例:
  python -m mdvars.mcp                        # デフォルト設定で起動
  python -m mdvars.mcp --vars vars.yaml       # 変数セットを読み込んで起動
  python -m mdvars.mcp --extensions md,txt,markdown

環境変数:
  MDVARS_VARS_FILE=vars.yaml                  # 起動時に読み込む変数セット
  MDVARS_SORT_EXPORT=false                    # エクスポートをソートしない
"""

from __future__ import annotations

from .config import apply_cli_args, build_cli_parser, load_config_from_env
from .server import create_server

# 環境変数 → CLI 引数の順で設定を構築
_config = load_config_from_env()
_parser = build_cli_parser()
_args = _parser.parse_args()
_config = apply_cli_args(_config, _args)

server = create_server(config=_config)
server.run()
