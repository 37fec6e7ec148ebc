"""
mdvars MCP Server — Markdown 変数展開サーバー

FastMCP を使用して、エディタやエージェントから変数の設定・一括入出力・
ドキュメント展開・ファイル読み書きを呼び出せる MCP サーバーを提供する。

ツールは1つの VariableProcessor（= 1つのグローバル変数ストア）を共有する。
ツール呼び出しは並行に実行されうるが、ストアは内部ロックで保護されている。
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from fastmcp import FastMCP

from ..core.documents import DocumentError, file_hash_info, read_document, save_document
from ..core.processor import VariableProcessor
from ..dsl.parser import VariableParseError
from .config import ServerConfig, load_config_from_env

logger = logging.getLogger(__name__)

SERVER_NAME = "mdvars"


def create_server(
    config: Optional[ServerConfig] = None,
    processor: Optional[VariableProcessor] = None,
) -> FastMCP:
    """mdvars MCP サーバーを生成する。

    Args:
        config: サーバー設定。None の場合は環境変数から読み込む。
        processor: 共有する VariableProcessor。None の場合は新規作成。

    Returns:
        設定済みの FastMCP サーバーインスタンス

    Raises:
        FileNotFoundError: config.vars_file が存在しない場合
        VariableParseError: config.vars_file が変数セットとして不正な場合
    """
    if config is None:
        config = load_config_from_env()
    if processor is None:
        processor = VariableProcessor()

    if config.vars_file:
        text = Path(config.vars_file).read_text(encoding="utf-8")
        processor.load_variables_from_yaml(text)
        logger.info("起動時の変数セットを読み込みました: %s", config.vars_file)

    mcp = FastMCP(SERVER_NAME)

    # -------------------------------------------------------------------
    # グローバル変数ツール
    # -------------------------------------------------------------------

    @mcp.tool
    def mdvars_set_variable(name: str, value: str) -> str:
        """Set a global variable, overwriting any previous value.

        Args:
            name: Variable name
            value: Variable value

        Returns:
            Status message
        """
        processor.set_global_variable(name, value)
        return f"Variable set: {name}"

    @mcp.tool
    def mdvars_get_variables() -> dict[str, str]:
        """Get a snapshot of all global variables.

        Returns:
            Mapping of variable name to value
        """
        return processor.get_all_global_variables()

    @mcp.tool
    def mdvars_load_variables(yaml_content: str) -> str:
        """Load global variables from a YAML variable set.

        The payload must look like `variables: [{name: ..., value: ...}]`.
        Nothing is changed when the payload is malformed.

        Args:
            yaml_content: YAML text

        Returns:
            Status message
        """
        try:
            processor.load_variables_from_yaml(yaml_content)
        except VariableParseError as e:
            logger.warning("変数セットの読み込みに失敗しました: %s", e)
            return f"Error: Failed to load variables: {e}"
        return f"Variables loaded. Total: {len(processor.store)}"

    @mcp.tool
    def mdvars_export_variables() -> str:
        """Export all global variables as a YAML variable set.

        Returns:
            YAML text
        """
        return processor.export_variables_to_yaml(sort_keys=config.sort_export)

    # -------------------------------------------------------------------
    # ドキュメント展開ツール
    # -------------------------------------------------------------------

    @mcp.tool
    def mdvars_process_markdown(
        content: str,
        global_variables: Optional[dict[str, str]] = None,
    ) -> str:
        """Expand {{name}} placeholders in a Markdown document.

        `<!-- @var name: value -->` lines declare document-local variables
        and are removed from the output. Local variables shadow globals.
        Unknown placeholders are left untouched.

        Args:
            content: Markdown text
            global_variables: Variables to set into the global store first

        Returns:
            Expanded text
        """
        return processor.process_markdown(content, global_variables)

    # -------------------------------------------------------------------
    # ファイルツール
    # -------------------------------------------------------------------

    @mcp.tool
    def mdvars_read_file(path: str) -> str:
        """Read a .md or .txt document.

        Args:
            path: File path

        Returns:
            File content, or an error message
        """
        try:
            return read_document(
                Path(path),
                max_size=config.max_file_size,
                allowed_extensions=config.allowed_extensions,
            )
        except DocumentError as e:
            return f"Error: {e}"

    @mcp.tool
    def mdvars_save_file(path: str, content: str) -> str:
        """Save a .md or .txt document, creating parent directories.

        Args:
            path: File path
            content: Text to write

        Returns:
            Status message
        """
        try:
            save_document(Path(path), content, allowed_extensions=config.allowed_extensions)
        except DocumentError as e:
            return f"Error: {e}"
        return f"File saved: {path}"

    @mcp.tool
    def mdvars_file_hash(path: str) -> dict[str, Any]:
        """Get SHA-256 hash, modified time and size for change detection.

        Args:
            path: File path

        Returns:
            {"hash", "modified_time", "file_size"} or {"error"}
        """
        try:
            return asdict(file_hash_info(Path(path), max_size=config.max_file_size))
        except DocumentError as e:
            return {"error": str(e)}

    return mcp


# ---------------------------------------------------------------------------
# エントリポイント（直接実行用）
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    from .config import apply_cli_args, build_cli_parser

    parser = build_cli_parser()
    args = parser.parse_args()

    srv_config = load_config_from_env()
    srv_config = apply_cli_args(srv_config, args)

    server = create_server(config=srv_config)
    server.run()
