"""
CLI エントリポイント — Typer ベースのコマンドラインインターフェース

mdvars コマンドとして以下のサブコマンドを提供する:
  - expand: ドキュメントの変数を展開して出力
  - extract: ドキュメント内の変数宣言とプレースホルダーを一覧表示
  - serve: MCP サーバー起動
  - vars validate / list / set / merge: 変数セット YAML の操作
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Typer アプリ定義
# ---------------------------------------------------------------------------

app = typer.Typer(
    help=(
        "mdvars — Markdown 変数展開ツール\n\n"
        "ドキュメント内の <!-- @var name: value --> 宣言と\n"
        "変数セット YAML の値で {{name}} を展開します。"
    ),
    no_args_is_help=True,
)

vars_app = typer.Typer(
    help="変数セット YAML の操作",
    no_args_is_help=True,
)
app.add_typer(vars_app, name="vars")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="デバッグログを表示する"),
) -> None:
    """ログ出力レベルを設定する。"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s - %(message)s",
    )


def _parse_assignment(text: str) -> tuple[str, str]:
    """NAME=VALUE 形式の文字列を分割する。"""
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise typer.BadParameter(f"NAME=VALUE 形式で指定してください: {text}")
    return name.strip(), value


def _load_processor(vars_files: Optional[list[Path]]):
    """変数セット YAML を順に読み込んだ VariableProcessor を返す。"""
    from .core.processor import VariableProcessor

    processor = VariableProcessor()
    for vars_file in vars_files or []:
        if not vars_file.exists():
            raise FileNotFoundError(f"YAML ファイルが見つかりません: {vars_file}")
        processor.load_variables_from_yaml(vars_file.read_text(encoding="utf-8"))
    return processor


# ---------------------------------------------------------------------------
# expand コマンド
# ---------------------------------------------------------------------------

@app.command()
def expand(
    document: Path = typer.Argument(..., help="展開する Markdown / テキストファイル"),
    vars_files: Optional[list[Path]] = typer.Option(
        None, "--vars", help="グローバル変数として読み込む変数セット YAML（複数指定可）",
    ),
    assignments: Optional[list[str]] = typer.Option(
        None, "--set", "-s", help="グローバル変数を NAME=VALUE で指定（複数指定可）",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="出力先ファイル（省略時は標準出力）",
    ),
) -> None:
    """ドキュメントの変数宣言を取り除き、{{name}} を展開する。"""
    from .core.documents import read_document, save_document

    try:
        processor = _load_processor(vars_files)
        scope = dict(_parse_assignment(a) for a in assignments or [])
        content = read_document(document)

        result = processor.process_markdown(content, scope)

        if output is None:
            typer.echo(result)
        else:
            save_document(output, result)
            typer.echo(f"展開結果を保存しました: {output}")
    except typer.BadParameter:
        raise
    except Exception as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# extract コマンド
# ---------------------------------------------------------------------------

@app.command()
def extract(
    document: Path = typer.Argument(..., help="解析する Markdown / テキストファイル"),
) -> None:
    """ドキュメント内の変数宣言と参照されているプレースホルダーを表示する。"""
    from .core.documents import read_document
    from .dsl.extractor import extract_variables, to_local_map
    from .dsl.variables import find_placeholders

    try:
        content = read_document(document)
    except Exception as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)

    variables, cleaned = extract_variables(content)
    local_map = to_local_map(variables)

    typer.echo(f"宣言: {len(variables)} 件")
    for v in variables:
        typer.echo(f"  {v.name}: {v.value}")

    names = list(dict.fromkeys(find_placeholders(cleaned)))
    typer.echo(f"参照: {len(names)} 件")
    for name in names:
        mark = "local" if name in local_map else "global?"
        typer.echo(f"  {{{{{name}}}}} ({mark})")


# ---------------------------------------------------------------------------
# serve コマンド
# ---------------------------------------------------------------------------

@app.command()
def serve(
    vars_file: Optional[Path] = typer.Option(
        None, "--vars", help="起動時に読み込む変数セット YAML",
    ),
) -> None:
    """MCP サーバーを起動する（stdio）。"""
    from .mcp.config import load_config_from_env
    from .mcp.server import create_server

    config = load_config_from_env()
    if vars_file is not None:
        config.vars_file = str(vars_file)

    try:
        server = create_server(config=config)
    except Exception as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)

    server.run()


# ---------------------------------------------------------------------------
# vars サブコマンド
# ---------------------------------------------------------------------------

@vars_app.command("validate")
def vars_validate(
    yaml_file: Path = typer.Argument(..., help="検証する変数セット YAML"),
) -> None:
    """変数セット YAML の形式を検証する。"""
    from .dsl.parser import VariableSetParser

    if not yaml_file.exists():
        typer.echo(f"エラー: YAML ファイルが見つかりません: {yaml_file}", err=True)
        raise typer.Exit(code=1)

    parser = VariableSetParser()
    errors = parser.validate(yaml_file.read_text(encoding="utf-8"))

    if not errors:
        typer.echo(f"✓ {yaml_file}: 検証 OK")
    else:
        for err in errors:
            line_info = f" (行 {err.line})" if err.line else ""
            typer.echo(f"✗ {err.location}{line_info}: {err.message}", err=True)
        raise typer.Exit(code=1)


@vars_app.command("list")
def vars_list(
    yaml_file: Path = typer.Argument(..., help="表示する変数セット YAML"),
) -> None:
    """変数セット YAML の内容を name: value 形式で表示する。"""
    try:
        processor = _load_processor([yaml_file])
    except Exception as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)

    variables = processor.get_all_global_variables()
    for name in sorted(variables):
        typer.echo(f"{name}: {variables[name]}")


@vars_app.command("set")
def vars_set(
    yaml_file: Path = typer.Argument(..., help="更新する変数セット YAML（なければ作成）"),
    name: str = typer.Argument(..., help="変数名"),
    value: str = typer.Argument(..., help="変数の値"),
) -> None:
    """変数セット YAML の変数を追加・上書きする。"""
    try:
        processor = _load_processor([yaml_file] if yaml_file.exists() else [])
        processor.set_global_variable(name, value)
        yaml_file.parent.mkdir(parents=True, exist_ok=True)
        yaml_file.write_text(processor.export_variables_to_yaml(), encoding="utf-8")
    except Exception as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{name} を設定しました: {yaml_file}")


@vars_app.command("merge")
def vars_merge(
    yaml_files: list[Path] = typer.Argument(..., help="統合する変数セット YAML（後のファイルが優先）"),
    output: Path = typer.Option(..., "--output", "-o", help="出力先 YAML ファイル"),
) -> None:
    """複数の変数セット YAML を1つに統合する。"""
    try:
        processor = _load_processor(yaml_files)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(processor.export_variables_to_yaml(), encoding="utf-8")
    except Exception as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{len(processor.store)} 件の変数を統合しました: {output}")
