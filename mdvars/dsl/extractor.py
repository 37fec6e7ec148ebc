"""
ドキュメント変数抽出 — Markdown 内の変数宣言行を取り出す

ドキュメントを1行ずつ処理し、以下のマーカー行を出力から取り除く。

  - <!-- @var name: value -->   ファイル内変数の宣言
  - <!-- @include: target -->   予約済みマーカー（現在は何もしない）

それ以外の行は元のまま LF 区切りで出力する。
行は LF または CRLF で区切り、末尾の改行は最後の行の終端として扱う。
"""

from __future__ import annotations

import logging

from .schema import Variable

logger = logging.getLogger(__name__)

VAR_PREFIX = "<!-- @var "
INCLUDE_PREFIX = "<!-- @include:"
MARKER_SUFFIX = " -->"


def split_lines(content: str) -> list[str]:
    """テキストを行に分割する。

    区切りは LF と CRLF のみ。末尾の改行の後ろに空行は作らず、
    空文字列は空リストになる。
    """
    lines = content.split("\n")
    last = lines.pop()
    lines = [line.removesuffix("\r") for line in lines]
    if last:
        lines.append(last)
    return lines


def extract_variables(content: str) -> tuple[list[Variable], str]:
    """ドキュメントからファイル内変数の宣言を抽出する。

    宣言本体は最初のコロンで名前と値に分割し、それぞれ前後の空白を除く。
    コロンのない宣言行は変数を生成せずに捨てる。
    同名の宣言は重複排除せず、出現順にすべて返す。

    Args:
        content: 元のドキュメントテキスト

    Returns:
        (宣言された変数のリスト, 宣言行を除いたテキスト)
    """
    variables: list[Variable] = []
    kept_lines: list[str] = []

    for line in split_lines(content):
        trimmed = line.strip()

        if trimmed.startswith(VAR_PREFIX) and trimmed.endswith(MARKER_SUFFIX):
            body = trimmed.removeprefix(VAR_PREFIX).removesuffix(MARKER_SUFFIX)
            name, sep, value = body.partition(":")
            if not sep:
                logger.debug("コロンのない変数宣言を無視しました: %s", trimmed)
                continue
            variables.append(Variable(name=name.strip(), value=value.strip()))
        elif trimmed.startswith(INCLUDE_PREFIX) and trimmed.endswith(MARKER_SUFFIX):
            # ファイル取り込みは未実装。行を除去するのみ
            continue
        else:
            kept_lines.append(line)

    return variables, "\n".join(kept_lines)


def to_local_map(variables: list[Variable]) -> dict[str, str]:
    """変数リストを検索用の辞書に畳み込む（同名は後勝ち）。"""
    return {v.name: v.value for v in variables}
