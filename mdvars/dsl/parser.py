"""
変数セット パーサー — YAML 交換形式の読み込み・書き出し・検証

ruamel.yaml で YAML テキストを読み書きし、
Pydantic の VariableSet モデルとの相互変換を行う。

スカラーは型解決をしない base ローダーで読み込み、書かれた文字列のまま扱う。
読み込みはすべて検証が終わってから値を返すため、
途中まで正しいペイロードでも失敗時に部分的な結果は返らない。
"""

from __future__ import annotations

import io
import logging
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

from .schema import VariableSet

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 例外・バリデーションエラー表現
# ---------------------------------------------------------------------------

class VariableParseError(ValueError):
    """YAML ペイロードが VariableSet の形として解釈できない場合に送出される例外。

    Attributes:
        line: YAML 内の行番号（1始まり。取得できない場合は None）
    """

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        super().__init__(message)


@dataclass
class VariableSetValidationError:
    """変数セット YAML の検証で検出されたエラー。

    Attributes:
        message: エラーメッセージ
        location: エラー箇所（フィールドパス等）
        line: YAML 内の行番号（取得可能な場合）
    """

    message: str
    location: str = ""
    line: Optional[int] = None


# ---------------------------------------------------------------------------
# 書き出し用の引用
# ---------------------------------------------------------------------------

# YAML が改行として扱う文字（プレーン・単一引用符では空白に畳まれる）
_YAML_LINE_BREAKS = frozenset("\x85\u2028\u2029")


def _quote_if_needed(text: str) -> str:
    """制御文字・改行類を含む文字列をエスケープ付きの二重引用符スタイルにする。"""
    for ch in text:
        if ch in _YAML_LINE_BREAKS or unicodedata.category(ch).startswith("C"):
            return DoubleQuotedScalarString(text)
    return text


# ---------------------------------------------------------------------------
# VariableSetParser 本体
# ---------------------------------------------------------------------------

class VariableSetParser:
    """変数セット YAML の読み込み・書き出し・検証を担当するパーサー。"""

    def __init__(self) -> None:
        """読み込み用・書き出し用の ruamel.yaml インスタンスを初期化する。"""
        self._loader = YAML(typ="base")
        self._yaml = YAML()
        self._yaml.default_flow_style = False
        self._yaml.allow_unicode = True

    # ----- loads / dumps -----

    def loads(self, text: str) -> VariableSet:
        """YAML テキストを VariableSet に変換する。

        空のテキスト、および variables キーを持たないマッピングは
        空の VariableSet として扱う。

        Args:
            text: YAML テキスト

        Returns:
            パース済みの VariableSet

        Raises:
            VariableParseError: YAML 構文エラー、またはスキーマ不一致の場合
        """
        data = self._load_raw(text)
        if data is None:
            return VariableSet()

        if not isinstance(data, dict):
            raise VariableParseError(
                f"変数セットのルートはマッピングである必要があります: {type(data).__name__}"
            )

        try:
            return VariableSet(**self._to_plain(data))
        except PydanticValidationError as e:
            raise VariableParseError(f"変数セットのスキーマ検証エラー: {e}") from e

    def dumps(self, variable_set: VariableSet) -> str:
        """VariableSet を YAML テキストに書き出す。

        Args:
            variable_set: 書き出す VariableSet

        Returns:
            YAML テキスト
        """
        data = {
            "variables": [
                {"name": _quote_if_needed(v.name), "value": _quote_if_needed(v.value)}
                for v in variable_set.variables
            ]
        }
        buf = io.StringIO()
        self._yaml.dump(data, buf)
        return buf.getvalue()

    # ----- ファイル入出力 -----

    def load(self, path: Path) -> VariableSet:
        """YAML ファイルを読み込み VariableSet に変換する。

        Raises:
            FileNotFoundError: ファイルが存在しない場合
            VariableParseError: YAML 構文エラー、またはスキーマ不一致の場合
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"YAML ファイルが見つかりません: {path}")
        return self.loads(path.read_text(encoding="utf-8"))

    def dump(self, variable_set: VariableSet, path: Path) -> None:
        """VariableSet を YAML ファイルに書き出す。親ディレクトリは自動作成する。"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.dumps(variable_set), encoding="utf-8")

    # ----- validate -----

    def validate(self, text: str) -> list[VariableSetValidationError]:
        """YAML テキストを検証し、違反箇所をリストで返す。

        エラーがない場合は空リストを返す。例外は送出しない。

        Args:
            text: 検証する YAML テキスト

        Returns:
            検出されたバリデーションエラーのリスト
        """
        errors: list[VariableSetValidationError] = []

        try:
            data = self._load_raw(text)
        except VariableParseError as e:
            errors.append(VariableSetValidationError(
                message=str(e),
                location="yaml",
                line=e.line,
            ))
            return errors

        if data is None:
            return errors

        if not isinstance(data, dict):
            errors.append(VariableSetValidationError(
                message="変数セットのルートはマッピングである必要があります",
                location="root",
            ))
            return errors

        try:
            VariableSet(**self._to_plain(data))
        except PydanticValidationError as e:
            for err in e.errors():
                loc_parts = [str(part) for part in err.get("loc", [])]
                location = " -> ".join(loc_parts) if loc_parts else "unknown"
                errors.append(VariableSetValidationError(
                    message=err.get("msg", "不明なエラー"),
                    location=location,
                ))

        return errors

    # ----- ユーティリティ -----

    def _load_raw(self, text: str) -> object:
        """YAML テキストを読み込み、行番号付きのエラーに変換する。"""
        try:
            return self._loader.load(text)
        except YAMLError as e:
            line = None
            line_info = ""
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                line = mark.line + 1
                line_info = f" (行 {mark.line + 1}, 列 {mark.column + 1})"
            raise VariableParseError(f"YAML 構文エラー{line_info}: {e}", line=line) from e

    def _to_plain(self, data: object) -> object:
        """ruamel.yaml の CommentedMap/CommentedSeq を通常の dict/list に再帰変換する。

        キーは文字列に揃える。Pydantic へのキーワード展開に必要なため。
        """
        if isinstance(data, dict):
            return {str(key): self._to_plain(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self._to_plain(item) for item in data]
        return data
