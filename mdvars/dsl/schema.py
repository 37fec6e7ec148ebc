"""
変数セット スキーマ定義 — YAML 交換形式の Pydantic v2 モデル

グローバル変数の一括読み込み・書き出しに使用する YAML 形式を表現する。

    variables:
      - name: author
        value: 山田太郎
      - name: version
        value: "1.0"

VariableSet は交換形式（ワイヤ上の形）専用であり、
メモリ上の検索用インデックスとしては使わない（検索は VariableStore が担う）。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Variable(BaseModel):
    """1つの変数定義（名前と値の組）。

    値は展開時にそのまま埋め込まれる（型変換・エスケープなし）。
    YAML のスカラーは書かれた文字列のまま渡される（パーサー側で解決しない）。
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., strict=True, description="変数名（検索キー）")
    value: str = Field(..., strict=True, description="変数の値")


class VariableSet(BaseModel):
    """YAML 交換形式のルートモデル。変数定義の順序付きリストを持つ。"""

    model_config = ConfigDict(extra="ignore")

    variables: list[Variable] = Field(
        default_factory=list,
        description="変数定義の配列",
    )

    @field_validator("variables", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        """`variables:` のみで値が空の場合は空リストとして扱う。"""
        if v is None or v == "":
            return []
        return v

    @classmethod
    def from_mapping(cls, mapping: dict[str, str], sort_keys: bool = False) -> "VariableSet":
        """name → value の辞書から VariableSet を生成する。

        Args:
            mapping: 変数名と値の辞書
            sort_keys: True の場合は変数名でソートする

        Returns:
            生成された VariableSet
        """
        items = sorted(mapping.items()) if sort_keys else list(mapping.items())
        return cls(variables=[Variable(name=k, value=v) for k, v in items])

    def to_mapping(self) -> dict[str, str]:
        """変数リストを辞書に畳み込む（同名は後勝ち）。"""
        return {v.name: v.value for v in self.variables}
