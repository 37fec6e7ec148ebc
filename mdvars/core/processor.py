"""
VariableProcessor — 変数抽出・展開・一括入出力の窓口

1つの VariableStore を所有し、呼び出し側（MCP サーバー・CLI）に
以下の操作を提供する。

  - set_global_variable / get_all_global_variables: グローバル変数の設定・取得
  - load_variables_from_yaml / export_variables_to_yaml: YAML での一括入出力
  - process_markdown: ドキュメントの変数抽出と展開
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..dsl.extractor import extract_variables, to_local_map
from ..dsl.parser import VariableSetParser
from ..dsl.schema import Variable, VariableSet
from ..dsl.variables import VariableExpander
from .store import VariableStore

logger = logging.getLogger(__name__)


class VariableProcessor:
    """グローバル変数ストアを所有し、展開処理を行うクラス。

    Extractor と Expander は呼び出しごとに使い捨てのため、
    複数スレッドから同時に呼び出してよい。
    """

    def __init__(
        self,
        store: Optional[VariableStore] = None,
        parser: Optional[VariableSetParser] = None,
    ) -> None:
        """VariableProcessor を初期化する。

        Args:
            store: 使用するストア（None の場合は新規作成）
            parser: YAML パーサー（None の場合は新規作成）
        """
        self._store = store if store is not None else VariableStore()
        self._parser = parser if parser is not None else VariableSetParser()

    @property
    def store(self) -> VariableStore:
        """所有しているグローバル変数ストア。"""
        return self._store

    # ----- グローバル変数 -----

    def set_global_variable(self, name: str, value: str) -> None:
        """グローバル変数を設定する（上書き）。"""
        self._store.set(name, value)

    def get_global_variable(self, name: str) -> Optional[str]:
        """グローバル変数を取得する。未定義の場合は None。"""
        return self._store.get(name)

    def get_all_global_variables(self) -> dict[str, str]:
        """すべてのグローバル変数のスナップショットを返す。"""
        return self._store.get_all()

    # ----- ドキュメント処理 -----

    def parse_variables_from_markdown(self, content: str) -> tuple[list[Variable], str]:
        """ドキュメントからファイル内変数を抽出する。

        Returns:
            (宣言された変数のリスト, 宣言行を除いたテキスト)
        """
        return extract_variables(content)

    def process_variables(self, content: str) -> str:
        """ドキュメント内の変数宣言を取り除き、プレースホルダーを展開する。"""
        file_variables, processed = extract_variables(content)
        expander = VariableExpander(self._store, to_local_map(file_variables))
        return expander.expand(processed)

    def process_markdown(
        self,
        content: str,
        global_variables: Optional[Mapping[str, str]] = None,
    ) -> str:
        """グローバル変数を事前設定してからドキュメントを展開する。

        global_variables の各エントリはストアに set() され、
        以降の呼び出しにも残る。

        Args:
            content: 元のドキュメントテキスト
            global_variables: ストアに事前設定する変数（省略可）

        Returns:
            展開後のテキスト
        """
        if global_variables:
            for name, value in global_variables.items():
                self._store.set(name, value)
        return self.process_variables(content)

    # ----- YAML 入出力 -----

    def load_variables_from_yaml(self, yaml_content: str) -> None:
        """YAML テキストから変数を読み込み、グローバル変数に設定する。

        パースと検証をすべて終えてから set() するため、
        失敗時にストアは変更されない。

        Raises:
            VariableParseError: YAML が変数セットとして解釈できない場合
        """
        var_set = self._parser.loads(yaml_content)
        for v in var_set.variables:
            self._store.set(v.name, v.value)
        logger.info("変数を読み込みました: %d件", len(var_set.variables))

    def export_variables_to_yaml(self, sort_keys: bool = True) -> str:
        """グローバル変数を YAML テキストとして書き出す。

        Args:
            sort_keys: True の場合は変数名順に並べる。False の場合は
                スナップショットの列挙順（順序は保証されない）

        Returns:
            YAML テキスト
        """
        var_set = VariableSet.from_mapping(self._store.get_all(), sort_keys=sort_keys)
        return self._parser.dumps(var_set)
