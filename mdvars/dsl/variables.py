"""
変数展開エンジン — {{name}} プレースホルダーの展開

テキスト内の {{name}} をファイル内変数 → グローバル変数の順に検索して置換する。

  - 名前は前後の空白を除いてから検索する（{{ name }} と {{name}} は同じ）
  - 最初の }} でマッチを終える。入れ子には対応しない
  - どちらにも存在しない名前は {{...}} のまま残す（エラーにはしない）
  - 置換後の値は再走査しない（値に含まれる {{...}} は展開されない）
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from ..core.store import VariableStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# プレースホルダーパターン
# ---------------------------------------------------------------------------

# {{ と }} の間に } を含まない1文字以上
_PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


# ---------------------------------------------------------------------------
# VariableExpander 本体
# ---------------------------------------------------------------------------

class VariableExpander:
    """テキスト内のプレースホルダーを展開するエンジン。

    ファイル内変数はコンストラクタでコピーして保持する。
    グローバル変数は VariableStore をその都度参照するため、
    展開中の並行 set() の結果が混ざることがある。
    """

    def __init__(
        self,
        store: Optional[VariableStore] = None,
        local_vars: Optional[Mapping[str, str]] = None,
    ) -> None:
        """変数展開エンジンを初期化する。

        Args:
            store: グローバル変数ストア（None の場合はファイル内変数のみで展開）
            local_vars: ファイル内変数の辞書
        """
        self._store = store
        self._local: dict[str, str] = dict(local_vars or {})

    # ----- 公開メソッド -----

    def expand(self, text: str) -> str:
        """テキスト内のプレースホルダーを1パスで展開する。

        Args:
            text: 展開対象のテキスト

        Returns:
            プレースホルダーが展開されたテキスト
        """
        return _PLACEHOLDER_PATTERN.sub(self._replace_match, text)

    def resolve(self, name: str) -> Optional[str]:
        """変数名をファイル内変数 → グローバル変数の順に解決する。

        Args:
            name: 変数名（前後の空白は除去される）

        Returns:
            変数の値。見つからない場合は None
        """
        key = name.strip()
        if key in self._local:
            return self._local[key]
        if self._store is not None:
            return self._store.get(key)
        return None

    @property
    def local_vars(self) -> dict[str, str]:
        """ファイル内変数辞書のコピーを返す。"""
        return dict(self._local)

    # ----- 内部メソッド -----

    def _replace_match(self, match: re.Match) -> str:
        value = self.resolve(match.group(1))
        if value is None:
            logger.debug("未定義の変数を展開せずに残しました: %s", match.group(0))
            return match.group(0)
        return value


def find_placeholders(text: str) -> list[str]:
    """テキスト内で参照されている変数名を出現順に返す（前後の空白は除去）。"""
    return [m.group(1).strip() for m in _PLACEHOLDER_PATTERN.finditer(text)]
