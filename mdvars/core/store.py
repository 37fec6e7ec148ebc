"""
VariableStore — グローバル変数のスレッドセーフな保管庫

変数名 → 値の辞書を単一のロックで保護する。
ロックは1回の辞書操作の間だけ保持し、複数操作をまたがない。
そのため「読んで・計算して・書き戻す」操作は原子的ではない。
"""

from __future__ import annotations

import threading
from typing import Optional


class VariableStore:
    """グローバル変数の保管庫。

    プロセス全体で共有する想定だが、暗黙のシングルトンにはせず、
    所有者（VariableProcessor）が明示的に生成して参照を渡す。
    削除操作は提供しない。
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._vars: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        """変数を設定する。既存の値は上書きする。"""
        with self._lock:
            self._vars[name] = value

    def get(self, name: str) -> Optional[str]:
        """変数の現在値を返す。未定義の場合は None。"""
        with self._lock:
            return self._vars.get(name)

    def get_all(self) -> dict[str, str]:
        """呼び出し時点の全変数のスナップショット（コピー）を返す。"""
        with self._lock:
            return dict(self._vars)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._vars

    def __len__(self) -> int:
        with self._lock:
            return len(self._vars)

    def __repr__(self) -> str:
        return f"VariableStore({len(self)} vars)"
