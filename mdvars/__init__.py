"""
mdvars — Markdown ドキュメントの変数宣言・展開エンジン

ドキュメント内で <!-- @var name: value --> と宣言した変数や、
グローバル変数ストアの値を {{name}} プレースホルダーに展開する。
"""

from .core.processor import VariableProcessor
from .core.store import VariableStore
from .dsl.parser import VariableParseError

__version__ = "0.1.0"

__all__ = [
    "VariableParseError",
    "VariableProcessor",
    "VariableStore",
]
