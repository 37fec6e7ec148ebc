# DSL モジュール
# 変数セット YAML のスキーマ定義・パーサー、ドキュメント変数抽出、変数展開エンジンを提供

from . import schema  # noqa: F401
from . import parser  # noqa: F401
from . import extractor  # noqa: F401
from . import variables  # noqa: F401
