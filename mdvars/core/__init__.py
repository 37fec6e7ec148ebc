# コアモジュール
# グローバル変数ストア、変数処理の窓口、ドキュメントファイルの読み書きを提供

from .documents import DocumentError, FileHashInfo, file_hash_info, read_document, save_document
from .processor import VariableProcessor
from .store import VariableStore

__all__ = [
    "DocumentError",
    "FileHashInfo",
    "VariableProcessor",
    "VariableStore",
    "file_hash_info",
    "read_document",
    "save_document",
]
