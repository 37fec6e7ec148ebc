"""
ドキュメントファイルの読み書き — 拡張子・サイズ検証と変更検知用ハッシュ

エディタ側から渡されたパスのファイルを読み書きする薄いラッパー。
対象は .md / .txt（拡張子のないファイルは検査しない）、読み込みは 10MB までに制限する。
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_ALLOWED_EXTENSIONS: tuple[str, ...] = (".md", ".txt")

# サイズ上限を超えたファイルのハッシュ値
LARGE_FILE_HASH = "large_file"


class DocumentError(ValueError):
    """ドキュメントの読み書きに失敗した場合に送出される例外。"""


@dataclass
class FileHashInfo:
    """ファイル変更検知用の情報。

    Attributes:
        hash: 内容の SHA-256（16進）。サイズ上限超過時は "large_file"
        modified_time: 最終更新時刻（UNIX 秒）
        file_size: ファイルサイズ（バイト）
    """

    hash: str
    modified_time: int
    file_size: int


def _format_size(size: int) -> str:
    mib = 1024 * 1024
    if size >= mib and size % mib == 0:
        return f"{size // mib}MB"
    return f"{size} bytes"


def _join_extensions(extensions: Iterable[str]) -> str:
    names = sorted(extensions)
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + " and " + names[-1]


def _check_extension(path: Path, allowed_extensions: Iterable[str]) -> None:
    # 拡張子のないファイルは検査しない
    suffix = path.suffix.lower()
    if not suffix:
        return
    allowed = {ext.lower() for ext in allowed_extensions}
    if suffix not in allowed:
        names = _join_extensions(allowed)
        raise DocumentError(f"Unsupported file type. Only {names} files are supported")


def read_document(
    path: Path,
    max_size: int = DEFAULT_MAX_FILE_SIZE,
    allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
) -> str:
    """ドキュメントファイルを読み込む。

    Args:
        path: 読み込むファイルのパス
        max_size: 読み込みを許可する最大バイト数
        allowed_extensions: 許可する拡張子（小文字比較）

    Returns:
        ファイルの内容

    Raises:
        DocumentError: ファイルが存在しない、大きすぎる、拡張子が不正、読み込み失敗
    """
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError as e:
        raise DocumentError("File not found") from e

    if size > max_size:
        raise DocumentError(f"File too large (max {_format_size(max_size)})")

    _check_extension(path, allowed_extensions)

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError("Failed to read file") from e


def save_document(
    path: Path,
    content: str,
    allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
) -> None:
    """ドキュメントファイルを保存する。親ディレクトリは自動作成する。

    Raises:
        DocumentError: 拡張子が不正、ディレクトリ作成・書き込みに失敗
    """
    path = Path(path)
    _check_extension(path, allowed_extensions)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DocumentError("Failed to create directory") from e

    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise DocumentError("Failed to save file") from e
    logger.info("ファイルを保存しました: %s", path)


def file_hash_info(path: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> FileHashInfo:
    """変更検知用のハッシュ・更新時刻・サイズを返す。

    サイズ上限を超えるファイルは内容を読まず、hash に "large_file" を返す。

    Raises:
        DocumentError: ファイルが存在しない、または読み込みに失敗した場合
    """
    path = Path(path)
    try:
        stat = path.stat()
    except OSError as e:
        raise DocumentError("File not found") from e

    modified_time = int(stat.st_mtime)
    if stat.st_size > max_size:
        return FileHashInfo(LARGE_FILE_HASH, modified_time, stat.st_size)

    try:
        content = path.read_bytes()
    except OSError as e:
        raise DocumentError("Failed to read file") from e

    return FileHashInfo(hashlib.sha256(content).hexdigest(), modified_time, stat.st_size)
