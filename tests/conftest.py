"""
テスト共通フィクスチャ・Hypothesis ストラテジー定義

全テストモジュールで共有するフィクスチャとデータ生成器を提供する。
"""

from pathlib import Path

import pytest
from hypothesis import strategies as st

from mdvars.core.processor import VariableProcessor
from mdvars.core.store import VariableStore


# ---------------------------------------------------------------------------
# pytest フィクスチャ
# ---------------------------------------------------------------------------

@pytest.fixture
def store() -> VariableStore:
    """空の VariableStore を提供する。"""
    return VariableStore()


@pytest.fixture
def processor() -> VariableProcessor:
    """空のストアを持つ VariableProcessor を提供する。"""
    return VariableProcessor()


@pytest.fixture
def sample_markdown() -> str:
    """変数宣言とプレースホルダーを含むサンプル Markdown。"""
    return """\
<!-- @var title: 週次レポート -->
<!-- @var author: 山田太郎 -->
# {{title}}

作成者: {{ author }}
バージョン: {{version}}
<!-- @include: footer.md -->
未定義: {{missing}}"""


@pytest.fixture
def sample_vars_yaml() -> str:
    """サンプルの変数セット YAML 文字列。"""
    return """\
variables:
  - name: version
    value: "1.0"
  - name: author
    value: グローバル著者
  - name: company
    value: Example Inc.
"""


@pytest.fixture
def sample_vars_file(tmp_path: Path, sample_vars_yaml: str) -> Path:
    """サンプル変数セット YAML を書き込んだファイルを提供する。"""
    path = tmp_path / "vars.yaml"
    path.write_text(sample_vars_yaml, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Hypothesis ストラテジー
# ---------------------------------------------------------------------------

# YAML の改行扱いになる文字・制御文字・サロゲートを含まない印字可能文字
_printable = st.characters(whitelist_categories=("L", "N", "P", "S", "Zs"))

# 制御文字・改行類を含む、サロゲート以外のすべての文字
_any_char = st.characters(blacklist_categories=("Cs",))


def make_variable_name_strategy():
    """宣言・プレースホルダーの両方で使える変数名を生成する。

    コロン・波括弧を含まず、前後に空白を持たない1文字以上の名前。
    """
    return st.text(
        alphabet=st.characters(
            whitelist_categories=("L", "N"),
            whitelist_characters="_-.",
        ),
        min_size=1,
        max_size=20,
    )


def make_variable_value_strategy():
    """宣言行に書ける変数値を生成する（前後の空白なし、改行なし）。"""
    return st.text(alphabet=_printable, max_size=30).map(str.strip)


def make_store_mapping_strategy():
    """ストアに設定する name → value 辞書を生成する（制御文字・改行類を含む）。"""
    return st.dictionaries(
        st.text(alphabet=_any_char, max_size=20),
        st.text(alphabet=_any_char, max_size=30),
        max_size=15,
    )


def make_document_line_strategy():
    """ドキュメントの1行（本文・変数宣言・include マーカー）を生成する。"""
    plain = st.text(
        alphabet=st.characters(blacklist_categories=("Cs",), blacklist_characters="\r\n"),
        max_size=40,
    )
    declaration = st.builds(
        lambda n, v, pad: f"{pad}<!-- @var {n}: {v} -->",
        make_variable_name_strategy(),
        make_variable_value_strategy(),
        st.sampled_from(["", "  ", "\t"]),
    )
    include = st.builds(
        lambda target: f"<!-- @include: {target} -->",
        make_variable_name_strategy(),
    )
    return st.one_of(plain, declaration, include)


def make_document_strategy():
    """複数行のドキュメントを生成する。"""
    return st.lists(make_document_line_strategy(), max_size=20).map("\n".join)
