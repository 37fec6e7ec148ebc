"""
extract_variables のユニットテスト

<!-- @var name: value --> 宣言行の抽出と除去、
<!-- @include: ... --> マーカーの除去、それ以外の行の保持を検証する。
"""

from hypothesis import given

from conftest import make_document_strategy
from mdvars.dsl.extractor import extract_variables, split_lines, to_local_map
from mdvars.dsl.schema import Variable


# ---------------------------------------------------------------------------
# 変数宣言の抽出
# ---------------------------------------------------------------------------

class TestExtractDeclarations:
    """@var 宣言行の抽出テスト。"""

    def test_declaration_is_extracted_and_removed(self):
        """宣言行が変数として抽出され、出力から除去されること。"""
        variables, cleaned = extract_variables("line1\n<!-- @var a: 1 -->\nline2")
        assert variables == [Variable(name="a", value="1")]
        assert cleaned == "line1\nline2"

    def test_name_and_value_are_trimmed(self):
        """名前と値の前後の空白が除去されること。"""
        variables, _ = extract_variables("<!-- @var   title   :   週次レポート   -->")
        assert variables == [Variable(name="title", value="週次レポート")]

    def test_split_on_first_colon(self):
        """最初のコロンで分割され、値にはコロンが残ること。"""
        variables, _ = extract_variables("<!-- @var url: http://localhost:8080 -->")
        assert variables[0].name == "url"
        assert variables[0].value == "http://localhost:8080"

    def test_indented_declaration(self):
        """インデントされた宣言行も認識されること。"""
        variables, cleaned = extract_variables("text\n    <!-- @var a: b -->")
        assert variables == [Variable(name="a", value="b")]
        assert cleaned == "text"

    def test_empty_value(self):
        """値が空の宣言は空文字列の変数になること。"""
        variables, _ = extract_variables("<!-- @var empty: -->")
        assert variables == [Variable(name="empty", value="")]

    def test_duplicate_names_are_kept_in_order(self):
        """同名の宣言は重複排除されず出現順に返されること。"""
        variables, _ = extract_variables(
            "<!-- @var a: first -->\n<!-- @var a: second -->"
        )
        assert [v.value for v in variables] == ["first", "second"]


# ---------------------------------------------------------------------------
# 不正な宣言・マーカー
# ---------------------------------------------------------------------------

class TestMalformedAndReserved:
    """コロンなし宣言・include マーカーのテスト。"""

    def test_declaration_without_colon_is_dropped(self):
        """コロンのない宣言行は変数を生成せず、出力からも除去されること。"""
        variables, cleaned = extract_variables("before\n<!-- @var noColon -->\nafter")
        assert variables == []
        assert cleaned == "before\nafter"

    def test_empty_declaration_is_dropped(self):
        """本体が空の宣言行も除去されること。"""
        variables, cleaned = extract_variables("<!-- @var -->")
        assert variables == []
        assert cleaned == ""

    def test_include_marker_is_dropped(self):
        """include マーカーは除去され、何も生成しないこと。"""
        variables, cleaned = extract_variables("a\n<!-- @include: footer.md -->\nb")
        assert variables == []
        assert cleaned == "a\nb"

    def test_missing_suffix_is_plain_text(self):
        """終了マーカーの前に空白がない行は本文として残ること。"""
        content = "<!-- @var a: 1-->"
        variables, cleaned = extract_variables(content)
        assert variables == []
        assert cleaned == content

    def test_marker_in_middle_of_line_is_plain_text(self):
        """行の途中にある宣言は本文として残ること。"""
        content = "text <!-- @var a: 1 -->"
        variables, cleaned = extract_variables(content)
        assert variables == []
        assert cleaned == content


# ---------------------------------------------------------------------------
# 本文行の保持
# ---------------------------------------------------------------------------

class TestPassThrough:
    """宣言以外の行の保持テスト。"""

    def test_plain_lines_are_unchanged(self):
        """本文の行は空白を含めてそのまま残ること。"""
        content = "  indented\n\n# heading  \n{{placeholder}}"
        variables, cleaned = extract_variables(content)
        assert variables == []
        assert cleaned == content

    def test_crlf_lines_are_joined_with_lf(self):
        """CRLF 改行の宣言行も認識され、本文行は LF で連結されること。"""
        variables, cleaned = extract_variables("a\r\n<!-- @var x: y -->\r\nb")
        assert variables == [Variable(name="x", value="y")]
        assert cleaned == "a\nb"

    def test_trailing_newline_is_not_kept(self):
        """末尾の改行は最後の行の終端として扱われ、出力に残らないこと。"""
        variables, cleaned = extract_variables("a\n<!-- @var x: 1 -->\nb\n")
        assert variables == [Variable(name="x", value="1")]
        assert cleaned == "a\nb"

    def test_inner_empty_lines_are_kept(self):
        """途中の空行は保持され、最後の空行のみ終端として扱われること。"""
        _, cleaned = extract_variables("a\n\n<!-- @var x: 1 -->\nb\n\n")
        assert cleaned == "a\n\nb\n"

    def test_empty_document(self):
        """空のドキュメントは空のまま返ること。"""
        assert extract_variables("") == ([], "")

    @given(make_document_strategy())
    def test_re_extraction_is_idempotent(self, document: str):
        """抽出済みテキストを再抽出しても変数も行の除去も発生しないこと。

        末尾の空行は再抽出時に最後の行の終端として扱われるため、
        末尾の改行1つ分だけ短くなる。
        """
        _, cleaned = extract_variables(document)
        variables, cleaned_again = extract_variables(cleaned)
        assert variables == []
        assert cleaned_again == cleaned.removesuffix("\n")


# ---------------------------------------------------------------------------
# split_lines
# ---------------------------------------------------------------------------

class TestSplitLines:
    """split_lines() のテスト。"""

    def test_lf_and_crlf(self):
        """LF と CRLF の両方で分割されること。"""
        assert split_lines("a\nb\r\nc") == ["a", "b", "c"]

    def test_trailing_newline(self):
        """末尾の改行の後ろに空行を作らないこと。"""
        assert split_lines("a\n") == ["a"]
        assert split_lines("a\r\n") == ["a"]
        assert split_lines("\n") == [""]

    def test_empty_text(self):
        """空文字列は空リストになること。"""
        assert split_lines("") == []

    def test_lone_cr_is_not_a_separator(self):
        """単独の CR では分割されないこと。"""
        assert split_lines("a\rb") == ["a\rb"]


# ---------------------------------------------------------------------------
# to_local_map
# ---------------------------------------------------------------------------

class TestToLocalMap:
    """to_local_map() のテスト。"""

    def test_last_declaration_wins(self):
        """同名の変数は後の宣言が優先されること。"""
        variables = [
            Variable(name="a", value="1"),
            Variable(name="b", value="2"),
            Variable(name="a", value="3"),
        ]
        assert to_local_map(variables) == {"a": "3", "b": "2"}
