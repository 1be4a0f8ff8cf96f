"""Tests for metrics/loc.py."""

import pytest

from depsurface.exceptions import LineCountError
from depsurface.metrics import LANGUAGES, LineCounter, LocReport, count_code_lines

RUST = LANGUAGES["rust"]
PYTHON = LANGUAGES["python"]


class TestCountCodeLines:
    def test_blank_and_comment_lines_skipped(self):
        src = "\n".join(
            [
                "// leading comment",
                "",
                "fn main() {",
                "    let x = 1; // trailing comment",
                "",
                "}",
            ]
        )
        assert count_code_lines(src, RUST) == 3

    def test_doc_comments_are_comments(self):
        src = "//! crate docs\n/// item docs\npub fn f() {}\n"
        assert count_code_lines(src, RUST) == 1

    def test_block_comments_span_lines(self):
        src = "/* start\n   still comment\n end */\nfn f() {}\n"
        assert count_code_lines(src, RUST) == 1

    def test_code_after_block_comment_counts(self):
        assert count_code_lines("/* note */ let a = 1;\n", RUST) == 1

    def test_nested_block_comments(self):
        src = "/* outer /* inner */ still outer */\nfn f() {}\n"
        assert count_code_lines(src, RUST) == 1

    def test_c_blocks_do_not_nest(self):
        src = "/* outer /* inner */\nint x;\n"
        assert count_code_lines(src, LANGUAGES["c"]) == 1

    def test_comment_marker_inside_string(self):
        assert count_code_lines('let url = "http://example.com";\n', RUST) == 1

    def test_multiline_string_counts_each_line(self):
        src = 'let s = "first\n// not a comment\nlast";\n'
        assert count_code_lines(src, RUST) == 3

    def test_lifetime_quote_is_not_a_string(self):
        src = "fn f<'a>(x: &'a str) {}\n// comment\n"
        assert count_code_lines(src, RUST) == 1

    def test_quote_char_literal_does_not_open_a_string(self):
        src = "fn q() -> char { '\"' }\n// comment one\n// comment two\n\nfn main() {}\n"
        assert count_code_lines(src, RUST) == 2

    @pytest.mark.parametrize("literal", ["'\\''", "'\\\\'", "'\\x22'", "'\\u{201C}'", "b'\"'"])
    def test_escaped_char_literals(self, literal):
        src = f"let c = {literal};\n// \"quoted\" comment\n"
        assert count_code_lines(src, RUST) == 1

    def test_raw_string_ignores_backslash(self):
        src = 'let p = r"C:\\";\n// comment\nfn f() {}\n'
        assert count_code_lines(src, RUST) == 2

    def test_hashed_raw_string_spans_lines(self):
        src = 'let s = r#"a "quoted" // word\nsecond line\n"#;\n// comment\n'
        assert count_code_lines(src, RUST) == 3

    def test_byte_raw_string(self):
        src = 'let b = br##"x"#y"##; // tail\n/* block */\n'
        assert count_code_lines(src, RUST) == 1

    def test_raw_identifier_is_not_a_raw_string(self):
        src = "let r#type = 1;\n// comment\n"
        assert count_code_lines(src, RUST) == 1

    def test_hash_comments(self):
        src = "# comment\nimport os\n\n    # indented comment\nx = 1  # trailing\n"
        assert count_code_lines(src, PYTHON) == 2

    def test_empty_text(self):
        assert count_code_lines("", RUST) == 0


class TestLineCounter:
    @pytest.fixture
    def crate(self, tmp_path):
        root = tmp_path / "mycrate-0.1.0"
        (root / "src").mkdir(parents=True)
        (root / "src" / "lib.rs").write_text("//! docs\npub fn a() {}\npub fn b() {}\n")
        (root / "build.rs").write_text("fn main() {}\n")
        (root / "Cargo.toml").write_text('[package]\nname = "mycrate"\n# comment\n')
        (root / "README.md").write_text("# Not counted\n")
        (root / "ffi.c").write_text("int x;\n")
        return root

    def test_counts_total_and_primary_language(self, crate):
        report = LineCounter().count(crate)
        # rust: 2 + 1, toml: 2, c: 1
        assert report == LocReport(total_loc=6, language_loc=3)

    def test_target_directory_excluded(self, crate):
        (crate / "target" / "debug").mkdir(parents=True)
        (crate / "target" / "debug" / "gen.rs").write_text("fn g() {}\n" * 50)
        assert LineCounter().count(crate).language_loc == 3

    def test_hidden_files_counted_by_default(self, crate):
        (crate / ".cargo").mkdir()
        (crate / ".cargo" / "config.toml").write_text("[build]\n")
        assert LineCounter().count(crate).total_loc == 7
        assert LineCounter(count_hidden=False).count(crate).total_loc == 6

    def test_other_primary_language(self, crate):
        report = LineCounter(primary_language="c").count(crate)
        assert report == LocReport(total_loc=6, language_loc=1)

    def test_empty_directory_is_zero(self, tmp_path):
        assert LineCounter().count(tmp_path) == LocReport.zero()

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(LineCountError) as exc_info:
            LineCounter().count(tmp_path / "missing")
        assert exc_info.value.path == tmp_path / "missing"

    def test_unknown_language_rejected(self):
        with pytest.raises(ValueError, match="Unknown language"):
            LineCounter(primary_language="cobol")
