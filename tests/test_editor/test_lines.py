"""Tests for the line model behind the structural editor (layoutgen.editor.lines)."""

from __future__ import annotations

import textwrap

import pytest

from layoutgen.editor.lines import (
    SpecLines,
    format_scalar,
    indent_of,
    is_ignorable,
    is_item,
    scalar_text,
    split_key,
)

pytestmark = pytest.mark.unit


class TestLineHelpers:
    def test_indent_of(self):
        assert indent_of("    - name: x") == 4
        assert indent_of("name: x") == 0

    @pytest.mark.parametrize("line", ["", "   ", "# note", "    # nested note", "---"])
    def test_ignorable(self, line):
        assert is_ignorable(line) is True

    def test_not_ignorable(self):
        assert is_ignorable("  - name: x") is False

    def test_is_item(self):
        assert is_item("  - name: x") is True
        assert is_item("  -") is True
        assert is_item("  -name: x") is False
        assert is_item("  name: x") is False

    def test_split_key(self):
        assert split_key("  name: domain") == ("name", "domain")
        assert split_key("tree:") == ("tree", "")
        assert split_key("tree:   # later") == ("tree", "")
        assert split_key("- name: x") is None
        assert split_key("not a key") is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("domain", "domain"),
            ('"quoted name"', "quoted name"),
            ("'single'", "single"),
            ("model  # trailing comment", "model"),
            ("", ""),
            ("~", ""),
            ("123", "123"),
        ],
    )
    def test_scalar_text(self, raw, expected):
        assert scalar_text(raw) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("domain", "domain"),
            ("README.md", "README.md"),
            ("yes", '"yes"'),
            ("123", '"123"'),
            ("a: b", '"a: b"'),
            ("#tag", '"#tag"'),
            ('say "hi"', 'say "hi"'),
        ],
    )
    def test_format_scalar(self, name, expected):
        assert format_scalar(name) == expected


class TestSpecLines:
    def test_round_trip_text(self, multi_spec_text):
        assert SpecLines.parse(multi_spec_text).render() == multi_spec_text

    def test_round_trip_without_trailing_newline(self):
        text = "- name: a\n  lang: go"
        assert SpecLines.parse(text).render() == text

    def test_round_trip_crlf(self):
        text = "- name: a\r\n  lang: go\r\n"
        doc = SpecLines.parse(text)
        assert doc.newline == "\r\n"
        assert doc.render() == text

    def test_projects(self, multi_spec_text):
        doc = SpecLines.parse(multi_spec_text)
        projects = doc.projects()
        assert len(projects) == 2
        assert [doc.node_name(node) for node in projects] == ["api", "web"]
        # The blank line between projects stays outside the first block.
        assert doc.lines[projects[0].end] == ""

    def test_project_out_of_range(self, rust_spec_text):
        assert SpecLines.parse(rust_spec_text).project(1) is None

    def test_sections(self, rust_spec_text):
        doc = SpecLines.parse(rust_spec_text)
        project = doc.project(0)
        tree = doc.section(project, "tree")
        assert tree is not None
        (src,) = tree.items
        assert doc.node_name(src) == "src"
        assert doc.section(project, "file") is None

        files = doc.section(src, "file")
        assert [doc.node_name(item) for item in files.items] == ["main"]

    def test_value(self, rust_spec_text):
        doc = SpecLines.parse(rust_spec_text)
        project = doc.project(0)
        assert doc.value(project, "lang") == "rust"
        assert doc.value(project, "root") == "True"
        assert doc.value(project, "missing") is None

    def test_node_name_from_url(self):
        doc = SpecLines.parse("- name: v\n  lang: any\n  tree:\n    - from: git@host:org/lib.git\n")
        item = doc.section(doc.project(0), "tree").items[0]
        assert doc.node_name(item) == "lib"

    def test_dash_on_its_own_line(self):
        text = textwrap.dedent("""\
            -
              name: app
              lang: go
              tree:
                -
                  name: cmd
        """)
        doc = SpecLines.parse(text)
        project = doc.project(0)
        assert project.key_indent == 2
        assert doc.node_name(project) == "app"
        (cmd,) = doc.section(project, "tree").items
        assert doc.node_name(cmd) == "cmd"

    def test_inline_section(self):
        doc = SpecLines.parse("- name: a\n  lang: go\n  tree: []\n")
        section = doc.section(doc.project(0), "tree")
        assert section.items == ()
        assert section.is_inline_empty is True

    def test_list_offset(self):
        assert SpecLines.parse("- name: a\n  tree:\n  - name: b\n").list_offset() == 0
        assert SpecLines.parse("- name: a\n  tree:\n      - name: b\n").list_offset() == 4
        assert SpecLines.parse("- name: a\n").list_offset() == 2

    def test_editing(self):
        doc = SpecLines.parse("a\nb\nc\n")
        doc.insert(1, ["x", "y"])
        doc.delete(3, 4)
        doc.replace(0, "A")
        assert doc.render() == "A\nx\ny\nc\n"
