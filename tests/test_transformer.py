"""
Tests for the source stream transformer (bundle stage).
"""

from unittest.mock import MagicMock

import pytest

from arcbuilder.core.transformer import (
    SourceStreamTransformer,
    TransformError,
    fixup,
    merge,
    prepare,
    rejoin,
    split,
)
from arcbuilder.domain.models import DocumentKind, SourceDocument

HTML = (
    "<dom-module id=\"x-el\">\n"
    "<!-- markup comment -->\n"
    "<script>if (a --> 0) { run(); }</script>\n"
    "<script src=\"external.js\"></script>\n"
    "<script type=\"text/template\">keep --> me</script>\n"
    "<script type=\"module\">b-->c</script>\n"
    "</dom-module>\n"
)


def _doc(path, content):
    return SourceDocument.from_text(path, content)


class FakeBundler:
    """Bundler double that records its input."""

    def __init__(self, content="BUNDLED"):
        self.content = content
        self.calls = []

    def bundle(self, entrypoint, documents):
        self.calls.append((entrypoint, list(documents)))
        return [SourceDocument.from_text(entrypoint, self.content)]


class TestSplit:
    """Tests for splitting inline scripts out of HTML."""

    def test_split_inline_scripts(self):
        """Test that only inline JavaScript is split out."""
        result = split([_doc("x-el.html", HTML)])
        assert [d.path for d in result] == [
            "x-el.html",
            "x-el.html_script_0.js",
            "x-el.html_script_1.js",
        ]
        markup, first, second = result
        assert markup.scripts == 2
        assert first.kind == DocumentKind.SCRIPT
        assert first.origin == "x-el.html"
        assert first.index == 0
        assert first.content == "if (a --> 0) { run(); }"
        assert second.content == "b-->c"
        assert "keep --> me" in markup.content
        assert "if (a" not in markup.content

    def test_non_html_untouched(self):
        docs = [_doc("a.js", "x-->y"), _doc("a.css", "p {}")]
        assert split(docs) == docs

    def test_split_twice_raises(self):
        """Test that a split stream cannot be split again."""
        once = split([_doc("x-el.html", HTML)])
        with pytest.raises(TransformError):
            split(once)


class TestFixup:
    """Tests for the script fix-up."""

    def test_fixes_scripts_only(self):
        docs = [_doc("a.js", "x-->y"), _doc("a.html", "<!-- c -->"), _doc("a.css", "/* --> */")]
        result = fixup(docs)
        assert result[0].content == "x-- >y"
        assert result[1].content == "<!-- c -->"
        assert result[2].content == "/* --> */"

    def test_prepare_keeps_markup_comments(self):
        """Test the full split, fixup, rejoin cycle on one document."""
        (result,) = prepare([_doc("x-el.html", HTML)])
        assert "<!-- markup comment -->" in result.content
        assert "<script>if (a -- > 0) { run(); }</script>" in result.content
        assert "keep --> me" in result.content
        assert "b-- >c" in result.content
        assert result.scripts == 0

    def test_script_tag_inside_comment_is_text(self):
        """Test that a "<script>" mentioned in a comment does not open a script."""
        content = "<!-- usage: <script> -->\n<p>ok</p>\n<script>a-->b</script>\n"
        assert len(split([_doc("x.html", content)])) == 2
        (result,) = prepare([_doc("x.html", content)])
        assert result.content == "<!-- usage: <script> -->\n<p>ok</p>\n<script>a-- >b</script>\n"

    def test_prepare_without_sequence_is_identity(self):
        """Test that documents without the sequence come back unchanged."""
        doc = _doc("y.html", "<script>let a = 1;</script>\n<p>text</p>")
        assert prepare([doc]) == [doc]


class TestRejoin:
    """Tests for rejoining split documents."""

    def test_rejoin_is_lossless(self):
        doc = _doc("x-el.html", HTML)
        (result,) = rejoin(split([doc]))
        assert result.content == HTML

    def test_missing_piece_raises(self):
        markup, _first, second = split([_doc("x-el.html", HTML)])
        with pytest.raises(TransformError):
            rejoin([markup, second])

    def test_duplicate_piece_raises(self):
        markup, first, second = split([_doc("x-el.html", HTML)])
        with pytest.raises(TransformError):
            rejoin([markup, first, first, second])

    def test_orphan_piece_raises(self):
        _markup, first, second = split([_doc("x-el.html", HTML)])
        with pytest.raises(TransformError):
            rejoin([first, second])


class TestMerge:
    """Tests for merging streams."""

    def test_order_preserved(self):
        a, b, c = _doc("a.html", ""), _doc("b.html", ""), _doc("c.html", "")
        assert merge([a, b], [c]) == [a, b, c]

    def test_duplicates_kept(self):
        a = _doc("a.html", "")
        assert merge([a], [a]) == [a, a]


class TestSourceStreamTransformer:
    """Tests for the bundle stage on a real workspace."""

    @pytest.fixture
    def populated_workspace(self, workspace_dir):
        (workspace_dir / "import.html").write_text(
            '<link rel="import" href="bower_components/x-el/x-el.html">\n'
        )
        (workspace_dir / "bower.json").write_text("{}")
        (workspace_dir / "theme.html").write_text("<custom-style></custom-style>")
        component = workspace_dir / "bower_components" / "x-el"
        component.mkdir(parents=True)
        (component / "x-el.html").write_text(HTML)
        (component / "helper.js").write_text("a-->b")
        (component / "bower.json").write_text("{}")
        modules = workspace_dir / "node_modules" / "bower"
        modules.mkdir(parents=True)
        (modules / "index.js").write_text("module.exports = {}")
        return workspace_dir

    def test_sources_entrypoint_first(self, populated_workspace, recording_logger):
        transformer = SourceStreamTransformer(populated_workspace, recording_logger, FakeBundler())
        paths = [d.path for d in transformer.sources()]
        assert paths == ["import.html", "theme.html"]

    def test_dependencies(self, populated_workspace, recording_logger):
        transformer = SourceStreamTransformer(populated_workspace, recording_logger, FakeBundler())
        paths = [d.path for d in transformer.dependencies()]
        assert paths == ["bower_components/x-el/helper.js", "bower_components/x-el/x-el.html"]

    def test_run(self, populated_workspace, recording_logger):
        """Test that the bundler gets the fixed, merged stream."""
        bundler = FakeBundler()
        transformer = SourceStreamTransformer(populated_workspace, recording_logger, bundler)
        written = transformer.run()

        entrypoint, documents = bundler.calls[0]
        assert entrypoint == "import.html"
        assert [d.path for d in documents] == [
            "import.html",
            "theme.html",
            "bower_components/x-el/helper.js",
            "bower_components/x-el/x-el.html",
        ]
        assert documents[2].content == "a-- >b"
        assert "<!-- markup comment -->" in documents[3].content
        assert "if (a -- > 0)" in documents[3].content

        assert written == [populated_workspace / "import.html"]
        assert (populated_workspace / "import.html").read_text() == "BUNDLED"
        assert "Fixing minification issues..." in recording_logger.at("info")

    def test_bundler_failure_propagates(self, populated_workspace, recording_logger):
        bundler = MagicMock()
        bundler.bundle.side_effect = RuntimeError("boom")
        transformer = SourceStreamTransformer(populated_workspace, recording_logger, bundler)
        with pytest.raises(RuntimeError, match="boom"):
            transformer.run()

    def test_dependency_error_writes_nothing(self, populated_workspace, recording_logger):
        """Test that a failing dependency stream stops the stage before bundling."""
        component = populated_workspace / "bower_components" / "x-el" / "x-el.html"
        component.write_text("<p>\x00arcbuilder-script-0</p>")
        before = (populated_workspace / "import.html").read_text()
        bundler = FakeBundler()
        transformer = SourceStreamTransformer(populated_workspace, recording_logger, bundler)
        with pytest.raises(TransformError, match="reserved marker"):
            transformer.run()
        assert bundler.calls == []
        assert (populated_workspace / "import.html").read_text() == before
