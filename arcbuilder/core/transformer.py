# -----------------------------------------------------------------------------
# THE SOURCE STREAM TRANSFORMER - BUNDLE STAGE
# -----------------------------------------------------------------------------
# Responsibility: Prepare the workspace documents for the bundler and write
# the bundler's output back into the workspace.
#
# Flow (per stream, primary sources and installed dependencies):
#   split -> fixup -> rejoin
# then: merge(primary, dependencies) -> bundler -> workspace
#
# Fixup: the bundler rewrites "-->" in inline scripts to "\x3e0", a syntax
# error once the script runs, so scripts get "-- >" instead. Markup is never
# touched; HTML comments keep their "-->".
# https://github.com/Polymer/polymer-bundler/issues/304
# -----------------------------------------------------------------------------

import re
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

from rich.console import Console

from arcbuilder.domain.models import DocumentKind, SourceDocument

console = Console(stderr=True)

ENTRYPOINT = "import.html"
COMPONENTS_DIR = "bower_components"

# Never part of the primary sources: installer tooling and the manifest.
EXCLUDED_DIRS = {COMPONENTS_DIR, "node_modules", ".git"}
EXCLUDED_FILES = {"bower.json", "package.json", "package-lock.json"}

STREAM_KINDS = {DocumentKind.HTML, DocumentKind.SCRIPT, DocumentKind.STYLE}

FIX_SEQUENCE = "-->"
FIX_REPLACEMENT = "-- >"

# Comments are matched first and left alone; a "<script>" inside one is text.
SCRIPT_RE = re.compile(
    r"(<!--.*?(?:-->|\Z))|(<script\b[^>]*>)(.*?)(</script\s*>)", re.IGNORECASE | re.DOTALL
)
SRC_ATTR_RE = re.compile(r"\ssrc\s*=", re.IGNORECASE)
TYPE_ATTR_RE = re.compile(r"""\stype\s*=\s*["']?([^"'\s>]*)""", re.IGNORECASE)
JS_TYPES = {"", "text/javascript", "application/javascript", "module"}

# NUL never appears in HTML text, so the marker cannot collide with content.
PLACEHOLDER_PREFIX = "\x00arcbuilder-script-"
PLACEHOLDER_RE = re.compile("\x00arcbuilder-script-(\\d+)\x00")


class TransformError(Exception):
    """Raised when a document stream cannot be split or rejoined."""

    pass


def _placeholder(index: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{index}\x00"


def _is_inline_script(open_tag: str) -> bool:
    """Only inline JavaScript is split out; external and data scripts stay."""
    if SRC_ATTR_RE.search(open_tag):
        return False
    match = TYPE_ATTR_RE.search(open_tag)
    script_type = match.group(1).lower() if match else ""
    return script_type in JS_TYPES


def split(documents: Iterable[SourceDocument]) -> list[SourceDocument]:
    """
    Split inline scripts out of HTML documents.

    Each HTML document is followed by its script pieces, named
    "<path>_script_<n>.js". Inside the markup every script body is replaced
    with a marker so rejoin() can put it back byte for byte.

    Raises:
        TransformError: If a document is already split.
    """
    result: list[SourceDocument] = []
    for doc in documents:
        if doc.origin is not None or doc.scripts:
            raise TransformError(f"Document already split: {doc.path}")
        if doc.kind != DocumentKind.HTML:
            result.append(doc)
            continue
        if PLACEHOLDER_PREFIX in doc.content:
            raise TransformError(f"Cannot split {doc.path}: reserved marker in content")

        pieces: list[SourceDocument] = []

        def _cut(match: re.Match) -> str:
            comment, open_tag, body, close_tag = match.groups()
            if comment is not None or not _is_inline_script(open_tag):
                return match.group(0)
            index = len(pieces)
            pieces.append(
                SourceDocument(
                    path=f"{doc.path}_script_{index}.js",
                    content=body,
                    kind=DocumentKind.SCRIPT,
                    origin=doc.path,
                    index=index,
                )
            )
            return f"{open_tag}{_placeholder(index)}{close_tag}"

        markup = SCRIPT_RE.sub(_cut, doc.content)
        result.append(replace(doc, content=markup, scripts=len(pieces)))
        result.extend(pieces)
    return result


def fix_script(content: str) -> str:
    return content.replace(FIX_SEQUENCE, FIX_REPLACEMENT)


def fixup(documents: Iterable[SourceDocument]) -> list[SourceDocument]:
    """Apply the "-->" fix to script documents only."""
    return [
        replace(doc, content=fix_script(doc.content)) if doc.kind == DocumentKind.SCRIPT else doc
        for doc in documents
    ]


def rejoin(documents: Iterable[SourceDocument]) -> list[SourceDocument]:
    """
    Put split script pieces back into their HTML documents.

    Document order is preserved; pieces disappear into their origin.

    Raises:
        TransformError: If a piece is missing, duplicated or has no origin.
    """
    documents = list(documents)
    pieces: dict[str, dict[int, SourceDocument]] = {}
    for doc in documents:
        if doc.origin is None:
            continue
        owned = pieces.setdefault(doc.origin, {})
        if doc.index in owned:
            raise TransformError(f"Duplicate script piece {doc.index} of {doc.origin}")
        owned[doc.index] = doc

    result: list[SourceDocument] = []
    for doc in documents:
        if doc.origin is not None:
            continue
        if not doc.scripts:
            result.append(doc)
            continue
        owned = pieces.pop(doc.path, {})
        if sorted(owned) != list(range(doc.scripts)):
            raise TransformError(
                f"Cannot rejoin {doc.path}: expected {doc.scripts} script pieces, "
                f"got {len(owned)}"
            )
        content = PLACEHOLDER_RE.sub(lambda m: owned[int(m.group(1))].content, doc.content)
        result.append(replace(doc, content=content, scripts=0))

    if pieces:
        raise TransformError(f"Script pieces without a document: {', '.join(sorted(pieces))}")
    return result


def merge(*streams: Iterable[SourceDocument]) -> list[SourceDocument]:
    """Concatenate streams, keeping the order in which they are given."""
    merged: list[SourceDocument] = []
    for stream in streams:
        merged.extend(stream)
    return merged


def prepare(documents: Iterable[SourceDocument]) -> list[SourceDocument]:
    """split -> fixup -> rejoin for a single stream."""
    return rejoin(fixup(split(documents)))


def read_documents(root: Path, files: Iterable[Path]) -> list[SourceDocument]:
    documents = []
    for path in files:
        relative = path.relative_to(root).as_posix()
        content = path.read_text(encoding="utf-8", errors="surrogateescape")
        documents.append(SourceDocument.from_text(relative, content))
    return documents


class SourceStreamTransformer:
    """
    The bundle stage.

    Args:
        working_dir: Workspace holding import.html and bower_components.
        logger: Logging collaborator.
        bundler: Object with bundle(entrypoint, documents) -> documents.
        entrypoint: Entrypoint file name inside the workspace.
    """

    def __init__(self, working_dir: Path | str, logger, bundler, entrypoint: str = ENTRYPOINT) -> None:
        self.working_dir = Path(working_dir)
        self.logger = logger
        self.bundler = bundler
        self.entrypoint = entrypoint

    def _stream_files(self, base: Path, include: Callable[[Path], bool]) -> list[Path]:
        if not base.is_dir():
            return []
        return sorted(
            p
            for p in base.rglob("*")
            if p.is_file() and DocumentKind.from_path(p.name) in STREAM_KINDS and include(p)
        )

    def sources(self) -> list[SourceDocument]:
        """Primary sources: workspace files outside the installed components."""

        def _is_source(path: Path) -> bool:
            parts = path.relative_to(self.working_dir).parts
            if set(parts[:-1]) & EXCLUDED_DIRS:
                return False
            return path.name not in EXCLUDED_FILES

        files = self._stream_files(self.working_dir, _is_source)
        # The entrypoint leads the stream.
        files.sort(key=lambda p: p.relative_to(self.working_dir).as_posix() != self.entrypoint)
        return read_documents(self.working_dir, files)

    def dependencies(self) -> list[SourceDocument]:
        """Installed dependency documents."""
        base = self.working_dir / COMPONENTS_DIR
        return read_documents(self.working_dir, self._stream_files(base, lambda p: True))

    def _prepare_sources(self) -> list[SourceDocument]:
        self.logger.info("Analyzing sources...")
        return prepare(self.sources())

    def _prepare_dependencies(self) -> list[SourceDocument]:
        documents = prepare(self.dependencies())
        self.logger.info("Fixing minification issues...")
        return documents

    def run(self) -> list[Path]:
        """
        Run the stage and write the bundle into the workspace.

        Both streams are prepared concurrently; the merge keeps primary
        sources before dependencies. The first error aborts the stage.

        Returns:
            Paths written into the workspace.
        """
        self.logger.info("Building components with the bundler...")
        console.print(f"[cyan][TRANSFORMER] Preparing streams in {self.working_dir}[/cyan]")

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="arc-stream") as pool:
            sources = pool.submit(self._prepare_sources)
            dependencies = pool.submit(self._prepare_dependencies)
            # result() re-raises; primary sources are checked first.
            merged = merge(sources.result(), dependencies.result())

        console.print(f"[cyan][TRANSFORMER] Bundling {len(merged)} documents[/cyan]")
        bundled = self.bundler.bundle(self.entrypoint, merged)

        written = []
        for doc in bundled:
            target = self.working_dir / doc.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(doc.content, encoding="utf-8", errors="surrogateescape")
            written.append(target)

        console.print(f"[green][TRANSFORMER] Bundle written: {len(written)} files[/green]")
        self.logger.info("Bundle complete.")
        return written
