"""Adapters around the external JavaScript, CSS, and HTML minifiers."""

from __future__ import annotations

import io
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import esprima
import minify_html
import rcssmin
import rjsmin
from calmjs.parse import asttypes, es5, sourcemap
from calmjs.parse.exceptions import ECMASyntaxError, ProductionError
from calmjs.parse.unparsers.es5 import minify_print, minify_printer
from esprima.error_handler import Error as EsprimaError

from asset_minifier.core.errors import MinifyError
from asset_minifier.core.models import HtmlOptions, MinifyOptions


class AssetKind(Enum):
    """Asset types, keyed by file extension."""

    JS = ".js"
    CSS = ".css"
    HTML = ".html"
    UNSUPPORTED = ""

    @classmethod
    def from_path(cls, path: Path) -> AssetKind:
        """Classify a file by its (case-insensitive) extension."""
        suffix = path.suffix.lower()
        for kind in cls:
            if kind is not cls.UNSUPPORTED and kind.value == suffix:
                return kind
        return cls.UNSUPPORTED

    def source_map_comment(self, url: str) -> str:
        """Trailing comment referencing a source map."""
        if self is AssetKind.CSS:
            return f"\n/*# sourceMappingURL={url} */"
        return f"\n//# sourceMappingURL={url}"


SUPPORTED_EXTENSIONS = frozenset(k.value for k in AssetKind if k is not AssetKind.UNSUPPORTED)


@dataclass(frozen=True)
class MinifiedAsset:
    """Minifier output, with an optional version 3 source map."""

    code: str
    source_map: dict[str, Any] | None = None


def _is_console_call(node: Any) -> bool:
    """True for an expression statement calling ``console.*``."""
    if not isinstance(node, asttypes.ExprStatement):
        return False
    call = node.expr
    if not isinstance(call, asttypes.FunctionCall):
        return False
    target = call.identifier
    while isinstance(target, (asttypes.DotAccessor, asttypes.BracketAccessor)):
        target = target.node
    return isinstance(target, asttypes.Identifier) and target.value == "console"


def drop_console_statements(node: asttypes.Node) -> None:
    """Remove ``console.*(...)`` statements from a parsed program in place."""
    for attr, value in list(vars(node).items()):
        if isinstance(value, list):
            kept = [item for item in value if not _is_console_call(item)]
            if len(kept) != len(value):
                value[:] = kept
        elif _is_console_call(value):
            # Single-statement bodies such as ``if (x) console.log(x);``
            setattr(node, attr, asttypes.EmptyStatement(";"))

    for child in node.children():
        if isinstance(child, asttypes.Node):
            drop_console_statements(child)


IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")


def is_identifier_renaming(before: str, after: str) -> bool:
    """True if ``after`` differs from ``before`` only by a one-to-one renaming of identifiers."""
    if IDENTIFIER_RE.split(before) != IDENTIFIER_RE.split(after):
        return False
    forward: dict[str, str] = {}
    backward: dict[str, str] = {}
    for old, new in zip(IDENTIFIER_RE.findall(before), IDENTIFIER_RE.findall(after)):
        if forward.setdefault(old, new) != new or backward.setdefault(new, old) != old:
            return False
    return True


def _keeps_existing_names(program: asttypes.Node, content: str) -> bool:
    """
    True when the content is already compact and mangling would only
    permute its short names. The obfuscator reassigns names on every pass,
    so such input is printed without renaming.
    """
    compact = minify_print(program, obfuscate=False)
    if compact.strip() != content.strip():
        return False
    return is_identifier_renaming(compact, minify_print(program, obfuscate=True))


def _is_esprima_console_call(node: Any) -> bool:
    """True for an esprima expression statement calling ``console.*``."""
    if node.type != "ExpressionStatement" or node.expression.type != "CallExpression":
        return False
    target = node.expression.callee
    while target.type == "MemberExpression":
        target = target.object
    return target.type == "Identifier" and target.name == "console"


def _console_call_ranges(content: str) -> list[tuple[int, int]]:
    """
    Validate modern JavaScript with esprima, as a script and then as a module.

    Returns:
        Source ranges of ``console.*(...)`` statements

    Raises:
        EsprimaError: If neither parse succeeds
    """
    ranges: list[tuple[int, int]] = []

    def collect(node: Any, metadata: Any) -> None:
        if _is_esprima_console_call(node):
            ranges.append((node.range[0], node.range[1]))

    try:
        esprima.parseScript(content, {"range": True}, collect)
    except EsprimaError:
        ranges.clear()
        esprima.parseModule(content, {"range": True}, collect)
    return ranges


def _replace_ranges(content: str, ranges: list[tuple[int, int]]) -> str:
    """Replace each outermost range with an empty statement."""
    parts: list[str] = []
    last = 0
    for start, end in sorted(ranges):
        if start < last:
            continue
        parts.append(content[last:start])
        parts.append(";")
        last = end
    parts.append(content[last:])
    return "".join(parts)


def _minify_modern_js(content: str, *, drop_console: bool) -> MinifiedAsset:
    """Compact ES2015+ code with rjsmin after esprima has accepted it."""
    try:
        ranges = _console_call_ranges(content)
    except EsprimaError as e:
        raise MinifyError(str(e)) from e

    if drop_console and ranges:
        content = _replace_ranges(content, ranges)
    return MinifiedAsset(code=rjsmin.jsmin(content))


def minify_js(
    content: str,
    *,
    drop_console: bool = False,
    mangle: bool = True,
    source_map: bool = False,
    source_name: str = "source.js",
    file_name: str = "source.min.js",
) -> MinifiedAsset:
    """
    Minify JavaScript.

    ES5 goes through calmjs.parse, which can mangle and map. Newer syntax
    is validated with esprima and compacted by rjsmin without renaming or
    a source map.

    Args:
        content: JavaScript source
        drop_console: Remove ``console.*`` call statements
        mangle: Shorten local identifiers
        source_map: Also produce a source map (ES5 only)
        source_name: Source path recorded in the map
        file_name: Output file name recorded in the map

    Raises:
        MinifyError: If the source cannot be parsed
    """
    try:
        program = es5(content)
    except (ECMASyntaxError, ProductionError):
        return _minify_modern_js(content, drop_console=drop_console)

    if drop_console:
        drop_console_statements(program)

    obfuscate = mangle and not _keeps_existing_names(program, content)

    if not source_map:
        return MinifiedAsset(code=minify_print(program, obfuscate=obfuscate))

    program.sourcepath = source_name
    stream = io.StringIO()
    mappings, sources, names = sourcemap.write(minify_printer(obfuscate=obfuscate)(program), stream)
    return MinifiedAsset(
        code=stream.getvalue(),
        source_map=sourcemap.encode_sourcemap(file_name, mappings, sources, names),
    )


def minify_css(content: str) -> MinifiedAsset:
    """Minify CSS. rcssmin produces no source map."""
    return MinifiedAsset(code=rcssmin.cssmin(content))


def minify_html_document(content: str, options: HtmlOptions) -> MinifiedAsset:
    """Minify HTML, including inline ``<style>`` and ``<script>`` when enabled."""
    conservative = not options.collapse_whitespace
    code = minify_html.minify(
        content,
        keep_comments=not options.remove_comments,
        keep_input_type_text_attr=not options.remove_redundant_attributes,
        minify_doctype=options.use_short_doctype,
        minify_css=options.minify_css,
        minify_js=options.minify_js,
        keep_closing_tags=conservative,
        keep_html_and_head_opening_tags=conservative,
    )
    return MinifiedAsset(code=code)


def _run_js(content: str, options: MinifyOptions, source_name: str, file_name: str) -> MinifiedAsset:
    return minify_js(
        content,
        drop_console=options.drop_console,
        mangle=options.mangle,
        source_map=options.source_map,
        source_name=source_name,
        file_name=file_name,
    )


def _run_css(content: str, options: MinifyOptions, source_name: str, file_name: str) -> MinifiedAsset:
    return minify_css(content)


def _run_html(content: str, options: MinifyOptions, source_name: str, file_name: str) -> MinifiedAsset:
    return minify_html_document(content, options.html)


MinifierHandler = Callable[[str, MinifyOptions, str, str], MinifiedAsset]

HANDLERS: dict[AssetKind, MinifierHandler] = {
    AssetKind.JS: _run_js,
    AssetKind.CSS: _run_css,
    AssetKind.HTML: _run_html,
}


def minify_content(
    kind: AssetKind,
    content: str,
    options: MinifyOptions,
    *,
    source_name: str = "",
    file_name: str = "",
) -> MinifiedAsset:
    """
    Dispatch content to the minifier for its asset kind.

    Raises:
        MinifyError: If the minifier rejects the content
        ValueError: If the kind has no minifier
    """
    handler = HANDLERS.get(kind)
    if handler is None:
        raise ValueError(f"No minifier for {kind.name} assets")
    return handler(content, options, source_name, file_name)
