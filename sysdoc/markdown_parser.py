"""Convert one section's markdown into an owned, ordered list of content blocks.

markdown-it produces a nested token tree. It is flattened into a single forward
stream of start/end/text/leaf events and folded into blocks with two small
accumulators: one for images (alt text arrives as separate text events) and one
for CSV table links.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .errors import SectionMetadataError
from .section_metadata import METADATA_TAG, SectionMetadata

TABLE_SUFFIX = ".csv"


def build_markdown() -> MarkdownIt:
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


########################
# BLOCKS
########################


@dataclass(frozen=True)
class Start:
    tag: str
    attrs: Tuple[Tuple[str, str], ...] = ()

    def attr(self, name: str) -> Optional[str]:
        return dict(self.attrs).get(name)


@dataclass(frozen=True)
class End:
    tag: str


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class InlineCode:
    code: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class Html:
    html: str


@dataclass(frozen=True)
class Image:
    url: str
    alt_text: str = ""
    title: Optional[str] = None


@dataclass(frozen=True)
class TableReference:
    path: str
    label: str = ""
    line: Optional[int] = None


@dataclass(frozen=True)
class CodeBlock:
    language: Optional[str]
    content: str


MarkdownBlock = Union[Start, End, Text, InlineCode, SoftBreak, HardBreak, Rule, Html, Image, TableReference, CodeBlock]


@dataclass(frozen=True)
class ParsedMarkdown:
    blocks: Tuple[MarkdownBlock, ...]
    metadata: Optional[SectionMetadata] = None

    def images(self) -> List[Image]:
        return [block for block in self.blocks if isinstance(block, Image)]

    def table_references(self) -> List[TableReference]:
        return [block for block in self.blocks if isinstance(block, TableReference)]


########################
# EVENT STREAM
########################


@dataclass(frozen=True)
class MarkdownEvent:
    kind: str  # start | end | text | leaf
    token: Token
    line: Optional[int] = None


def iter_events(tokens: Iterable[Token], line: Optional[int] = None) -> Iterator[MarkdownEvent]:
    """Flatten markdown-it's block/inline token tree into one forward event stream.

    Line numbers are 1-based and taken from the nearest enclosing block token.
    Hidden tokens (paragraph wrappers in tight lists) are dropped.
    """
    for token in tokens:
        if token.map:
            line = token.map[0] + 1
        if token.type == "inline":
            yield from iter_events(token.children or [], line)
        elif token.type == "image":
            yield MarkdownEvent("start", token, line)
            yield from iter_events(token.children or [], line)
            yield MarkdownEvent("end", token, line)
        elif token.hidden:
            continue
        elif token.nesting == 1:
            yield MarkdownEvent("start", token, line)
        elif token.nesting == -1:
            yield MarkdownEvent("end", token, line)
        elif token.type == "text":
            yield MarkdownEvent("text", token, line)
        else:
            yield MarkdownEvent("leaf", token, line)


########################
# BLOCK COLLECTION
########################


@dataclass
class _Pending:
    url: str
    title: Optional[str]
    line: Optional[int]
    parts: List[str]

    def text(self) -> str:
        return "".join(self.parts)


def _is_table_link(href: str) -> bool:
    return href.split("#", 1)[0].split("?", 1)[0].lower().endswith(TABLE_SUFFIX)


def _fence_language(info: str) -> Optional[str]:
    words = info.split()
    return words[0] if words else None


def _attrs(token: Token) -> Tuple[Tuple[str, str], ...]:
    return tuple((str(key), str(value)) for key, value in (token.attrs or {}).items())


class BlockCollector:
    def __init__(self, source: Optional[Path] = None) -> None:
        self.source = source
        self.blocks: List[MarkdownBlock] = []
        self.metadata: Optional[SectionMetadata] = None
        self.metadata_line: Optional[int] = None
        self._image: Optional[_Pending] = None
        self._table_link: Optional[_Pending] = None

    def feed(self, event: MarkdownEvent) -> None:
        token = event.token

        if token.type == "image":
            if event.kind == "start":
                self._image = _Pending(
                    url=str(token.attrGet("src") or ""),
                    title=token.attrGet("title"),
                    line=event.line,
                    parts=[],
                )
            elif self._image is not None:
                pending = self._image
                self._image = None
                self.blocks.append(Image(url=pending.url, alt_text=pending.text(), title=pending.title))
            return

        if self._image is not None:
            self._accumulate(self._image, token)
            return

        if token.type == "link_open" and _is_table_link(str(token.attrGet("href") or "")):
            self._table_link = _Pending(url=str(token.attrGet("href")), title=None, line=event.line, parts=[])
            return
        if self._table_link is not None:
            if token.type == "link_close":
                pending = self._table_link
                self._table_link = None
                self.blocks.append(TableReference(path=pending.url, label=pending.text(), line=pending.line))
            else:
                self._accumulate(self._table_link, token)
            return

        if event.kind == "start":
            self.blocks.append(Start(tag=token.tag, attrs=_attrs(token)))
        elif event.kind == "end":
            self.blocks.append(End(tag=token.tag))
        elif event.kind == "text":
            self.blocks.append(Text(token.content))
        else:
            self._leaf(token, event.line)

    def _accumulate(self, pending: _Pending, token: Token) -> None:
        if token.type in ("text", "code_inline"):
            pending.parts.append(token.content)
        elif token.type in ("softbreak", "hardbreak"):
            pending.parts.append(" ")

    def _leaf(self, token: Token, line: Optional[int]) -> None:
        if token.type == "fence":
            language = _fence_language(token.info)
            if language == METADATA_TAG:
                self._set_metadata(token.content, line)
            else:
                self.blocks.append(CodeBlock(language=language, content=token.content))
        elif token.type == "code_block":
            self.blocks.append(CodeBlock(language=None, content=token.content))
        elif token.type == "code_inline":
            self.blocks.append(InlineCode(token.content))
        elif token.type == "softbreak":
            self.blocks.append(SoftBreak())
        elif token.type == "hardbreak":
            self.blocks.append(HardBreak())
        elif token.type == "hr":
            self.blocks.append(Rule())
        elif token.type in ("html_block", "html_inline"):
            self.blocks.append(Html(token.content))
        elif token.content:
            self.blocks.append(Text(token.content))

    def _set_metadata(self, content: str, line: Optional[int]) -> None:
        if self.metadata is not None:
            raise SectionMetadataError(
                f"multiple {METADATA_TAG} blocks in one section (first at line {self.metadata_line})",
                source=self.source,
                line=line,
            )
        self.metadata = SectionMetadata.parse(content, source=self.source, line=line)
        self.metadata_line = line

    def result(self) -> ParsedMarkdown:
        return ParsedMarkdown(blocks=tuple(self.blocks), metadata=self.metadata)


def parse_markdown(text: str, source: Optional[Path] = None, md: Optional[MarkdownIt] = None) -> ParsedMarkdown:
    md = md or build_markdown()
    collector = BlockCollector(source=source)
    for event in iter_events(md.parse(text)):
        collector.feed(event)
    return collector.result()
