"""Extraction of code blocks and error messages from issue and comment bodies."""

import re
from typing import Optional, TypeVar

from extractum.models.issue import CodeBlock, Comment, Issue

ParsedRecord = TypeVar("ParsedRecord", Issue, Comment)

# Fenced code blocks: ```lang\n...\n``` (language tag optional)
CODE_BLOCK_PATTERN = re.compile(
    r"^[ \t]*(`{3,}|~{3,})[ \t]*([\w+#.-]*)[^\n]*\n(.*?)^[ \t]*\1[ \t]*$",
    re.MULTILINE | re.DOTALL,
)

# Error patterns for extracting error messages
ERROR_PATTERNS = [
    re.compile(r"^\s*((?:[A-Za-z_][\w.]*)?(?:Error|Exception):[^\n]*\S)", re.MULTILINE),
    re.compile(r"^\s*((?:ERROR|FATAL|FAILED|fatal|error)(?:\[\w+\])?:\s*[^\n]*\S)", re.MULTILINE),
    re.compile(r"^\s*(panic:\s*[^\n]*\S)", re.MULTILINE),
]


def extract_code_blocks(text: Optional[str]) -> list[CodeBlock]:
    """Extract fenced code blocks from markdown text."""
    if not text:
        return []

    return [
        CodeBlock(language=match.group(2).lower(), code=match.group(3).rstrip("\n"))
        for match in CODE_BLOCK_PATTERN.finditer(text)
    ]


def extract_error_messages(text: Optional[str]) -> list[str]:
    """Extract error-looking lines from text.

    Duplicates are dropped; the first occurrence decides the order.
    """
    if not text:
        return []

    found: dict[int, str] = {}
    for pattern in ERROR_PATTERNS:
        for match in pattern.finditer(text):
            found.setdefault(match.start(1), match.group(1).strip())

    messages: list[str] = []
    for _, message in sorted(found.items()):
        if message not in messages:
            messages.append(message)
    return messages


def with_parsed_body(record: ParsedRecord) -> ParsedRecord:
    """Return a copy of an issue or comment with code blocks and errors extracted."""
    return record.model_copy(
        update={
            "code_blocks": extract_code_blocks(record.body),
            "error_messages": extract_error_messages(record.body),
        }
    )
