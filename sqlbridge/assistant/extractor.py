"""
Pull executable SQL statements out of free-text LLM completions.

Fenced code blocks win over bare `VERB ... ;` runs in prose. Candidates holding
template placeholders are dropped before de-duplication.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

GENERATE_ACTION = "generate"

SQL_FENCE_RE = re.compile(r"```(?:sql)?\s*([\s\S]*?)```", re.IGNORECASE)

_BLOCK_VERBS = r"SELECT|INSERT|UPDATE|DELETE|CREATE|ALTER|DROP|WITH"
_TEXT_VERBS = r"SELECT|INSERT|UPDATE|DELETE|CREATE|ALTER|DROP"

BLOCK_LEADING_VERB_RE = re.compile(rf"^(?:{_BLOCK_VERBS})\b", re.IGNORECASE)
BLOCK_STATEMENT_RE = re.compile(rf"\b(?:{_BLOCK_VERBS})\b[\s\S]*?;", re.IGNORECASE)
BLOCK_VERB_TO_END_RE = re.compile(rf"\b(?:{_BLOCK_VERBS})\b[\s\S]*", re.IGNORECASE)
TEXT_STATEMENT_RE = re.compile(rf"\b(?:{_TEXT_VERBS})\b[\s\S]*?;", re.IGNORECASE)
TEXT_LEADING_VERB_RE = re.compile(rf"^(?:{_TEXT_VERBS})\b", re.IGNORECASE)

TEMPLATE_VALUES = (
    r"new[\s_-]?name",
    r"new[\s_-]?value",
    r"your[\s_-]?value",
    r"placeholder",
)
PLACEHOLDER_PATTERNS = (
    re.compile(r"\.\.\.|…"),
    re.compile(r"\bWHERE\s*;?\s*$", re.IGNORECASE),
    re.compile(
        r"(?:\bSET|,)\s*[\w.`\"\[\]]+\s*=\s*(['\"])(?:"
        + "|".join(TEMPLATE_VALUES)
        + r")\1",
        re.IGNORECASE,
    ),
)


class StatementKind(str, Enum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CREATE = "CREATE"
    ALTER = "ALTER"
    DROP = "DROP"
    OTHER = "OTHER"


@dataclass(frozen=True, slots=True)
class ExtractedStatement:
    text: str
    kind: StatementKind


@dataclass(slots=True)
class ExtractionResult:
    queries: List[ExtractedStatement] = field(default_factory=list)
    primary: Optional[ExtractedStatement] = None
    # True when at least one candidate was dropped for holding a placeholder.
    placeholder_filtered: bool = False


def normalize_terminator(fragment: str) -> str:
    """Strip the fragment and make it end with exactly one `;`."""
    text = fragment.strip()
    text = re.sub(r"(?:\s*;)+$", "", text)
    return f"{text};" if text else ""


def has_placeholder(statement: str) -> bool:
    return any(pattern.search(statement) for pattern in PLACEHOLDER_PATTERNS)


def classify_statement(statement: str) -> StatementKind:
    match = re.match(r"\s*([A-Za-z]+)", statement)
    if not match:
        return StatementKind.OTHER
    try:
        return StatementKind(match.group(1).upper())
    except ValueError:
        return StatementKind.OTHER


def _candidates_from_block(block: str) -> List[str]:
    if BLOCK_LEADING_VERB_RE.match(block):
        return [block]
    statements = BLOCK_STATEMENT_RE.findall(block)
    if statements:
        return statements
    tail = BLOCK_VERB_TO_END_RE.search(block)
    if tail:
        return [tail.group(0)]
    return [block]


def _candidates_from_text(text: str) -> List[str]:
    statements = TEXT_STATEMENT_RE.findall(text)
    if statements:
        return statements
    stripped = text.strip()
    if TEXT_LEADING_VERB_RE.match(stripped):
        return [stripped.splitlines()[0]]
    return []


def find_candidates(raw_text: str) -> List[str]:
    """Candidate statements in source order, terminator-normalised, before filtering."""
    blocks = [block.strip() for block in SQL_FENCE_RE.findall(raw_text)]
    if blocks:
        fragments: List[str] = []
        for block in blocks:
            if block:
                fragments.extend(_candidates_from_block(block))
    else:
        fragments = _candidates_from_text(raw_text)
    return [text for text in (normalize_terminator(f) for f in fragments) if text]


def extract_statements(raw_text: Optional[str], action: Optional[str] = GENERATE_ACTION) -> ExtractionResult:
    """
    Parse model output into validated, classified SQL statements.
    Only the `generate` action extracts anything; this function does not raise.
    """
    if action != GENERATE_ACTION or not raw_text:
        return ExtractionResult()

    result = ExtractionResult()
    seen: set[str] = set()
    for candidate in find_candidates(raw_text):
        if has_placeholder(candidate):
            result.placeholder_filtered = True
            continue
        key = candidate.lower()
        if key in seen:
            continue
        seen.add(key)
        result.queries.append(ExtractedStatement(text=candidate, kind=classify_statement(candidate)))

    result.primary = next(
        (query for query in result.queries if query.kind is StatementKind.SELECT),
        result.queries[0] if result.queries else None,
    )
    return result


__all__ = [
    "ExtractedStatement",
    "ExtractionResult",
    "GENERATE_ACTION",
    "StatementKind",
    "classify_statement",
    "extract_statements",
    "find_candidates",
    "has_placeholder",
    "normalize_terminator",
]
