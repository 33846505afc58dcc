"""
Statement splitting and execution-plan selection.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from sqlglot.errors import TokenError
from sqlglot.tokens import Token, Tokenizer, TokenType

STATEMENT_TERMINATOR = ";"

SQL_COMMAND_RE = re.compile(r"^\s*([A-Za-z]+)")


class ExecutionPlan(str, Enum):
    SINGLE_READ = "single_read"
    MULTI_READ = "multi_read"
    BATCH = "batch"
    SINGLE_MUTATE = "single_mutate"


def leading_keyword(statement: str) -> str:
    match = SQL_COMMAND_RE.match(statement)
    return match.group(1).upper() if match else ""


def _tokenize(sql: str) -> Optional[List[Token]]:
    try:
        return Tokenizer().tokenize(sql)
    except TokenError:
        return None


def split_statements(sql: str) -> List[str]:
    """
    Split on top-level terminators, dropping empty segments.
    Terminators inside string literals, quoted identifiers and comments are kept.
    Text the tokenizer rejects (an unterminated quote, say) is split naively.
    """
    text = sql.strip()
    tokens = _tokenize(text)
    if tokens is None:
        segments = text.split(STATEMENT_TERMINATOR)
    else:
        segments = []
        start = 0
        for token in tokens:
            if token.token_type is TokenType.SEMICOLON:
                segments.append(text[start:token.start])
                start = token.end + 1
        segments.append(text[start:])
    return [segment.strip() for segment in segments if segment.strip()]


@dataclass(frozen=True, slots=True)
class StatementPlan:
    text: str
    statements: Tuple[str, ...]
    plan: ExecutionPlan
    keyword: str

    @property
    def is_multi_statement(self) -> bool:
        return len(self.statements) > 1

    @property
    def is_select(self) -> bool:
        return self.keyword == "SELECT"

    @property
    def is_update(self) -> bool:
        return self.keyword == "UPDATE"

    @property
    def is_insert(self) -> bool:
        return self.keyword == "INSERT"

    @property
    def is_delete(self) -> bool:
        return self.keyword == "DELETE"

    @property
    def is_mutating(self) -> bool:
        return self.plan in (ExecutionPlan.BATCH, ExecutionPlan.SINGLE_MUTATE)


def classify(sql: str) -> StatementPlan:
    """
    Pick how a piece of SQL text is executed.

    A single SELECT is a read; several SELECTs run one by one; any other
    multi-statement text (including SELECTs mixed with writes) runs as one
    opaque batch; everything else is a single mutation.
    """
    text = sql.strip()
    statements = tuple(split_statements(text))
    keyword = leading_keyword(text)
    is_select = keyword == "SELECT"
    is_multi = len(statements) > 1

    if is_select and not is_multi:
        plan = ExecutionPlan.SINGLE_READ
    elif is_multi and all(leading_keyword(s) == "SELECT" for s in statements):
        plan = ExecutionPlan.MULTI_READ
    elif is_multi:
        plan = ExecutionPlan.BATCH
    else:
        plan = ExecutionPlan.SINGLE_MUTATE

    return StatementPlan(text=text, statements=statements, plan=plan, keyword=keyword)


def parse_update_target(sql: str) -> Optional[Tuple[str, str]]:
    """Return (table, where clause) of an UPDATE; the clause defaults to `1=1`."""
    text = sql.strip()
    tokens = _tokenize(text)
    if not tokens or tokens[0].token_type is not TokenType.UPDATE:
        return None

    set_token: Optional[Token] = None
    where_token: Optional[Token] = None
    end = len(text)
    depth = 0
    for token in tokens[1:]:
        if token.token_type is TokenType.L_PAREN:
            depth += 1
        elif token.token_type is TokenType.R_PAREN:
            depth -= 1
        elif depth > 0:
            continue
        elif token.token_type is TokenType.SET and set_token is None:
            set_token = token
        elif token.token_type is TokenType.WHERE and set_token is not None and where_token is None:
            where_token = token
        elif token.token_type is TokenType.SEMICOLON:
            end = token.start
            break

    if set_token is None:
        return None
    table = text[tokens[1].start:set_token.start].strip()
    if not table or tokens[1] is set_token:
        return None
    where = text[where_token.end + 1:end].strip() if where_token is not None else ""
    return table, where or "1=1"


def build_refetch_query(sql: str) -> Optional[str]:
    target = parse_update_target(sql)
    if target is None:
        return None
    table, where = target
    return f"SELECT * FROM {table} WHERE {where}"


__all__ = [
    "ExecutionPlan",
    "StatementPlan",
    "build_refetch_query",
    "classify",
    "leading_keyword",
    "parse_update_target",
    "split_statements",
]
