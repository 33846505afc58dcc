"""
Prompt construction for the database assistant.
"""

from typing import Optional

from sqlbridge.connectors import EngineKind

SCHEMA_RULES = """
- Only use the tables and columns listed above. Do not reference tables or columns that don't exist in this schema.
- When user asks for roles/types (like "admin", "manager", "user"), look for columns named: role, type, status, user_type, account_type, etc.
- When user asks for a specific person's name, use the name column.
- CRITICAL: "add [role] role" or "set [role] role" means UPDATE users SET role = '[role]' WHERE..., NOT ALTER TABLE. Only use ALTER TABLE if user explicitly asks to modify table structure.
- Do NOT assume data values exist. Generate queries that would work regardless of whether the data exists.
- If asking for "admin" and there's no role/type column, you may need to inform the user or generate a query that searches the name column, but be clear this is searching by name, not role."""

SQLITE_RULES = """

- SQLite RULES (this database is SQLite): SQLite does NOT support "ALTER TABLE table ADD CONSTRAINT name FOREIGN KEY (...) REFERENCES ...". To add foreign keys to EXISTING tables in SQLite you MUST recreate each table: (1) CREATE TABLE new_table (all columns, plus FOREIGN KEY (col) REFERENCES other_table(id) [ON DELETE CASCADE]); (2) INSERT INTO new_table SELECT * FROM old_table; (3) DROP TABLE old_table; (4) ALTER TABLE new_table RENAME TO old_table; Wrap the whole script in PRAGMA foreign_keys=off; BEGIN TRANSACTION; ... COMMIT; PRAGMA foreign_keys=on; Use the exact column names from the schema (same order and types as PRAGMA table_info). Do not use ALTER TABLE ... ADD CONSTRAINT in SQLite."""

GENERATE_RULES = """

Rules:
1. Use only tables/columns from the schema above.
2. For roles (admin, manager, user), check for role/type/status columns first.
3. For person names, use the name column.
4. If user says "add [role] role" or "set [role] role", they mean UPDATE users SET role = '[role]' WHERE..., NOT ALTER TABLE. Only use ALTER TABLE if explicitly asked to add/modify table structure.
5. If the request asks to UPDATE/CHANGE data to "random names" or "random values", generate actual random names/values in the UPDATE query. Use realistic random names like 'Alex Johnson', 'Sarah Miller', 'Michael Chen', 'Emma Davis', 'James Wilson', etc. For multiple rows, use a CASE statement with different random names based on the WHERE condition or row identifier (like id). Example: UPDATE users SET name = CASE WHEN id = 1 THEN 'Alex Johnson' WHEN id = 2 THEN 'Sarah Miller' ELSE name END WHERE name LIKE 'J%';
6. If the request asks to UPDATE/CHANGE data but doesn't specify what to change it TO (and it's not "random"), you MUST ask a clarifying question. Example: "What should I change the names to? Please specify the new name or a pattern."
7. NEVER use placeholders like "...", "?", "NewName", or incomplete WHERE clauses. Either ask for clarification or generate a complete, valid SQL query.
8. If the user asks for multiple things (like "get X and change Y"), provide ALL the SQL queries needed. For "get users and change names", provide both the SELECT query AND the UPDATE query. Explain what each query does. Separate multiple queries with blank lines or clearly label them.
9. If no role column exists, return: SELECT * FROM table_name;
10. Provide a brief explanation of what the query does, then the SQL query in a code block."""


def build_schema_section(engine_kind: Optional[EngineKind], schema_text: Optional[str]) -> str:
    if not schema_text:
        return ""
    section = f"\n\nDatabase Schema:\n{schema_text}\n\nIMPORTANT RULES:{SCHEMA_RULES}"
    if engine_kind is EngineKind.SQLITE:
        section += SQLITE_RULES
    return section


def build_prompt(
    action: str,
    query: str,
    engine_kind: Optional[EngineKind] = None,
    schema_text: Optional[str] = None,
    context: Optional[str] = None,
) -> str:
    """
    Build the user prompt for one assistant action.
    """

    schema_section = build_schema_section(engine_kind, schema_text)
    if action == "generate":
        engine_note = f" Database type: {engine_kind.value}." if engine_kind else ""
        prompt = f'Generate SQL for: "{query}".{engine_note}{schema_section}{GENERATE_RULES}'
    elif action == "optimize":
        prompt = (
            f'You are a SQL optimization expert. Optimize this SQL query: "{query}".{schema_section}'
            "\n\nConsider the database schema when optimizing. Provide the optimized query and a brief explanation."
        )
    elif action == "explain":
        prompt = f'Explain this SQL query in simple terms: "{query}".{schema_section}'
    else:
        prompt = f'Help with this database question: "{query}".{schema_section}'

    if context:
        prompt += f"\n\nAdditional context:\n{context}"
    return prompt


__all__ = ["build_prompt", "build_schema_section"]
