"""
Keyword-anchored parsing of free-text payment instructions.

Two formats are accepted:

    DEBIT <amount> <currency> FROM ACCOUNT <debit> FOR CREDIT TO ACCOUNT <credit> [ON <date>]
    CREDIT <amount> <currency> TO ACCOUNT <credit> FOR DEBIT FROM ACCOUNT <debit> [ON <date>]

Each format is declared once as a grammar: a leading keyword followed by
a fixed sequence of keywords and capture slots, with an optional trailing
clause. Keywords are located by case-insensitive substring search, each
one strictly after the end of the previous match. A capture slot takes the
trimmed text between the keyword before it and the keyword after it. Text
between two adjacent keywords is skipped.
"""
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from core.logger import setup_logger
from core.messages import TransactionType
from core.schema import ParsedInstruction

logger = setup_logger(__name__)

AMOUNT_CURRENCY = "amount_currency"
DEBIT_ACCOUNT = "debit_account"
CREDIT_ACCOUNT = "credit_account"
EXECUTE_BY = "execute_by"


@dataclass(frozen=True)
class Capture:
    """Slot whose text runs up to the next keyword (or end of input)."""
    field: str


@dataclass(frozen=True)
class InstructionGrammar:
    """Token sequence for one instruction type."""
    type: TransactionType
    leading: str
    sequence: Tuple[Union[str, Capture], ...]
    optional_keyword: str
    optional_field: str


GRAMMARS: Tuple[InstructionGrammar, ...] = (
    InstructionGrammar(
        type=TransactionType.DEBIT,
        leading="DEBIT",
        sequence=(
            Capture(AMOUNT_CURRENCY), "FROM", "ACCOUNT",
            Capture(DEBIT_ACCOUNT), "FOR", "CREDIT", "TO", "ACCOUNT",
            Capture(CREDIT_ACCOUNT),
        ),
        optional_keyword="ON",
        optional_field=EXECUTE_BY,
    ),
    InstructionGrammar(
        type=TransactionType.CREDIT,
        leading="CREDIT",
        sequence=(
            Capture(AMOUNT_CURRENCY), "TO", "ACCOUNT",
            Capture(CREDIT_ACCOUNT), "FOR", "DEBIT", "FROM", "ACCOUNT",
            Capture(DEBIT_ACCOUNT),
        ),
        optional_keyword="ON",
        optional_field=EXECUTE_BY,
    ),
)

_KEYWORD_PATTERNS: Dict[str, re.Pattern] = {}


def _keyword_pattern(keyword: str) -> re.Pattern:
    pattern = _KEYWORD_PATTERNS.get(keyword)
    if pattern is None:
        # ASCII flag keeps case folding to plain letters so offsets match the input
        pattern = re.compile(re.escape(keyword), re.IGNORECASE | re.ASCII)
        _KEYWORD_PATTERNS[keyword] = pattern
    return pattern


def find_keyword(text: str, keyword: str, start: int = 0) -> int:
    """
    Find a keyword in text, ignoring case.

    Args:
        text: Text to search
        keyword: Keyword to look for
        start: Index to start searching from

    Returns:
        Index of the first match at or after start, or -1 if absent
    """
    match = _keyword_pattern(keyword).search(text, start)
    return match.start() if match else -1


def detect_grammar(text: str) -> Optional[InstructionGrammar]:
    """Pick the grammar whose leading keyword opens the text."""
    for grammar in GRAMMARS:
        if find_keyword(text, grammar.leading) == 0:
            return grammar
    return None


def scan(text: str, grammar: InstructionGrammar) -> Optional[Dict[str, str]]:
    """
    Walk a grammar over text and collect its capture slots.

    Args:
        text: Trimmed instruction text starting with the grammar's leading keyword
        grammar: Grammar to apply

    Returns:
        Mapping of field name to captured text, or None if a required keyword is missing
    """
    fields: Dict[str, str] = {}
    position = len(grammar.leading)
    pending: Optional[str] = None

    for element in grammar.sequence:
        if isinstance(element, Capture):
            pending = element.field
            continue

        index = find_keyword(text, element, position)
        if index == -1:
            return None
        if pending is not None:
            fields[pending] = text[position:index].strip()
            pending = None
        position = index + len(element)

    optional_index = find_keyword(text, grammar.optional_keyword, position)
    if optional_index == -1:
        tail_end = len(text)
    else:
        tail_end = optional_index
        fields[grammar.optional_field] = text[optional_index + len(grammar.optional_keyword):].strip()

    if pending is not None:
        fields[pending] = text[position:tail_end].strip()

    return fields


def parse_instruction(instruction: str) -> Optional[ParsedInstruction]:
    """
    Parse instruction text into structured fields.

    Args:
        instruction: Raw instruction text

    Returns:
        ParsedInstruction, or None if the text does not follow either format
    """
    text = instruction.strip()

    grammar = detect_grammar(text)
    if grammar is None:
        return None

    try:
        fields = scan(text, grammar)
        if fields is None:
            return None

        tokens = fields[AMOUNT_CURRENCY].split()
        if len(tokens) < 2:
            return None

        return ParsedInstruction(
            type=grammar.type,
            amount=tokens[0],
            currency=tokens[1].upper(),
            debit_account=fields[DEBIT_ACCOUNT],
            credit_account=fields[CREDIT_ACCOUNT],
            execute_by=fields.get(EXECUTE_BY) or None,
        )
    except Exception as e:
        logger.error(f"Failed to extract instruction fields: {e}", exc_info=True)
        return None
