"""
Unit tests for the instruction parser.
"""
import logging

import pytest

from core.messages import TransactionType
from core.parsing import GRAMMARS, detect_grammar, find_keyword, parse_instruction


def test_parse_debit_instruction():
    """Test canonical DEBIT format."""
    parsed = parse_instruction("DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b")
    assert parsed is not None
    assert parsed.type == TransactionType.DEBIT
    assert parsed.amount == "30"
    assert parsed.currency == "USD"
    assert parsed.debit_account == "a"
    assert parsed.credit_account == "b"
    assert parsed.execute_by is None


def test_parse_credit_instruction():
    """Test canonical CREDIT format swaps account roles."""
    parsed = parse_instruction("CREDIT 500 GBP TO ACCOUNT acc-2 FOR DEBIT FROM ACCOUNT acc-1")
    assert parsed is not None
    assert parsed.type == TransactionType.CREDIT
    assert parsed.amount == "500"
    assert parsed.currency == "GBP"
    assert parsed.credit_account == "acc-2"
    assert parsed.debit_account == "acc-1"


def test_parse_with_execute_by_date():
    """Test optional ON clause."""
    parsed = parse_instruction("DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b ON 2030-01-01")
    assert parsed.credit_account == "b"
    assert parsed.execute_by == "2030-01-01"

    parsed = parse_instruction("CREDIT 30 USD TO ACCOUNT b FOR DEBIT FROM ACCOUNT a ON 2030-01-01")
    assert parsed.debit_account == "a"
    assert parsed.execute_by == "2030-01-01"


def test_date_returned_verbatim():
    """Test date text is not validated by the parser."""
    parsed = parse_instruction("DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b ON tomorrow-ish")
    assert parsed.execute_by == "tomorrow-ish"


def test_empty_on_clause_means_no_date():
    """Test a trailing ON with nothing after it yields no date."""
    parsed = parse_instruction("DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b ON   ")
    assert parsed is not None
    assert parsed.credit_account == "b"
    assert parsed.execute_by is None


@pytest.mark.parametrize("instruction", [
    "debit 30 usd from account a for credit to account b",
    "Debit 30 Usd From Account a For Credit To Account b",
    "   DEBIT   30    USD   FROM  ACCOUNT    a   FOR CREDIT  TO ACCOUNT   b   ",
    "DEBIT\t30\tUSD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b\n",
])
def test_casing_and_whitespace_insensitive(instruction):
    """Test keywords match in any case and extra whitespace is ignored."""
    parsed = parse_instruction(instruction)
    assert parsed is not None
    assert parsed.type == TransactionType.DEBIT
    assert parsed.amount == "30"
    assert parsed.currency == "USD"
    assert parsed.debit_account == "a"
    assert parsed.credit_account == "b"


def test_account_ids_keep_original_case():
    """Test only the currency is upper-cased."""
    parsed = parse_instruction("debit 10 ngn from account Alice.Main for credit to account Bob@Bank")
    assert parsed.currency == "NGN"
    assert parsed.debit_account == "Alice.Main"
    assert parsed.credit_account == "Bob@Bank"


def test_extra_amount_tokens_ignored():
    """Test tokens after amount and currency are dropped."""
    parsed = parse_instruction("DEBIT 30 USD please FROM ACCOUNT a FOR CREDIT TO ACCOUNT b")
    assert parsed.amount == "30"
    assert parsed.currency == "USD"


def test_raw_amount_preserved():
    """Test the amount is returned as text, even when not a number."""
    parsed = parse_instruction("DEBIT 5.5 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b")
    assert parsed.amount == "5.5"


@pytest.mark.parametrize("instruction", [
    "",
    "   ",
    "TRANSFER 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b",
    "PAY DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b",
    "DEBIT 30 FROM ACCOUNT a FOR CREDIT TO ACCOUNT b",
    "DEBIT FROM ACCOUNT a FOR CREDIT TO ACCOUNT b",
    "DEBIT 30 USD ACCOUNT a FOR CREDIT TO ACCOUNT b",
    "DEBIT 30 USD FROM ACCOUNT a CREDIT TO ACCOUNT b",
    "DEBIT 30 USD FROM ACCOUNT a FOR CREDIT ACCOUNT b",
    "DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO b",
    "CREDIT 30 USD TO ACCOUNT b FOR DEBIT ACCOUNT a",
    "CREDIT 30 USD TO ACCOUNT b FOR FROM ACCOUNT a",
    "CREDIT 30 USD ACCOUNT b FOR DEBIT FROM ACCOUNT a",
])
def test_malformed_instructions_return_none(instruction):
    """Test missing keywords or leading type yield None."""
    assert parse_instruction(instruction) is None


def test_keywords_out_of_order_return_none():
    """Test keywords must appear in sequence."""
    assert parse_instruction("DEBIT 30 USD FOR CREDIT TO ACCOUNT b FROM ACCOUNT a") is None


def test_find_keyword_case_insensitive():
    """Test keyword search ignores case and honours the start offset."""
    assert find_keyword("debit from From", "FROM") == 6
    assert find_keyword("debit from From", "FROM", 7) == 11
    assert find_keyword("debit", "FROM") == -1


def test_detect_grammar():
    """Test type detection by leading keyword."""
    assert detect_grammar("debit 1 USD").type == TransactionType.DEBIT
    assert detect_grammar("Credit 1 USD").type == TransactionType.CREDIT
    assert detect_grammar("refund 1 USD") is None


def test_grammars_cover_both_types():
    """Test one grammar per instruction type."""
    assert {grammar.type for grammar in GRAMMARS} == {TransactionType.DEBIT, TransactionType.CREDIT}


def test_extraction_error_returns_none(monkeypatch, caplog):
    """Test an exception raised while extracting fields is logged and yields None."""
    def broken(*args, **kwargs):
        raise IndexError("bad offset")

    monkeypatch.setattr("core.parsing.scan", broken)

    with caplog.at_level(logging.ERROR, logger="core.parsing"):
        assert parse_instruction("DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT b") is None

    assert "Failed to extract instruction fields: bad offset" in caplog.text


def test_keyword_inside_account_id_splits_it():
    """Test keywords are found as substrings, so 'on' inside an id starts the date."""
    parsed = parse_instruction("DEBIT 30 USD FROM ACCOUNT a FOR CREDIT TO ACCOUNT jonas")
    assert parsed.credit_account == "j"
    assert parsed.execute_by == "as"
