"""Utility functions for ledgerkit."""

from ledgerkit.utils.date_parser import parse_date
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_amount", "resolve_account"]
