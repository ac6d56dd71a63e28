"""CSV boundary: reading transaction rows and writing the account snapshot."""

import csv
import logging
from typing import Dict, Iterator, Mapping, Optional, TextIO

from client_account import ClientAccount
from exceptions import InputError
from fixed_decimal import FixedDecimal
from models import Transaction, TransactionType, ProcessingStats, MAX_CLIENT_ID, MAX_TRANSACTION_ID

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")
OUTPUT_HEADER = ("client", "available", "held", "total", "locked")
FIELD_SIZE_LIMIT = 16 * 1024 * 1024


def _parse_id(value: str, name: str, maximum: int) -> int:
    # int() would also accept signs, "_" grouping and non-ASCII digits.
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{name} {value!r} is not an unsigned integer")
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise ValueError(f"{name} {parsed} outside 0..{maximum}")
    return parsed


def parse_csv_row(row: Dict[Optional[str], object]) -> Optional[Transaction]:
    """Parse CSV row into Transaction. Returns None (after logging) for malformed rows."""
    try:
        # Short rows leave values as None; extra fields are collected under a None key.
        normalized = {
            k.strip().lower(): (v or "").strip()
            for k, v in row.items()
            if k is not None and not isinstance(v, list)
        }

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID)
        transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID)

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str and transaction_type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
            amount = FixedDecimal.parse(amount_str)

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError) as e:
        logger.warning(f"Failed to parse row {row}: {e}")
        return None


def read_transactions(filepath: str, stats: Optional[ProcessingStats] = None) -> Iterator[Transaction]:
    """
    Yield transactions from a CSV file one row at a time.

    Malformed rows, including rows the csv module cannot split, are logged and
    skipped. Raises InputError if the file cannot be opened or decoded, or if
    its header is unreadable or lacks a required column.
    """
    try:
        f = open(filepath, "r", newline="", encoding="utf-8-sig")
    except OSError as e:
        raise InputError(f"Cannot open {filepath}: {e}") from e

    # Amounts may carry arbitrarily many fractional digits.
    csv.field_size_limit(FIELD_SIZE_LIMIT)

    with f:
        reader = csv.DictReader(f)
        try:
            fieldnames = reader.fieldnames
        except (csv.Error, UnicodeDecodeError) as e:
            raise InputError(f"Cannot read header of {filepath}: {e}") from e
        if fieldnames is None:
            logger.info(f"{filepath} is empty")
            return

        columns = {name.strip().lower() for name in fieldnames}
        missing = [name for name in REQUIRED_COLUMNS if name not in columns]
        if missing:
            raise InputError(f"{filepath}: header is missing column(s) {', '.join(missing)}")

        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                logger.warning(f"Failed to read row at line {reader.line_num}: {e}")
                if stats is not None:
                    stats.record_malformed()
                continue
            except UnicodeDecodeError as e:
                raise InputError(f"Cannot decode {filepath}: {e}") from e

            transaction = parse_csv_row(row)
            if transaction is None:
                if stats is not None:
                    stats.record_malformed()
                continue
            yield transaction


def write_accounts_csv(accounts: Mapping[int, ClientAccount], writer: TextIO) -> None:
    """Write one row per account, sorted by client id. The header is always written."""
    csv_writer = csv.writer(writer, lineterminator="\n")
    csv_writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts):
        account = accounts[client_id]
        csv_writer.writerow([
            client_id,
            account.available.format(),
            account.held.format(),
            account.total.format(),
            str(account.locked).lower(),
        ])
