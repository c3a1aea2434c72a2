"""Transaction ledger.

The ledger is the in-memory collection of income and expense records for
the session. Every successful mutation writes the full collection back to
local storage under the ``expenses`` key. Invalid input never raises:
``add`` and ``update`` simply return ``None`` and leave the ledger as it was.

Records are stored with snake_case field names (``kind``, ``updated_at``).
Blobs written by the earlier browser version used ``type`` and
``updatedAt``; those names are still accepted on read.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional

import pandas as pd

from . import config
from .month_selector import MonthSelection
from .persistent_store import LocalStorage

logger = logging.getLogger(__name__)

LEDGER_COLUMNS = ['id', 'description', 'amount', 'category', 'kind', 'date', 'updated_at']

# Older blobs used these field names
_FIELD_ALIASES = {'type': 'kind', 'updatedAt': 'updated_at'}

_EDITABLE_FIELDS = {'description', 'amount', 'category', 'kind', 'date'}


def parse_amount(value: Any) -> Optional[float]:
    """Parse a user-supplied quantity into a non-negative float.

    Args:
        value: Number or numeric string (surrounding whitespace allowed)

    Returns:
        The parsed value, or ``None`` when it is not a finite non-negative number

    Example:
        >>> parse_amount(" 12.50 ")
        12.5
        >>> parse_amount("abc") is None
        True
        >>> parse_amount(-3) is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed) or parsed < 0:
        return None
    return parsed


def parse_timestamp(value: Any) -> datetime:
    """Coerce an ISO string or datetime into a naive local datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            stamp = pd.Timestamp(value)
            if stamp is pd.NaT:
                raise ValueError(f"Unparseable timestamp: {value!r}")
            parsed = stamp.to_pydatetime()
    else:
        raise ValueError(f"Unsupported timestamp: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _clean_description(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class Transaction:
    """A single income or expense record.

    ``amount`` is always a non-negative magnitude; the direction of the
    money flow is carried by ``kind``.
    """
    id: int
    description: str
    amount: float
    category: str
    kind: str
    date: datetime
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['date'] = self.date.isoformat()
        if self.updated_at is None:
            data.pop('updated_at')
        else:
            data['updated_at'] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Transaction':
        """Build a transaction from its serialized form.

        Raises:
            ValueError: If a required field is missing or invalid
        """
        fields = {_FIELD_ALIASES.get(k, k): v for k, v in data.items()}
        try:
            record_id = int(fields['id'])
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"Invalid transaction id: {fields.get('id')!r}") from e
        description = _clean_description(fields.get('description'))
        amount = parse_amount(fields.get('amount'))
        category = fields.get('category')
        kind = fields.get('kind')
        if description is None or amount is None:
            raise ValueError(f"Transaction {record_id} has no valid description/amount")
        if category not in config.CATEGORIES or kind not in config.KINDS:
            raise ValueError(f"Transaction {record_id} has unknown category/kind")
        if 'date' not in fields:
            raise ValueError(f"Transaction {record_id} has no date")
        updated_at = fields.get('updated_at')
        return cls(
            id=record_id,
            description=description,
            amount=amount,
            category=category,
            kind=kind,
            date=parse_timestamp(fields['date']),
            updated_at=parse_timestamp(updated_at) if updated_at else None,
        )


class LedgerStore:
    """Ordered collection of transactions with storage write-through."""

    def __init__(
        self,
        records: Optional[List[Transaction]] = None,
        storage: Optional[LocalStorage] = None,
        key: str = config.EXPENSES_KEY,
    ):
        """Initialize the ledger.

        Args:
            records: Initial transactions (not persisted until the next mutation)
            storage: Optional storage that receives every successful mutation
            key: Storage key for the serialized collection
        """
        self._records: List[Transaction] = list(records or [])
        self.storage = storage
        self.key = key
        self._last_id = max((r.id for r in self._records), default=0)

    @classmethod
    def load(cls, storage: LocalStorage, key: str = config.EXPENSES_KEY) -> 'LedgerStore':
        """Load the ledger from storage, skipping malformed records."""
        data = storage.load(key, [])
        if not isinstance(data, list):
            logger.warning("Ignoring '%s' blob: expected a list, got %s", key, type(data).__name__)
            data = []
        records: List[Transaction] = []
        seen = set()
        for entry in data:
            if not isinstance(entry, dict):
                continue
            try:
                record = Transaction.from_dict(entry)
            except ValueError as e:
                logger.warning("Skipping stored transaction: %s", e)
                continue
            if record.id in seen:
                logger.warning("Skipping duplicate transaction id %s", record.id)
                continue
            seen.add(record.id)
            records.append(record)
        return cls(records, storage=storage, key=key)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._records))

    def records(self) -> List[Transaction]:
        return list(self._records)

    def get(self, record_id: int) -> Optional[Transaction]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def _next_id(self) -> int:
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def add(
        self,
        description: Any,
        amount: Any,
        category: str = 'food',
        kind: str = 'expense',
        date: Optional[datetime] = None,
    ) -> Optional[Transaction]:
        """Append a new transaction.

        Args:
            description: Label; must be non-empty after trimming
            amount: Number or numeric string; must be non-negative
            category: One of ``config.CATEGORIES``
            kind: ``'income'`` or ``'expense'``
            date: Creation timestamp; defaults to now

        Returns:
            The stored transaction, or ``None`` if the input was rejected
        """
        text = _clean_description(description)
        value = parse_amount(amount)
        if text is None or value is None:
            logger.debug("Rejected transaction: description=%r amount=%r", description, amount)
            return None
        if category not in config.CATEGORIES or kind not in config.KINDS:
            logger.debug("Rejected transaction: category=%r kind=%r", category, kind)
            return None
        try:
            created = parse_timestamp(date) if date is not None else datetime.now()
        except ValueError:
            logger.debug("Rejected transaction: date=%r", date)
            return None
        record = Transaction(
            id=self._next_id(),
            description=text,
            amount=value,
            category=category,
            kind=kind,
            date=created,
        )
        self._records.append(record)
        self._persist()
        return record

    def remove(self, record_id: int) -> bool:
        """Remove the transaction with ``record_id``; no-op if absent."""
        remaining = [r for r in self._records if r.id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        self._persist()
        return True

    def update(self, record_id: int, fields: Mapping[str, Any]) -> Optional[Transaction]:
        """Merge ``fields`` into the transaction with ``record_id``.

        Unspecified fields are left unchanged and ``id`` can never change.
        Any invalid value rejects the whole update.

        Returns:
            The updated transaction, or ``None`` if nothing changed
        """
        current = self.get(record_id)
        if current is None:
            return None
        changes: Dict[str, Any] = {}
        for name, value in fields.items():
            name = _FIELD_ALIASES.get(name, name)
            if name == 'id':
                continue
            if name not in _EDITABLE_FIELDS:
                logger.debug("Ignoring unknown transaction field %r", name)
                continue
            if name == 'description':
                value = _clean_description(value)
            elif name == 'amount':
                value = parse_amount(value)
            elif name == 'category' and value not in config.CATEGORIES:
                value = None
            elif name == 'kind' and value not in config.KINDS:
                value = None
            elif name == 'date':
                try:
                    value = parse_timestamp(value)
                except ValueError:
                    value = None
            if value is None:
                logger.debug("Rejected update of %s: invalid %s", record_id, name)
                return None
            changes[name] = value
        updated = replace(current, updated_at=datetime.now(), **changes)
        self._records = [updated if r.id == record_id else r for r in self._records]
        self._persist()
        return updated

    def sorted_by_date(self) -> List[Transaction]:
        """Return the transactions newest first."""
        return sorted(self._records, key=lambda r: r.date, reverse=True)

    def for_month(self, month: int, year: int) -> List[Transaction]:
        """Return transactions dated within ``month`` (0-based) of ``year``."""
        selection = MonthSelection(month, year)
        return [r for r in self._records if selection.contains(r.date)]

    def to_records(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self._records]

    def to_dataframe(self) -> pd.DataFrame:
        """Return the ledger as a DataFrame with ``LEDGER_COLUMNS``."""
        return transactions_to_dataframe(self._records)

    def _persist(self) -> None:
        if self.storage is None:
            return
        self.storage.save(self.key, self.to_records())


def transactions_to_dataframe(transactions: List[Transaction]) -> pd.DataFrame:
    if not transactions:
        return pd.DataFrame(columns=LEDGER_COLUMNS)
    df = pd.DataFrame([asdict(t) for t in transactions], columns=LEDGER_COLUMNS)
    df['date'] = pd.to_datetime(df['date'])
    df['amount'] = df['amount'].astype(float)
    return df
