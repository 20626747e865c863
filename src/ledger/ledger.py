"""
Transaction Ledger

The in-memory snapshot of the signed-in user's transactions and every
figure derived from it.

WRITE SIDE:
- load() replaces the snapshot wholesale from the remote store
- add() / update() write remotely first, then patch the snapshot
- delete() removes locally even when the remote delete fails, and queues
  the id so the divergence is visible and can be retried

READ SIDE:
- Every total, balance and filter is computed on demand from the current
  snapshot. Nothing derived is cached, so reads never go stale.

DESIGN DECISION: The sign of the amount decides income vs expense for
every derivation, range-based and calendar-month alike.

DESIGN DECISION: No signed-in user is not an error. Mutations and loads
quietly do nothing and report that through their return value.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterable, Optional, Union

from src.audit import AuditLogger
from src.models.transaction import (
    DateRange,
    NewTransaction,
    Transaction,
    TransactionCategory,
    TransactionUpdate,
    ensure_utc,
)
from src.services.identity import IdentityProvider
from src.services.storage import (
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)


Clock = Callable[[], datetime]
RangeLike = Union[DateRange, str]

ZERO = Decimal("0")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_range(value: RangeLike) -> DateRange:
    if isinstance(value, DateRange):
        return value
    return DateRange.from_str(value)


def _sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def _sum_expenses(transactions: Iterable[Transaction]) -> Decimal:
    return sum((abs(t.amount) for t in transactions if t.is_expense), ZERO)


def _sum_income(transactions: Iterable[Transaction]) -> Decimal:
    return _sum_amounts(t for t in transactions if t.is_income)


class TransactionLedger:
    """
    Authoritative in-memory ledger for one user's transactions.

    Construct it explicitly with its collaborators and call initialize()
    once; nothing is loaded implicitly.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        identity: IdentityProvider,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Clock] = None,
        default_range: RangeLike = DateRange.MONTH,
        recent_limit: int = 5,
    ):
        """
        Args:
            storage: Remote transaction document store
            identity: Source of the signed-in user
            audit_logger: Where mutations and failures are recorded.
                         If None, logs locally only.
            clock: Returns the current time; injectable for tests
            default_range: Reporting range selected at start-up
            recent_limit: How many records recent_transactions() returns
                         when called without a limit
        """
        self._storage = storage
        self._identity = identity
        self._audit = audit_logger or AuditLogger()
        self._clock = clock or utc_now

        self._transactions: list[Transaction] = []
        self._selected_range = to_range(default_range)
        self._recent_limit = recent_limit
        self._pending_deletions: list[tuple[str, str]] = []

        # Per-category spending limits; not used by any derivation yet
        self.budgets: dict[TransactionCategory, Decimal] = {}

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> list[Transaction]:
        """Copy of the snapshot in load/append order."""
        return list(self._transactions)

    @property
    def selected_range(self) -> DateRange:
        return self._selected_range

    def select_range(self, date_range: RangeLike) -> DateRange:
        """Change the range used when a read is called without one."""
        self._selected_range = to_range(date_range)
        return self._selected_range

    @property
    def pending_deletions(self) -> list[str]:
        """Ids removed locally whose remote delete has not succeeded yet."""
        return [transaction_id for _, transaction_id in self._pending_deletions]

    def now(self) -> datetime:
        return ensure_utc(self._clock())

    def _index_of(self, transaction_id: str) -> Optional[int]:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        return None

    # -------------------------------------------------------------------------
    # Write side
    # -------------------------------------------------------------------------

    async def initialize(self) -> Optional[int]:
        """Explicit start-up step: perform the first load."""
        return await self.load()

    async def load(self) -> Optional[int]:
        """
        Replace the snapshot with the user's records from the remote store.

        Returns:
            Number of records loaded, or None when there is no signed-in
            user or the store could not be read (snapshot left as it was)
        """
        user_id = self._identity.current_user_id()
        if not user_id:
            return None

        try:
            loaded = await self._storage.list_by_user(user_id)
        except StorageError as e:
            await self._audit.log_load_failed(user_id, str(e))
            return None

        self._transactions = list(loaded)
        await self._audit.log_transactions_loaded(user_id, len(loaded))
        return len(loaded)

    async def add(
        self,
        new: Union[NewTransaction, dict],
    ) -> Optional[str]:
        """
        Record a new transaction remotely and append it locally.

        The date and owner are assigned here; the id comes from the store.

        Returns:
            The new transaction id, or None when no user is signed in

        Raises:
            StorageError: If the remote write fails (after logging it)
        """
        user_id = self._identity.current_user_id()
        if not user_id:
            return None

        if not isinstance(new, NewTransaction):
            new = NewTransaction.model_validate(new)

        recorded_at = self.now()
        draft = new.build(transaction_id="pending", user_id=user_id, recorded_at=recorded_at)

        try:
            transaction_id = await self._storage.create(draft.to_document())
        except Exception as e:
            await self._audit.log_save_failed(user_id, "create", str(e))
            raise

        transaction = draft.model_copy(update={"id": transaction_id})
        self._transactions.append(transaction)

        await self._audit.log_transaction_added(
            user_id=user_id,
            transaction_id=transaction_id,
            amount=str(transaction.amount),
            category=transaction.category.value,
        )
        return transaction_id

    async def update(
        self,
        transaction_id: str,
        changes: Union[TransactionUpdate, dict],
    ) -> Optional[Transaction]:
        """
        Edit a transaction remotely, then replace it in the snapshot.

        The record keeps its position in the snapshot.

        Returns:
            The updated transaction, or None when no user is signed in

        Raises:
            NotFoundError: If the id is not in the snapshot
            StorageError: If the remote write fails (snapshot unchanged)
        """
        user_id = self._identity.current_user_id()
        if not user_id:
            return None

        if not isinstance(changes, TransactionUpdate):
            changes = TransactionUpdate.model_validate(changes)

        index = self._index_of(transaction_id)
        if index is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        updated = changes.apply_to(self._transactions[index])
        document = updated.to_document()
        fields = {
            key: document[key]
            for key in ("amount", "category", "description", "type")
        }

        try:
            await self._storage.update(user_id, transaction_id, fields)
        except Exception as e:
            await self._audit.log_save_failed(
                user_id, "update", str(e), transaction_id=transaction_id
            )
            raise

        # The snapshot may have been reloaded while we awaited the store
        index = self._index_of(transaction_id)
        if index is not None:
            self._transactions[index] = updated

        await self._audit.log_transaction_updated(
            user_id=user_id,
            transaction_id=transaction_id,
            changed_fields=sorted(changes.model_dump(exclude_none=True)),
        )
        return updated

    async def delete(self, transaction_id: str) -> bool:
        """
        Delete a transaction remotely and remove it from the snapshot.

        The local removal happens even if the remote delete fails. In that
        case the failure is logged, not raised, and the id is queued for
        retry_pending_deletions().

        Returns:
            True if the remote store confirmed the delete
        """
        user_id = self._identity.current_user_id()
        if not user_id:
            return False

        remote_ok = True
        try:
            await self._storage.delete(user_id, transaction_id)
        except StorageError as e:
            remote_ok = False
            self._pending_deletions.append((user_id, transaction_id))
            await self._audit.log_remote_delete_failed(
                user_id=user_id,
                transaction_id=transaction_id,
                error_message=str(e),
                pending=len(self._pending_deletions),
            )

        self._transactions = [
            t for t in self._transactions if t.id != transaction_id
        ]

        if remote_ok:
            await self._audit.log_transaction_deleted(user_id, transaction_id)
        return remote_ok

    async def retry_pending_deletions(self) -> int:
        """
        Replay remote deletes that failed earlier.

        Returns:
            How many queued deletions the store accepted this time
        """
        reconciled = 0
        still_pending = []
        for user_id, transaction_id in self._pending_deletions:
            try:
                await self._storage.delete(user_id, transaction_id)
            except StorageError:
                still_pending.append((user_id, transaction_id))
                continue
            reconciled += 1
            await self._audit.log_deletion_reconciled(user_id, transaction_id)

        self._pending_deletions = still_pending
        return reconciled

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    def filter_by_range(self, date_range: Optional[RangeLike] = None) -> list[Transaction]:
        """
        Transactions dated within the rolling window ending now.

        All (or no window) returns the full snapshot in original order.
        """
        resolved = self._selected_range if date_range is None else to_range(date_range)
        window = resolved.window
        if window is None:
            return list(self._transactions)

        cutoff = self.now() - window
        return [t for t in self._transactions if t.date >= cutoff]

    def monthly_transactions(self, reference: Optional[datetime] = None) -> list[Transaction]:
        """Transactions in the same calendar month and year as ``reference`` (UTC)."""
        reference = self.now() if reference is None else ensure_utc(reference)
        return [
            t for t in self._transactions
            if t.date.year == reference.year and t.date.month == reference.month
        ]

    def total_income(self, date_range: Optional[RangeLike] = None) -> Decimal:
        return _sum_income(self.filter_by_range(date_range))

    def total_expenses(self, date_range: Optional[RangeLike] = None) -> Decimal:
        """Absolute value of all money out in the range."""
        return _sum_expenses(self.filter_by_range(date_range))

    def balance(self, date_range: Optional[RangeLike] = None) -> Decimal:
        transactions = self.filter_by_range(date_range)
        return _sum_income(transactions) - _sum_expenses(transactions)

    def category_total(
        self,
        category: Union[TransactionCategory, str],
        date_range: Optional[RangeLike] = None,
    ) -> Decimal:
        """Absolute expense total for one category; income is ignored."""
        category = TransactionCategory(category)
        return _sum_expenses(
            t for t in self.filter_by_range(date_range) if t.category == category
        )

    def recent_transactions(self, limit: Optional[int] = None) -> list[Transaction]:
        """The ``limit`` most recent transactions, newest first."""
        if limit is None:
            limit = self._recent_limit
        ordered = sorted(self._transactions, key=lambda t: t.date, reverse=True)
        return ordered[:max(limit, 0)]

    def monthly_expenses(self) -> Decimal:
        return _sum_expenses(self.monthly_transactions())

    def monthly_income(self) -> Decimal:
        return _sum_income(self.monthly_transactions())

    def transactions_in_category(
        self,
        category: Optional[Union[TransactionCategory, str]] = None,
    ) -> list[Transaction]:
        """All transactions, or only those in ``category``."""
        if category is None:
            return list(self._transactions)
        category = TransactionCategory(category)
        return [t for t in self._transactions if t.category == category]
