"""
In-memory repositories for Snafles records.

Each repository wraps one record collection behind a small interface
(get, find, filter, insert, update) so handlers never touch the
underlying list. Storage can later be swapped for a real datastore
without changing route code.

Concurrency:
    Routes run on the server's thread pool, so every repository guards its
    collection with a single lock. Writes are serialized; reads copy the
    list under the lock and filter the snapshot.
"""

import dataclasses
import threading
from datetime import datetime, timezone
from typing import Callable, Generic, Iterable, Optional, TypeVar

from loguru import logger

from snafles.errors import ConflictError, NotFoundError
from snafles.storage.models import Product, Review, Role, User, Vendor


T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """
    Lock-guarded collection of records keyed by ``id``.

    Usage:
        repo = InMemoryRepository(resource="Vendor", unique_fields=("name",))
        repo.insert(vendor)
        repo.get("vendor-001")
    """

    def __init__(
        self,
        records: Optional[Iterable[T]] = None,
        resource: str = "Record",
        unique_fields: tuple[str, ...] = (),
    ):
        """
        Initialize repository.

        Args:
            records: Initial records (inserted with uniqueness checks).
            resource: Human-readable resource name used in errors.
            unique_fields: Fields besides ``id`` that must be unique.
        """
        self.resource = resource
        self.unique_fields = unique_fields
        self._records: list[T] = []
        self._lock = threading.RLock()

        for record in records or ():
            self.insert(record)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def all(self) -> list[T]:
        """Snapshot of every record in insertion order."""
        with self._lock:
            return list(self._records)

    def get(self, record_id: str) -> Optional[T]:
        """Get record by id."""
        return self.find(lambda r: r.id == record_id)

    def require(self, record_id: str) -> T:
        """Get record by id or raise NotFoundError."""
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(self.resource, record_id)
        return record

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """First record matching predicate."""
        with self._lock:
            for record in self._records:
                if predicate(record):
                    return record
        return None

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        """All records matching predicate, in insertion order."""
        return [r for r in self.all() if predicate(r)]

    def _check_unique(self, record: T, ignore_id: Optional[str] = None) -> None:
        for field_name in ("id",) + self.unique_fields:
            value = getattr(record, field_name)
            for existing in self._records:
                if existing.id == ignore_id:
                    continue
                if getattr(existing, field_name) == value:
                    raise ConflictError(
                        f"{self.resource} already exists with this {field_name}",
                        detail=f"{field_name}={value!r}",
                    )

    def insert(self, record: T) -> T:
        """
        Append a new record.

        Raises:
            ConflictError: id or a unique field is already taken.
        """
        with self._lock:
            self._check_unique(record)
            self._records.append(record)
        return record

    def update(self, record_id: str, **changes) -> T:
        """
        Replace fields of an existing record.

        Args:
            record_id: Record id
            **changes: Field values to set

        Returns:
            The updated record.

        Raises:
            NotFoundError: No record with that id.
            ConflictError: A change collides with a unique field.
        """
        with self._lock:
            for index, existing in enumerate(self._records):
                if existing.id == record_id:
                    updated = dataclasses.replace(existing, **changes)
                    self._check_unique(updated, ignore_id=record_id)
                    self._records[index] = updated
                    return updated
        raise NotFoundError(self.resource, record_id)


class UserRepository(InMemoryRepository[User]):
    """Users, unique by id and email."""

    def __init__(self, records: Optional[Iterable[User]] = None):
        super().__init__(records, resource="User", unique_fields=("email",))

    def get_by_email(self, email: str) -> Optional[User]:
        email = (email or "").strip().lower()
        return self.find(lambda u: u.email == email)

    def count_by_role(self, role: Role) -> int:
        return len(self.filter(lambda u: u.role == role))


class VendorRepository(InMemoryRepository[Vendor]):
    """Vendor storefronts."""

    def __init__(self, records: Optional[Iterable[Vendor]] = None):
        super().__init__(records, resource="Vendor")


class ProductRepository(InMemoryRepository[Product]):
    """Products with review bookkeeping."""

    def __init__(self, records: Optional[Iterable[Product]] = None):
        super().__init__(records, resource="Product")

    def by_vendor(self, vendor_id: str) -> list[Product]:
        return self.filter(lambda p: p.vendor == vendor_id)

    def add_review(self, product_id: str, review: Review) -> Product:
        """
        Append a review and fold its rating into the running average.

        The read of the current average and the write of the new one
        happen under the collection lock.
        """
        with self._lock:
            product = self.require(product_id)

            count = product.reviews or 0
            current = product.rating or 0.0
            new_rating = round((current * count + review.rating) / (count + 1), 1)

            updated = self.update(
                product_id,
                customer_reviews=product.customer_reviews + [review],
                reviews=count + 1,
                rating=new_rating,
                updated_at=datetime.now(timezone.utc),
            )

        logger.info(
            f"Review added to {product_id}: rating={new_rating} reviews={count + 1}"
        )
        return updated
