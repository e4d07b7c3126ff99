"""In-memory document store.

Stands in for the document database behind the service. It offers the same
kind of primitives a document store does (atomic read, set-add, set-remove,
append, compound-key lookup and upsert, TTL expiry), each applied atomically
to a single document. There are no multi-document transactions: callers that
touch two documents issue two independent operations.
"""

import logging
import threading
from collections.abc import Callable
from datetime import timedelta
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from models.clock import ServiceClock
from models.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

DocT = TypeVar("DocT", bound=BaseModel)


def _singular(name: str) -> str:
    if name.endswith("ies"):
        return name[:-3] + "y"
    return name[:-1] if name.endswith("s") else name


class _Collection:
    """Documents of one kind, indexed by their id field."""

    def __init__(self, name: str, id_field: str, entity: str) -> None:
        self.name = name
        self.id_field = id_field
        self.entity = entity
        self.documents: dict[str, BaseModel] = {}
        self.ttl: Optional[tuple[str, timedelta]] = None


class DocumentStore:
    """Thread-safe in-memory document store.

    Every public method runs under a single lock, so each primitive is atomic
    with respect to the others. Reads hand out deep copies; the only way to
    change a stored document is through a mutation primitive.

    Attributes:
        clock: Clock used to evaluate TTL expiry.
    """

    def __init__(self, clock: ServiceClock | None = None) -> None:
        self.clock = clock or ServiceClock()
        self._collections: dict[str, _Collection] = {}
        self._lock = threading.RLock()

    # ===== Collection Management =====

    def create_collection(self, name: str, id_field: str, entity: str | None = None) -> None:
        """Register a collection.

        Args:
            name: Collection name (e.g. "accounts").
            id_field: Attribute of each document holding its id.
            entity: Singular name used in NotFoundError messages.

        Raises:
            ValueError: If the collection already exists.
        """
        with self._lock:
            if name in self._collections:
                raise ValueError(f"Collection '{name}' already exists")
            self._collections[name] = _Collection(name, id_field, entity or _singular(name))

    def ensure_ttl(self, name: str, field: str, ttl: timedelta) -> None:
        """Expire documents once ``field`` is older than ``ttl``.

        Expired documents are invisible to every operation and are purged the
        next time the collection is touched.

        Args:
            name: Collection name.
            field: Datetime attribute the TTL is measured from.
            ttl: Lifetime of a document.
        """
        if ttl <= timedelta(0):
            raise ValueError("TTL must be positive")
        with self._lock:
            self._get_collection(name).ttl = (field, ttl)

    def clear(self) -> None:
        """Remove every document from every collection (collections remain)."""
        with self._lock:
            for collection in self._collections.values():
                collection.documents.clear()

    # ===== Reads =====

    def get(self, name: str, doc_id: str) -> Optional[BaseModel]:
        """Return a copy of a document, or None if absent."""
        with self._lock:
            collection = self._live(name)
            doc = collection.documents.get(doc_id)
            return doc.model_copy(deep=True) if doc is not None else None

    def require(self, name: str, doc_id: str) -> BaseModel:
        """Return a copy of a document.

        Raises:
            NotFoundError: If the document does not exist.
        """
        doc = self.get(name, doc_id)
        if doc is None:
            raise NotFoundError(self._get_collection(name).entity, doc_id)
        return doc

    def find(
        self,
        name: str,
        predicate: Callable[[Any], bool] | None = None,
        sort_key: Callable[[Any], Any] | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Any]:
        """Return copies of all documents matching a predicate.

        Args:
            name: Collection name.
            predicate: Filter applied to each document (None matches all).
            sort_key: Optional key to sort results by.
            descending: Sort direction when sort_key is given.
            limit: Maximum number of results.

        Returns:
            Matching documents (copies).
        """
        with self._lock:
            collection = self._live(name)
            matches = [
                doc for doc in collection.documents.values()
                if predicate is None or predicate(doc)
            ]
            if sort_key is not None:
                matches.sort(key=sort_key, reverse=descending)
            if limit is not None:
                matches = matches[:limit]
            return [doc.model_copy(deep=True) for doc in matches]

    def find_one(self, name: str, **criteria: Any) -> Optional[Any]:
        """Return a copy of the first document whose attributes equal ``criteria``."""
        with self._lock:
            doc = self._match_one(self._live(name), criteria)
            return doc.model_copy(deep=True) if doc is not None else None

    def count(self, name: str, predicate: Callable[[Any], bool] | None = None) -> int:
        """Count documents matching a predicate."""
        with self._lock:
            collection = self._live(name)
            if predicate is None:
                return len(collection.documents)
            return sum(1 for doc in collection.documents.values() if predicate(doc))

    # ===== Writes =====

    def insert(self, name: str, doc: DocT) -> DocT:
        """Insert a new document.

        Args:
            name: Collection name.
            doc: Document to insert (stored as a copy).

        Returns:
            A copy of the stored document.

        Raises:
            StorageError: If a document with the same id already exists.
        """
        with self._lock:
            collection = self._live(name)
            doc_id = getattr(doc, collection.id_field)
            if doc_id in collection.documents:
                raise StorageError(f"Duplicate {collection.entity} id '{doc_id}'")
            collection.documents[doc_id] = doc.model_copy(deep=True)
            return doc.model_copy(deep=True)

    def set_fields(self, name: str, doc_id: str, **fields: Any) -> Any:
        """Overwrite attributes of a document.

        Returns:
            A copy of the updated document.
        """
        with self._lock:
            doc = self._require_live(name, doc_id)
            for field, value in fields.items():
                setattr(doc, field, value)
            return doc.model_copy(deep=True)

    def insert_unique(self, name: str, doc: DocT, **criteria: Any) -> Optional[DocT]:
        """Insert a document unless another one already matches ``criteria``.

        The uniqueness check and the insert happen under one lock, so two
        concurrent callers can never both claim the same attribute values.

        Returns:
            A copy of the stored document, or None if ``criteria`` was taken.
        """
        with self._lock:
            if self._match_one(self._live(name), criteria) is not None:
                return None
            return self.insert(name, doc)

    def set_fields_unique(
        self,
        name: str,
        doc_id: str,
        unique: dict[str, Any],
        **fields: Any,
    ) -> Optional[Any]:
        """Overwrite attributes unless another document already matches ``unique``.

        Args:
            name: Collection name.
            doc_id: Document to update.
            unique: Attribute values no other document may hold.
            fields: Attributes to set.

        Returns:
            A copy of the updated document, or None if ``unique`` was taken.

        Raises:
            NotFoundError: If the document does not exist.
        """
        with self._lock:
            collection = self._live(name)
            doc = self._require_live(name, doc_id)
            for other in collection.documents.values():
                if other is not doc and all(
                    getattr(other, field) == value for field, value in unique.items()
                ):
                    return None
            for field, value in fields.items():
                setattr(doc, field, value)
            return doc.model_copy(deep=True)

    def add_to_set(
        self,
        name: str,
        doc_id: str,
        field: str,
        value: Any,
        key: Callable[[Any], Any] | None = None,
    ) -> bool:
        """Append ``value`` to a list attribute unless already present.

        Args:
            name: Collection name.
            doc_id: Document id.
            field: List attribute to add to.
            value: Value to add.
            key: Optional identity function for comparing list items.

        Returns:
            True if the value was added, False if it was already present.
        """
        with self._lock:
            items = getattr(self._require_live(name, doc_id), field)
            if key is None:
                present = value in items
            else:
                present = any(key(item) == key(value) for item in items)
            if present:
                return False
            items.append(value)
            return True

    def remove_from_set(self, name: str, doc_id: str, field: str, value: Any) -> bool:
        """Remove every occurrence of ``value`` from a list attribute.

        Returns:
            True if anything was removed.
        """
        with self._lock:
            doc = self._require_live(name, doc_id)
            items = getattr(doc, field)
            remaining = [item for item in items if item != value]
            if len(remaining) == len(items):
                return False
            setattr(doc, field, remaining)
            return True

    def push(self, name: str, doc_id: str, field: str, value: Any) -> None:
        """Append ``value`` to a list attribute (duplicates allowed)."""
        with self._lock:
            getattr(self._require_live(name, doc_id), field).append(value)

    def pull_item(
        self, name: str, doc_id: str, field: str, item_id_field: str, item_id: str
    ) -> Optional[Any]:
        """Remove the list element whose ``item_id_field`` equals ``item_id``.

        Returns:
            The removed element, or None if no element matched.
        """
        with self._lock:
            items = getattr(self._require_live(name, doc_id), field)
            for index, item in enumerate(items):
                if getattr(item, item_id_field) == item_id:
                    return items.pop(index)
            return None

    def update_many(
        self, name: str, predicate: Callable[[Any], bool], **fields: Any
    ) -> int:
        """Set attributes on every matching document.

        Returns:
            Number of documents updated.
        """
        with self._lock:
            updated = 0
            for doc in self._live(name).documents.values():
                if predicate(doc):
                    for field, value in fields.items():
                        setattr(doc, field, value)
                    updated += 1
            return updated

    def delete(self, name: str, doc_id: str) -> bool:
        """Delete a document by id.

        Returns:
            True if a document was deleted.
        """
        with self._lock:
            return self._live(name).documents.pop(doc_id, None) is not None

    def delete_one(self, name: str, **criteria: Any) -> bool:
        """Delete the first document whose attributes equal ``criteria``.

        Returns:
            True if a document was deleted.
        """
        with self._lock:
            collection = self._live(name)
            doc = self._match_one(collection, criteria)
            if doc is None:
                return False
            del collection.documents[getattr(doc, collection.id_field)]
            return True

    def find_one_and_upsert(
        self,
        name: str,
        criteria: dict[str, Any],
        update: dict[str, Any],
        factory: Callable[[], DocT],
    ) -> tuple[DocT, bool]:
        """Atomically update the document matching ``criteria`` or insert a new one.

        Lookup and write happen under one lock, so concurrent callers with the
        same criteria never produce two documents.

        Args:
            name: Collection name.
            criteria: Attribute values identifying the document.
            update: Attributes to set when a document already matches.
            factory: Builds the document to insert when nothing matches.

        Returns:
            Tuple of (copy of the resulting document, whether it was inserted).
        """
        with self._lock:
            collection = self._live(name)
            doc = self._match_one(collection, criteria)
            if doc is not None:
                for field, value in update.items():
                    setattr(doc, field, value)
                return doc.model_copy(deep=True), False

            new_doc = factory()
            collection.documents[getattr(new_doc, collection.id_field)] = new_doc
            return new_doc.model_copy(deep=True), True

    # ===== Internals =====

    def _get_collection(self, name: str) -> _Collection:
        collection = self._collections.get(name)
        if collection is None:
            raise StorageError(f"Unknown collection '{name}'")
        return collection

    def _live(self, name: str) -> _Collection:
        """Return a collection after purging its expired documents."""
        collection = self._get_collection(name)
        if collection.ttl is not None:
            field, ttl = collection.ttl
            cutoff = self.clock.now() - ttl
            expired = [
                doc_id for doc_id, doc in collection.documents.items()
                if getattr(doc, field) <= cutoff
            ]
            for doc_id in expired:
                del collection.documents[doc_id]
            if expired:
                logger.debug(f"Expired {len(expired)} document(s) from {name}")
        return collection

    def _require_live(self, name: str, doc_id: str) -> BaseModel:
        collection = self._live(name)
        doc = collection.documents.get(doc_id)
        if doc is None:
            raise NotFoundError(collection.entity, doc_id)
        return doc

    @staticmethod
    def _match_one(collection: _Collection, criteria: dict[str, Any]) -> Optional[BaseModel]:
        for doc in collection.documents.values():
            if all(getattr(doc, field) == value for field, value in criteria.items()):
                return doc
        return None
