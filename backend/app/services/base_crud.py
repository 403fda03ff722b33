"""
Generic CRUD service wrapping a single SQLAlchemy model
"""
from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

ModelT = TypeVar("ModelT")


def clean_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Unwrap enum members so they are stored as their plain values"""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in data.items()
    }


class BaseCrudService(Generic[ModelT]):
    """
    Create/read/update/delete operations for one model.

    Subclasses set ``model`` and ``resource_name`` and may override any
    operation that needs extra rules (counters, ownership, uniqueness).
    """

    model: Type[ModelT] = None
    resource_name: str = "Resource"
    search_fields: Iterable[str] = ()
    user_field: str = "user_id"

    def __init__(self, db: Session, model: Optional[Type[ModelT]] = None):
        """
        Args:
            db: Database session
            model: Model class (defaults to the class attribute)
        """
        self.db = db
        if model is not None:
            self.model = model
        if self.model is None:
            raise ValueError(f"{type(self).__name__} has no model configured")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _column(self, key: str):
        column = getattr(self.model, key, None)
        if column is None or not hasattr(column, "property") or not hasattr(column.property, "columns"):
            raise BadRequestError(f"Unknown field '{key}' for {self.resource_name}")
        return column

    def _commit(self, operation: str) -> None:
        """Commit, turning integrity violations into conflicts"""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error during {operation} on {self.resource_name}: {e.orig}")
            raise ConflictError(f"{self.resource_name} {operation} conflicts with existing data")

    def not_found(self, id: Any) -> NotFoundError:
        return NotFoundError(f"{self.resource_name} with ID {id} not found")

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def _checked(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Reject unknown keys before anything touches the session"""
        values = clean_values(data)
        for key in values:
            self._column(key)
        return values

    def create(self, data: Dict[str, Any]) -> ModelT:
        instance = self.model(**self._checked(data))
        self.db.add(instance)
        self._commit("create")
        self.db.refresh(instance)
        logger.info(f"Created {self.resource_name} {instance.id}")
        return instance

    def find_all(self) -> List[ModelT]:
        query = self.db.query(self.model)
        if hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc())
        return query.all()

    def get(self, id: UUID) -> Optional[ModelT]:
        """Return the row or None"""
        return self.db.get(self.model, id)

    def find_one(self, id: UUID) -> ModelT:
        """
        Get a row by ID

        Raises:
            NotFoundError: If no row has this ID
        """
        instance = self.get(id)
        if instance is None:
            raise self.not_found(id)
        return instance

    def find_one_or_fail(self, id: UUID) -> ModelT:
        return self.find_one(id)

    def update(self, id: UUID, data: Dict[str, Any]) -> ModelT:
        instance = self.find_one(id)
        for key, value in self._checked(data).items():
            setattr(instance, key, value)
        self._commit("update")
        self.db.refresh(instance)
        logger.info(f"Updated {self.resource_name} {id}")
        return instance

    def remove(self, id: UUID) -> ModelT:
        instance = self.find_one(id)
        self.db.delete(instance)
        self._commit("delete")
        logger.info(f"Deleted {self.resource_name} {id}")
        return instance

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_by(self, key: str, value: Any) -> Optional[ModelT]:
        """First row whose ``key`` equals ``value``"""
        return self.db.query(self.model).filter(self._column(key) == value).first()

    def find_many_by(self, key: str, value: Any) -> List[ModelT]:
        return self.db.query(self.model).filter(self._column(key) == value).all()

    def find_by_user(self, user_id: UUID) -> List[ModelT]:
        return self.find_many_by(self.user_field, user_id)

    def paginate(self, skip: int = 0, take: int = 10) -> List[ModelT]:
        if skip < 0 or take < 1:
            raise BadRequestError("skip must be >= 0 and take must be >= 1")
        query = self.db.query(self.model)
        if hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc())
        return query.offset(skip).limit(take).all()

    def search(self, keyword: Optional[str], fields: Optional[Iterable[str]] = None) -> List[ModelT]:
        """
        Case-insensitive substring search OR-ed across fields

        Args:
            keyword: Text to look for; empty returns every row
            fields: Column names (defaults to ``search_fields``)
        """
        fields = list(fields or self.search_fields)
        if not keyword or not fields:
            return self.find_all()
        pattern = f"%{keyword.strip()}%"
        conditions = [self._column(field).ilike(pattern) for field in fields]
        return self.db.query(self.model).filter(or_(*conditions)).all()
