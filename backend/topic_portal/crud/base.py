from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import asc, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from topic_portal.db.base_class import Base

# Generic type variables
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


SortSpec = List[Tuple[str, SortDirection]]


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default create, read, update and delete operations.

        **Parameters**

        * `model`: SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, obj_id: Any) -> Optional[ModelType]:
        """
        Fetch a single record by primary key.

        Args:
            db: database session
            obj_id: record id

        Returns:
            Optional[ModelType]: the record, or None if it does not exist
        """
        if obj_id is None:
            return None
        return db.get(self.model, obj_id)

    def _filtered(self, db: Session, filter_conditions: Optional[Dict[str, Any]]) -> Query:
        query = db.query(self.model)
        if filter_conditions:
            for field, value in filter_conditions.items():
                if value is not None and hasattr(self.model, field):
                    query = query.filter(getattr(self.model, field) == value)
        return query

    def _sorted(self, query: Query, sort_by: Optional[SortSpec]) -> Query:
        if not sort_by:
            return query
        for field, direction in sort_by:
            if hasattr(self.model, field):
                column = getattr(self.model, field)
                query = query.order_by(desc(column) if direction == SortDirection.DESC else asc(column))
        return query

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            error = self.translate_integrity_error(exc)
            if error is None:
                raise
            raise error from exc

    def translate_integrity_error(self, exc: IntegrityError) -> Optional[Exception]:
        """Map a constraint violation to a domain error. Subclasses override this."""
        return None

    def create(self, db: Session, *, obj_in: CreateSchemaType) -> ModelType:
        """
        Insert a new record.

        Args:
            db: database session
            obj_in: validated input schema

        Returns:
            ModelType: the stored record
        """
        db_obj = self.model(**obj_in.model_dump(mode="json"))
        db.add(db_obj)
        self._commit(db)
        db.refresh(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        Overwrite fields of an existing record.

        Args:
            db: database session
            db_obj: the record to change
            obj_in: update schema or plain dict; only explicitly set fields are applied

        Returns:
            ModelType: the updated record
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(mode="json", exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.add(db_obj)
        self._commit(db)
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, obj_id: Any) -> Optional[ModelType]:
        """
        Delete a record.

        Args:
            db: database session
            obj_id: id of the record to delete

        Returns:
            Optional[ModelType]: the deleted record, or None if it did not exist
        """
        obj = self.get(db, obj_id)
        if obj:
            db.delete(obj)
            db.commit()
        return obj
