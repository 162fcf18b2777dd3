from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union, Tuple
from enum import Enum
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy import asc, desc

from wordbook.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default create, read, update and delete operations.

        Write methods only flush: the caller owns the transaction and decides
        when to commit or roll back.

        **Parameters**

        * `model`: SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, obj_id: Any) -> Optional[ModelType]:
        """
        Fetch a single record by ID.

        Args:
            db: database session
            obj_id: record ID

        Returns:
            Optional[ModelType]: the record, or None when it does not exist
        """
        if obj_id is None:
            return None
        return db.get(self.model, obj_id)

    def _filtered(self, db: Session, filter_conditions: Optional[Dict[str, Any]]):
        query = db.query(self.model)
        if filter_conditions:
            for field, value in filter_conditions.items():
                if hasattr(self.model, field):
                    query = query.filter(getattr(self.model, field) == value)
        return query

    def get_multi(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: Optional[int] = None,
        filter_conditions: Optional[Dict[str, Any]] = None,
        sort_by: Optional[Union[str, List[Tuple[str, SortDirection]]]] = None
    ) -> List[ModelType]:
        """
        Fetch several records with equality filters, sorting and paging.

        Args:
            db: database session
            skip: number of records to skip
            limit: maximum number of records, None for all
            filter_conditions: equality filters, e.g. {"chapter_id": 3}
            sort_by: a field name (ascending) or a list of (field, direction) pairs

        Returns:
            List[ModelType]: matching records
        """
        query = self._filtered(db, filter_conditions)

        if sort_by:
            if isinstance(sort_by, str):
                query = query.order_by(asc(getattr(self.model, sort_by)))
            elif isinstance(sort_by, list):
                for field, direction in sort_by:
                    if hasattr(self.model, field):
                        column = getattr(self.model, field)
                        if direction == SortDirection.DESC:
                            query = query.order_by(desc(column))
                        else:
                            query = query.order_by(asc(column))

        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_count(
        self,
        db: Session,
        *,
        filter_conditions: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        Count the records matching the equality filters.
        """
        return self._filtered(db, filter_conditions).count()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        Add a new record and flush it so its ID is assigned.

        Args:
            db: database session
            obj_in: creation data, a schema object or a dict of column values

        Returns:
            ModelType: the pending record
        """
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.flush()
        return db_obj

    @staticmethod
    def update(
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        Update an existing record.

        Args:
            db: database session
            db_obj: record to update
            obj_in: update data; a schema object contributes only the fields that were set

        Returns:
            ModelType: the updated record
        """
        if db_obj is None:
            raise TypeError("db_obj must not be None")
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.add(db_obj)
        db.flush()
        return db_obj

    def remove(self, db: Session, *, obj_id: Any) -> Optional[ModelType]:
        """
        Delete a record; ORM cascades remove its children.

        Returns:
            Optional[ModelType]: the deleted record, or None when it did not exist
        """
        obj = db.get(self.model, obj_id)
        if obj:
            db.delete(obj)
            db.flush()
        return obj
