from typing import Generic, List, Optional, Type, TypeVar

import psycopg2
from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.declarative import DeclarativeMeta
from sqlalchemy.orm import Query, Session

from app.core.logger import logger

ModelType = TypeVar('ModelType', bound=DeclarativeMeta)
CreateSchemaType = TypeVar('CreateSchemaType', bound=BaseModel)
UpdateSchemaType = TypeVar('UpdateSchemaType', bound=BaseModel)


def _integrity_detail(e: IntegrityError, resource: str) -> str:
    orig = str(e.orig)
    if isinstance(e.orig, psycopg2.errors.UniqueViolation) and 'DETAIL' in orig:
        error_detail = orig.split('DETAIL: ')[1].split('\n')[0].strip()
        if '(' in error_detail and ')' in error_detail:
            keys = error_detail.split('(')[1].split(')')[0]
            return f'It already exists a {resource} with this {keys}'
    if 'UNIQUE constraint failed' in orig:
        keys = orig.split('UNIQUE constraint failed: ')[1].split('.')[-1]
        return f'It already exists a {resource} with this {keys}'
    return 'Integrity error'


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _apply_filters(
        self, query: Query, filters: Optional[BaseModel] = None
    ) -> Query:
        """Override this method to implement filter logic"""
        if not filters:
            return query

        for field, value in filters.model_dump(exclude_none=True).items():
            op = 'eq'
            if field.endswith('_in') and isinstance(value, list):
                field = field[:-3]
                op = 'in_'
            if hasattr(self.model, field) and value is not None:
                if op == 'in_':
                    query = query.filter(getattr(self.model, field).in_(value))
                else:
                    query = query.filter(getattr(self.model, field) == value)
        return query

    def _prepare_data(self, db: Session, obj: BaseModel, **dump_kwargs) -> dict:
        """Override this method to sanitize or derive fields before writing"""
        obj_data = obj.model_dump(**dump_kwargs)
        model_columns = self.model.__table__.columns.keys()
        return {k: v for k, v in obj_data.items() if k in model_columns}

    def _commit(self, db: Session, db_obj: ModelType) -> ModelType:
        try:
            db.commit()
        except IntegrityError as e:
            logger.error('Error writing %s: %s', self.model.__name__, str(e))
            db.rollback()
            detail = _integrity_detail(e, self.model.__name__)
            logger.error('Integrity error: %s', detail)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=detail,
            )
        except Exception as e:
            logger.error('SQL error writing %s: %s', self.model.__name__, str(e))
            db.rollback()
            raise e
        db.refresh(db_obj)
        return db_obj

    def create(self, db: Session, obj: CreateSchemaType) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**self._prepare_data(db, obj))
        db.add(db_obj)
        db_obj = self._commit(db, db_obj)
        logger.info('%s created: %s', self.model.__name__, db_obj.id)
        return db_obj

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        """Get a single record by id, None when it does not exist."""
        obj = db.query(self.model).filter(self.model.id == id).first()
        if not obj:
            logger.error('%s not found: %s', self.model.__name__, id)
        return obj

    def find(
        self,
        db: Session,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[BaseModel] = None,
        sort_by: str = 'created_at',
        sort_order: str = 'desc',
    ) -> List[ModelType]:
        """Get multiple records with pagination, filters and sorting."""
        query = db.query(self.model)
        query = self._apply_filters(query, filters)

        # Validate sort field exists
        if not hasattr(self.model, sort_by):
            raise HTTPException(
                status_code=400, detail=f'Invalid sort field: {sort_by}'
            )

        # Apply sorting
        order_by = getattr(self.model, sort_by)
        if sort_order == 'desc':
            order_by = order_by.desc()

        query = query.order_by(order_by, self.model.id.desc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update(
        self, db: Session, id: int, obj: UpdateSchemaType
    ) -> Optional[ModelType]:
        """Update a record, None when it does not exist."""
        db_obj = self.get(db, id)
        if not db_obj:
            return None

        obj_data = self._prepare_data(db, obj, exclude_unset=True)
        for field, value in obj_data.items():
            setattr(db_obj, field, value)

        db_obj = self._commit(db, db_obj)
        logger.info('%s updated: %s', self.model.__name__, id)
        return db_obj

    def delete(self, db: Session, id: int) -> Optional[ModelType]:
        """Hard delete a record, returning it or None when it does not exist."""
        obj = self.get(db, id)
        if not obj:
            return None
        try:
            db.delete(obj)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error('IntegrityError in delete: %s', e)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail='Cannot delete this record because it is referenced by other records',
            )
        logger.info('%s deleted: %s', self.model.__name__, id)
        return obj
