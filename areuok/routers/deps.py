from fastapi import Depends
from sqlalchemy.orm import Session

from areuok.db.base import get_db
from areuok.services.storage import RecordStore


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)
