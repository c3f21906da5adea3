from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ledger_api.database import get_db
from ledger_api.services import LedgerEngine, UserService


def get_ledger(request: Request) -> LedgerEngine:
    return request.app.state.ledger


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)
