import uuid

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session
from companion.core.db import SessionLocal
from companion.core.security import decode_access_token
from companion.models.user import User
from companion.services.assistant import AnswerGenerator
from companion.services.knowledge import KnowledgeBase

bearer = HTTPBearer()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    token = creds.credentials
    try:
        payload = decode_access_token(token)
        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(status_code=401, detail="Invalid token")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.get(User, _parse_uuid(user_id))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user

def get_knowledge_base(request: Request) -> KnowledgeBase:
    return request.app.state.knowledge_base

def get_answer_generator(request: Request) -> AnswerGenerator:
    return request.app.state.answer_generator

def _parse_uuid(value: str):
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token")
