# FILE: backend/bizpage/api/endpoints/dependencies.py
# PHOENIX PROTOCOL - DEPENDENCIES
# 1. Bearer tokens are verified here only; issuing them is the auth service's job.

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import Annotated, Optional
from pymongo.database import Database
from jose import JWTError
from pydantic import BaseModel

from ...core.db import get_db
from ...core.security import decode_access_token
from ...services.business_service import BusinessService

class TokenData(BaseModel):
    id: Optional[str] = None

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

def get_business_service(db: Database = Depends(get_db)) -> BusinessService:
    return BusinessService(db)

def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except (JWTError, ValueError):
        raise credentials_exception

    user_id: Optional[str] = payload.get("id") or payload.get("sub")
    if user_id is None:
        raise credentials_exception
    return TokenData(id=user_id)
