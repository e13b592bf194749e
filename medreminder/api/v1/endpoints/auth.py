from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from medreminder import crud, models, schemas
from medreminder.api import deps
from medreminder.core import security
from medreminder.db.session import get_db

router = APIRouter()


@router.post("/register", response_model=schemas.User, status_code=201)
def register(user_in: schemas.UserCreate, db: Session = Depends(get_db)) -> Any:
    if crud.user.get_by_email(db, email=user_in.email):
        raise HTTPException(status_code=400, detail="A user with this email already exists")
    return crud.user.create(db, obj_in=user_in)


@router.post("/login", response_model=schemas.Token)
def login(db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests
    """
    user = crud.user.authenticate(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    if not crud.user.is_active(user):
        raise HTTPException(status_code=400, detail="Inactive user")
    return {
        "access_token": security.create_access_token(user.id),
        "token_type": "bearer",
    }


@router.get("/me", response_model=schemas.User)
def read_me(current_user: models.User = Depends(deps.get_current_user)) -> Any:
    return current_user
