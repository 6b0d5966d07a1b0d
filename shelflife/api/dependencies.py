"""FastAPI dependencies for authentication, database and suggestion services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from shelflife.database import get_db
from shelflife.models.user import User
from shelflife.services.auth import decode_access_token
from shelflife.services.llm import LLMService
from shelflife.services.persistence import PersistenceGateway
from shelflife.services.recipe_generation import RecipeGenerationPipeline
from shelflife.services.suggestions import RecipeSuggestionService
from shelflife.services.trigger import SqlTriggerStateStore, TriggerDebouncer

security = HTTPBearer()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub") if payload else None

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_llm_service() -> LLMService:
    """Get LLM service instance."""
    return LLMService()


@lru_cache
def get_trigger_debouncer() -> TriggerDebouncer:
    """Process-wide debouncer; holds the in-flight flag for every user."""
    return TriggerDebouncer()


def get_persistence_gateway(
    db: Annotated[Session, Depends(get_db)],
) -> PersistenceGateway:
    """Get persistence gateway bound to the request session."""
    return PersistenceGateway(db)


def get_suggestion_service(
    db: Annotated[Session, Depends(get_db)],
    gateway: Annotated[PersistenceGateway, Depends(get_persistence_gateway)],
    llm_service: Annotated[LLMService, Depends(get_llm_service)],
    debouncer: Annotated[TriggerDebouncer, Depends(get_trigger_debouncer)],
) -> RecipeSuggestionService:
    """Get recipe suggestion service with dependencies."""
    return RecipeSuggestionService(
        gateway=gateway,
        pipeline=RecipeGenerationPipeline(gateway, llm_service),
        state_store=SqlTriggerStateStore(db),
        debouncer=debouncer,
    )
