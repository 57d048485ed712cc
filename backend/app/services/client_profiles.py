"""Saved clients for the invoice "to" party."""

import logging
from typing import List

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.crud.crud_client_profile import client_profile_crud
from backend.app.models.client_profile import ClientProfile

logger = logging.getLogger(__name__)


def get_client(db: Session, owner_id: int, client_id: int) -> ClientProfile:
    client = client_profile_crud.get(db, id=client_id, owner_id=owner_id)
    if client is None:
        raise NotFoundError("Client profile")
    return client


def list_clients(db: Session, owner_id: int) -> List[ClientProfile]:
    return client_profile_crud.list_sorted(db, owner_id=owner_id)


def search_clients(db: Session, owner_id: int, query: str) -> List[ClientProfile]:
    needle = query.lower()
    return [
        client
        for client in list_clients(db, owner_id)
        if needle in client.name.lower() or needle in (client.email or "").lower()
    ]


def create_client(db: Session, owner_id: int, values: dict) -> ClientProfile:
    client = client_profile_crud.create(db, owner_id=owner_id, **values)
    logger.info("Created client profile %s for owner %s", client.id, owner_id)
    return client


def update_client(db: Session, owner_id: int, client_id: int, updates: dict) -> ClientProfile:
    client = get_client(db, owner_id, client_id)
    if "name" in updates and not updates["name"]:
        del updates["name"]
    return client_profile_crud.update(db, db_obj=client, **updates)


def delete_client(db: Session, owner_id: int, client_id: int) -> ClientProfile:
    client = get_client(db, owner_id, client_id)
    return client_profile_crud.soft_delete(db, db_obj=client)


def upsert_from_invoice(db: Session, owner_id: int, values: dict) -> ClientProfile:
    """Save an invoice recipient, updating the live client with exactly the same name if there is one."""
    existing = client_profile_crud.get_by_name(db, owner_id=owner_id, name=values["name"])
    if existing is not None:
        return client_profile_crud.update(db, db_obj=existing, **values)
    return create_client(db, owner_id, values)
