from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from medreminder.crud.base import CRUDBase
from medreminder.models.recipient import Recipient
from medreminder.schemas.recipient import RecipientCreate, RecipientUpdate


class CRUDRecipient(CRUDBase[Recipient, RecipientCreate, RecipientUpdate]):
    def create_with_owner(self, db: Session, *, obj_in: RecipientCreate, user_id: int) -> Recipient:
        db_obj = Recipient(**obj_in.model_dump(), user_id=user_id)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_for_owner(self, db: Session, *, id: UUID, user_id: int) -> Optional[Recipient]:
        return (
            db.query(Recipient)
            .filter(Recipient.id == id, Recipient.user_id == user_id)
            .first()
        )

    def list_for_owner(self, db: Session, *, user_id: int) -> List[Recipient]:
        return (
            db.query(Recipient)
            .filter(Recipient.user_id == user_id)
            .order_by(Recipient.created_at.desc())
            .all()
        )

    def count_for_owner(self, db: Session, *, user_id: int) -> int:
        return db.query(Recipient).filter(Recipient.user_id == user_id).count()


recipient = CRUDRecipient(Recipient)
