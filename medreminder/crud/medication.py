from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from medreminder.crud.base import CRUDBase
from medreminder.models.medication import Medication, FREQUENCY_DEFAULT_TIMES
from medreminder.models.recipient import Recipient
from medreminder.schemas.medication import MedicationCreate, MedicationUpdate


class CRUDMedication(CRUDBase[Medication, MedicationCreate, MedicationUpdate]):
    def create(self, db: Session, *, obj_in: MedicationCreate) -> Medication:
        data = obj_in.model_dump()
        if not data.get("times"):
            data["times"] = list(FREQUENCY_DEFAULT_TIMES[obj_in.frequency])
        data["frequency"] = obj_in.frequency.value
        db_obj = Medication(**data, is_active=True)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def _owned(self, db: Session, user_id: int):
        return (
            db.query(Medication)
            .join(Recipient, Medication.recipient_id == Recipient.id)
            .options(joinedload(Medication.recipient))
            .filter(Recipient.user_id == user_id)
        )

    def get_for_owner(self, db: Session, *, id: UUID, user_id: int) -> Optional[Medication]:
        return self._owned(db, user_id).filter(Medication.id == id).first()

    def list_for_owner(
        self, db: Session, *, user_id: int, recipient_id: Optional[UUID] = None
    ) -> List[Medication]:
        q = self._owned(db, user_id)
        if recipient_id:
            q = q.filter(Medication.recipient_id == recipient_id)
        return q.order_by(Medication.created_at.desc()).all()

    def count_active_for_owner(self, db: Session, *, user_id: int) -> int:
        return (
            db.query(Medication)
            .join(Recipient, Medication.recipient_id == Recipient.id)
            .filter(Recipient.user_id == user_id, Medication.is_active == True)  # noqa: E712
            .count()
        )


medication = CRUDMedication(Medication)
