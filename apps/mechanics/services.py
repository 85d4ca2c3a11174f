from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException, status, Depends
import logging

from apps.mechanics.models import Mechanic
from apps.mechanics.schemas import MechanicUpdate, AvailabilityUpdate
from apps.auth.models import UserModel
from core.database import get_db

logger = logging.getLogger(__name__)


class MechanicService:
    def __init__(self, db: Session):
        self.db = db

    def get_mechanic(self, mechanic_id: int) -> Optional[Mechanic]:
        return self.db.query(Mechanic).filter(Mechanic.id == mechanic_id).first()

    def get_profile_for(self, user: UserModel) -> Mechanic:
        """Profile of a mechanic account, created on first access if missing"""
        profile = user.mechanic_profile
        if profile is None:
            profile = Mechanic(user_id=user.id)
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(profile)
            logger.info(f"Created missing mechanic profile for {user.email}")
        return profile

    def get_mechanics(
        self,
        skip: int = 0,
        limit: int = 100,
        specialization: Optional[str] = None,
        service_area: Optional[str] = None,
        verified: Optional[bool] = None,
    ) -> Tuple[List[Dict], int]:
        query = self.db.query(Mechanic).options(joinedload(Mechanic.user))

        if specialization:
            query = query.filter(Mechanic.specialization.ilike(f"%{specialization}%"))
        if service_area:
            query = query.filter(Mechanic.service_area.ilike(f"%{service_area}%"))
        if verified is not None:
            query = query.filter(Mechanic.verified == verified)

        # Best rated first, unrated last
        query = query.order_by(func.coalesce(Mechanic.rating, 0).desc(), Mechanic.id)

        total = query.count()
        mechanics = [self.mechanic_to_response(m) for m in query.offset(skip).limit(limit).all()]
        return mechanics, total

    def update_profile(self, user: UserModel, update: MechanicUpdate) -> Mechanic:
        profile = self.get_profile_for(user)
        update_data = update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")

        for field, value in update_data.items():
            setattr(profile, field, value)

        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"Updated mechanic profile {profile.id}")
        return profile

    def update_availability(self, user: UserModel, update: AvailabilityUpdate) -> Mechanic:
        profile = self.get_profile_for(user)
        profile.availability = update.availability
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def mechanic_to_response(self, mechanic: Mechanic) -> Dict:
        return {
            "id": mechanic.id,
            "user_id": mechanic.user_id,
            "name": mechanic.user.name,
            "email": mechanic.user.email,
            "phone": mechanic.user.phone,
            "certification": mechanic.certification,
            "specialization": mechanic.specialization,
            "service_area": mechanic.service_area,
            "rate": mechanic.rate,
            "verified": bool(mechanic.verified),
            "availability": mechanic.availability,
            "rating": mechanic.rating,
            "created_at": mechanic.created_at,
        }


# Dependency injection
def get_mechanic_service(db: Session = Depends(get_db)) -> MechanicService:
    return MechanicService(db)
