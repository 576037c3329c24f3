from __future__ import annotations
from typing import Optional
from sqlalchemy import select

from fitplan.models import FitnessProfile
from fitplan.repositories.base import BaseRepository
from fitplan.schemas.profile import FitnessProfileData

class ProfileRepository(BaseRepository[FitnessProfile]):
    model = FitnessProfile

    def get_by_user(self, user_id: str) -> Optional[FitnessProfile]:
        stmt = select(FitnessProfile).where(FitnessProfile.user_id == user_id)
        with self.storage_errors("loading fitness profile"):
            return self.db.execute(stmt).scalar_one_or_none()

    def upsert(self, user_id: str, data: FitnessProfileData) -> FitnessProfile:
        """One profile per user: replace every answer of an existing row."""
        values = data.model_dump(mode="json")
        profile = self.get_by_user(user_id)
        with self.storage_errors("saving fitness profile"):
            if profile is None:
                profile = FitnessProfile(user_id=user_id, **values)
                self.db.add(profile)
            else:
                for field, value in values.items():
                    setattr(profile, field, value)
            self.db.commit()
            self.db.refresh(profile)
        return profile
