from datetime import datetime
from typing import Optional

from pydantic import BaseModel, computed_field


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    photo: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def photo_url(self) -> Optional[str]:
        return f"/uploads/{self.photo}" if self.photo else None


class UserMutationOut(BaseModel):
    message: str
    user: UserOut
