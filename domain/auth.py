"""Domain Entities - Auth"""
from pydantic import BaseModel, ConfigDict

from domain.enums import UserRole


class User(BaseModel):
    """Staff member logged in through the mock login"""
    email: str
    name: str
    role: UserRole = UserRole.STAFF

    model_config = ConfigDict(from_attributes=True)

    @staticmethod
    def from_email(email: str, role: UserRole = UserRole.STAFF) -> "User":
        return User(email=email, name=email.split("@")[0], role=role)
