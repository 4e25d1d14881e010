from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class UpdateUserRequest(BaseModel):
    """
    Body of PUT /api/user/<id>.

    Authorized callers may send any uuid (the path wins); unauthorized callers
    address the target by putting its positional index in `uuid`.
    """
    model_config = ConfigDict(extra='ignore', coerce_numbers_to_str=True)

    uuid: str = Field(..., description="Canonical UUID, or the positional index for unauthorized callers")
    name: str = Field(..., min_length=1)
    description: str = ""
    profileB64: Optional[str] = None
    chatPhrase: str = ""

class UserResponse(BaseModel):
    uuid: str
    name: str
    description: str
    profileB64: Optional[str] = None
    chatPhrase: str
