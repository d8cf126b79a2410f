"""Response shapes shared across routers."""
from pydantic import BaseModel


class MessageOut(BaseModel):
    success: bool = True
    message: str
