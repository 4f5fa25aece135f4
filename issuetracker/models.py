from pydantic import BaseModel

ADMIN_ROLE = "admin"


class RequestContext(BaseModel):
    """The resolved session identity handed to every gated handler."""
    user_id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
