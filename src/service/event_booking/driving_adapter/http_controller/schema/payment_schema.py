from pydantic import BaseModel


class WebhookResponse(BaseModel):
    success: bool
    message: str


class ExpireOrdersResponse(BaseModel):
    expired_count: int
    message: str
