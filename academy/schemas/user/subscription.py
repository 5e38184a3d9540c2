import uuid

from pydantic import BaseModel


class CreateSubscription(BaseModel):
    plan_id: uuid.UUID
    payment_image_url: str | None = None
