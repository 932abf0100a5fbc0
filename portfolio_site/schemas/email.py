from typing import Optional

from pydantic import BaseModel


class EmailMessage(BaseModel):
    from_name: str
    from_address: str
    to: str
    subject: str
    reply_to: Optional[str] = None
    text_body: str
    html_body: str
