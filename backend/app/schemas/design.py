from pydantic import BaseModel


class BackgroundDesignRead(BaseModel):
    id: str
    name: str
    image_url: str
    background_color: str
    border_color: str
    accent_color: str
