from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NetworkBase(BaseModel):
    network_name: str = Field(min_length=2, max_length=100)
    store_network_url: str = Field(min_length=1, max_length=200)

    model_config = ConfigDict(str_strip_whitespace=True)


class NetworkCreate(NetworkBase):
    pass


class NetworkUpdate(NetworkBase):
    network_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    store_network_url: Optional[str] = Field(default=None, max_length=200)


class Network(NetworkBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )
