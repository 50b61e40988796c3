# routebatch/models/credentials.py

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class NormalCredentials(BaseModel):
    """
    Standard plan: a plain API key appended as `key=`.
    """
    model_config = ConfigDict(frozen=True)

    api_key: str


class PremiumCredentials(BaseModel):
    """
    Premium plan: client ID plus URL-safe base64 private key used to sign
    every request. `channel` is an optional reporting tag.
    """
    model_config = ConfigDict(frozen=True)

    client_id: str
    private_key: str
    channel: Optional[str] = None


Credentials = Union[NormalCredentials, PremiumCredentials]
