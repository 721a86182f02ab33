"""Base model configuration for all mabl API payloads."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with standard configuration.

    Unknown fields are ignored so that additions to the mabl API payloads do
    not break parsing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")
