"""
Shared Pydantic building blocks
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List


class CamelModel(BaseModel):
    """Snake_case in Python and storage, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class IdList(CamelModel):
    ids: List[str] = []
