from typing import List, Optional

from pydantic import BaseModel, Field


class GodownCreate(BaseModel):
    name: str = Field(min_length=1)
    godown_type: str


class CoverageRequest(BaseModel):
    local_body_id: Optional[int] = None
    ward_numbers: List[int] = Field(default_factory=list)
    all_wards: bool = False
    local_body_ids: List[int] = Field(default_factory=list)


class EligibleGodownsRead(BaseModel):
    local_body_id: Optional[int] = None
    ward_number: Optional[int] = None
    godown_ids: List[int]
