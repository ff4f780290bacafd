from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional, Literal


class SimModeRequest(BaseModel):
    mode: Literal["away", "home", "disarmed"]


class SimOutletRequest(BaseModel):
    name: Optional[str] = None  # default: the controlled outlet
    on: bool


class SimCameraRequest(BaseModel):
    name: str = Field(min_length=1)
    night_mode: Optional[bool] = None
