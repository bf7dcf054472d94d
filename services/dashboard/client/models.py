"""
Wire models for the booking backend.

Field names follow the backend's camelCase JSON so payloads round-trip without
alias tables. Update DTOs are partial: dump them with exclude_none=True.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TransitPointType(str, Enum):
    PLACE = "PLACE"
    STATION = "STATION"
    OFFICE = "OFFICE"
    TRANSPORT = "TRANSPORT"


class TransitStopType(str, Enum):
    PICKUP = "PICKUP"
    DROPOFF = "DROPOFF"
    STOP = "STOP"


class RecordStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SeatClass(str, Enum):
    SEAT = "SEAT"
    BED = "BED"
    VIP = "VIP"


class _Wire(BaseModel):
    # Backend may add fields; keep them instead of failing.
    model_config = ConfigDict(extra="allow", use_enum_values=True)


# ---------------------------------------------------------------------------
# Transit points
# ---------------------------------------------------------------------------


class TransitPoint(_Wire):
    id: str
    name: str
    address: str = ""
    hotline: str = ""
    type: TransitPointType = TransitPointType.PLACE
    createdAt: Optional[str] = None
    lastModifiedAt: Optional[str] = None


class CreateTransitPoint(_Wire):
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    hotline: str = ""
    type: TransitPointType


class UpdateTransitPoint(_Wire):
    name: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    hotline: Optional[str] = None
    type: Optional[TransitPointType] = None


# ---------------------------------------------------------------------------
# Trips
# ---------------------------------------------------------------------------


class Trip(_Wire):
    id: str
    code: str
    name: str
    description: str = ""
    status: RecordStatus = RecordStatus.ACTIVE
    transitCount: int = 0
    detailsCount: int = 0
    createdAt: Optional[str] = None
    lastModifiedAt: Optional[str] = None


class CreateTrip(_Wire):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    status: RecordStatus = RecordStatus.ACTIVE


class UpdateTrip(_Wire):
    code: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[RecordStatus] = None


# ---------------------------------------------------------------------------
# Trip details (fare / seat classes per date range)
# ---------------------------------------------------------------------------


class TripDetail(_Wire):
    id: str
    tripId: str
    tripCode: str = ""
    fromDate: str
    toDate: str
    type: SeatClass
    price: float
    status: RecordStatus = RecordStatus.ACTIVE
    createdAt: Optional[str] = None
    lastModifiedAt: Optional[str] = None


class CreateTripDetail(_Wire):
    tripId: str
    tripCode: str
    fromDate: str
    toDate: str
    type: SeatClass
    price: float = Field(..., ge=0)
    status: RecordStatus = RecordStatus.ACTIVE


class UpdateTripDetail(_Wire):
    fromDate: Optional[str] = None
    toDate: Optional[str] = None
    type: Optional[SeatClass] = None
    price: Optional[float] = Field(None, ge=0)
    status: Optional[RecordStatus] = None


# ---------------------------------------------------------------------------
# Trip transits
# ---------------------------------------------------------------------------


class TripTransit(_Wire):
    id: str
    tripId: str
    transitPointId: str
    transitPoint: Optional[TransitPoint] = None
    arrivalTime: str = ""
    transitOrder: int
    type: TransitStopType = TransitStopType.PICKUP


class CreateTripTransit(_Wire):
    transitPointId: str
    arrivalTime: str
    type: TransitStopType
    transitOrder: int = Field(..., ge=0)


class UpdateTripTransit(_Wire):
    arrivalTime: Optional[str] = None
    type: Optional[TransitStopType] = None


class TransitOrderEntry(_Wire):
    id: str
    order: int = Field(..., ge=0)


class ReorderTripTransits(_Wire):
    transitOrders: list[TransitOrderEntry]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginCredentials(_Wire):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class AuthUser(_Wire):
    id: str
    email: str
    name: str = ""
    role: str = ""


class LoginResult(_Wire):
    token: str
    user: AuthUser
