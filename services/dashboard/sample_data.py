"""
In-memory screens: bookings, withdrawals, revenue dashboard, admin profile.

These screens have no backend endpoints yet; they run on seeded arrays held in
app state. Each app instance gets its own copy (SampleDataStore()), so edits
such as approving a withdrawal last for the process lifetime only.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from services.dashboard.client.pagination import PageRequest, PageResponse, paginate
from services.dashboard.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Booking(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str
    customerName: str
    customerEmail: str
    tripId: str
    route: str
    departureDate: str
    seats: int
    amount: float
    paymentMethod: str
    status: BookingStatus
    bookingDate: str


class Withdrawal(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str
    customerName: str
    customerEmail: str
    amount: float
    bankAccount: str
    requestDate: str
    status: WithdrawalStatus
    notes: str = ""


class PeriodStat(BaseModel):
    name: str
    revenue: float
    bookings: int
    trips: int


class Profile(BaseModel):
    name: str
    email: str
    phone: str
    role: str
    joinDate: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    phone: Optional[str] = None


class PasswordChange(BaseModel):
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=1)
    confirmPassword: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

BOOKINGS_SEED: list[dict] = [
    {
        "id": "BK-001", "customerName": "John Smith", "customerEmail": "john.smith@example.com",
        "tripId": "TRIP-001", "route": "New York to Boston", "departureDate": "2024-05-15T08:00:00",
        "seats": 2, "amount": 91.98, "paymentMethod": "Credit Card", "status": "confirmed",
        "bookingDate": "2024-05-01T14:23:45",
    },
    {
        "id": "BK-002", "customerName": "Emily Johnson", "customerEmail": "emily.j@example.com",
        "tripId": "TRIP-002", "route": "Boston to Washington DC", "departureDate": "2024-05-16T09:30:00",
        "seats": 1, "amount": 65.5, "paymentMethod": "PayPal", "status": "confirmed",
        "bookingDate": "2024-05-02T09:15:22",
    },
    {
        "id": "BK-003", "customerName": "Michael Brown", "customerEmail": "mbrown@example.com",
        "tripId": "TRIP-001", "route": "New York to Boston", "departureDate": "2024-05-15T08:00:00",
        "seats": 3, "amount": 137.97, "paymentMethod": "Credit Card", "status": "cancelled",
        "bookingDate": "2024-05-01T18:45:10",
    },
    {
        "id": "BK-004", "customerName": "Sarah Wilson", "customerEmail": "swilson@example.com",
        "tripId": "TRIP-005", "route": "New York to Washington DC", "departureDate": "2024-05-19T06:45:00",
        "seats": 2, "amount": 144.0, "paymentMethod": "Debit Card", "status": "confirmed",
        "bookingDate": "2024-05-03T11:32:18",
    },
    {
        "id": "BK-005", "customerName": "David Lee", "customerEmail": "dlee@example.com",
        "tripId": "TRIP-004", "route": "Philadelphia to New York", "departureDate": "2024-05-18T14:00:00",
        "seats": 4, "amount": 169.0, "paymentMethod": "Credit Card", "status": "pending",
        "bookingDate": "2024-05-04T15:20:33",
    },
]

WITHDRAWALS_SEED: list[dict] = [
    {
        "id": "WD-001", "customerName": "John Smith", "customerEmail": "john.smith@example.com",
        "amount": 150.0, "bankAccount": "XXXX-XXXX-XXXX-1234", "requestDate": "2024-05-01T10:23:45",
        "status": "pending", "notes": "",
    },
    {
        "id": "WD-002", "customerName": "Emily Johnson", "customerEmail": "emily.j@example.com",
        "amount": 75.5, "bankAccount": "XXXX-XXXX-XXXX-5678", "requestDate": "2024-05-02T14:15:22",
        "status": "approved", "notes": "Processed on May 3rd",
    },
    {
        "id": "WD-003", "customerName": "Michael Brown", "customerEmail": "mbrown@example.com",
        "amount": 200.0, "bankAccount": "XXXX-XXXX-XXXX-9012", "requestDate": "2024-05-03T09:45:10",
        "status": "rejected", "notes": "Invalid bank account information",
    },
    {
        "id": "WD-004", "customerName": "Sarah Wilson", "customerEmail": "swilson@example.com",
        "amount": 120.75, "bankAccount": "XXXX-XXXX-XXXX-3456", "requestDate": "2024-05-04T16:32:18",
        "status": "pending", "notes": "",
    },
    {
        "id": "WD-005", "customerName": "David Lee", "customerEmail": "dlee@example.com",
        "amount": 350.25, "bankAccount": "XXXX-XXXX-XXXX-7890", "requestDate": "2024-05-05T11:20:33",
        "status": "approved", "notes": "Processed on May 6th",
    },
]

# Month labels follow the dashboard's T1..T12 axis.
MONTHLY_STATS_SEED: list[dict] = [
    {"name": "T1", "revenue": 4000, "bookings": 240, "trips": 40},
    {"name": "T2", "revenue": 3000, "bookings": 198, "trips": 35},
    {"name": "T3", "revenue": 5000, "bookings": 300, "trips": 45},
    {"name": "T4", "revenue": 4500, "bookings": 270, "trips": 42},
    {"name": "T5", "revenue": 6000, "bookings": 360, "trips": 50},
    {"name": "T6", "revenue": 5500, "bookings": 330, "trips": 48},
    {"name": "T7", "revenue": 7000, "bookings": 420, "trips": 55},
    {"name": "T8", "revenue": 6500, "bookings": 390, "trips": 52},
    {"name": "T9", "revenue": 8000, "bookings": 480, "trips": 60},
    {"name": "T10", "revenue": 7500, "bookings": 450, "trips": 58},
    {"name": "T11", "revenue": 9000, "bookings": 540, "trips": 65},
    {"name": "T12", "revenue": 9500, "bookings": 570, "trips": 68},
]

YEARLY_STATS_SEED: list[dict] = [
    {"name": "2020", "revenue": 45000, "bookings": 2700, "trips": 450},
    {"name": "2021", "revenue": 52000, "bookings": 3120, "trips": 520},
    {"name": "2022", "revenue": 61000, "bookings": 3660, "trips": 610},
    {"name": "2023", "revenue": 72000, "bookings": 4320, "trips": 720},
    {"name": "2024", "revenue": 85000, "bookings": 5100, "trips": 850},
]

STAT_YEARS = ("2020", "2021", "2022", "2023", "2024")

PROFILE_SEED: dict = {
    "name": "Admin User",
    "email": "admin@busgo.com",
    "phone": "+1 (555) 123-4567",
    "role": "Administrator",
    "joinDate": "January 15, 2023",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _matches(keyword: Optional[str], *fields: str) -> bool:
    if not keyword:
        return True
    needle = keyword.lower()
    return any(needle in field.lower() for field in fields)


def _status_filter(status: Optional[str], value: str) -> bool:
    return not status or status == "all" or status == value


class SampleDataStore:
    """Mutable copies of the seeded screens for one app instance."""

    def __init__(self) -> None:
        self.bookings = [Booking.model_validate(b) for b in copy.deepcopy(BOOKINGS_SEED)]
        self.withdrawals = [Withdrawal.model_validate(w) for w in copy.deepcopy(WITHDRAWALS_SEED)]
        self.monthly = [PeriodStat.model_validate(s) for s in MONTHLY_STATS_SEED]
        self.yearly = [PeriodStat.model_validate(s) for s in YEARLY_STATS_SEED]
        self.profile = Profile.model_validate(PROFILE_SEED)

    # -- bookings ---------------------------------------------------------

    def search_bookings(self, page: PageRequest, status: Optional[str] = None) -> PageResponse[Booking]:
        """Keyword over customer name / id / route, plus status filter."""
        matched = [
            b for b in self.bookings
            if _matches(page.keyword, b.customerName, b.id, b.route) and _status_filter(status, b.status)
        ]
        return paginate(matched, page)

    def get_booking(self, booking_id: str) -> Booking:
        for booking in self.bookings:
            if booking.id == booking_id:
                return booking
        raise NotFound(f"Booking {booking_id} not found.")

    # -- withdrawals ------------------------------------------------------

    def search_withdrawals(self, page: PageRequest, status: Optional[str] = None) -> PageResponse[Withdrawal]:
        """Keyword over customer name / id, plus status filter."""
        matched = [
            w for w in self.withdrawals
            if _matches(page.keyword, w.customerName, w.id) and _status_filter(status, w.status)
        ]
        return paginate(matched, page)

    def get_withdrawal(self, withdrawal_id: str) -> Withdrawal:
        for withdrawal in self.withdrawals:
            if withdrawal.id == withdrawal_id:
                return withdrawal
        raise NotFound(f"Withdrawal {withdrawal_id} not found.")

    def decide_withdrawal(
        self,
        withdrawal_id: str,
        decision: Literal["approved", "rejected"],
        notes: Optional[str] = None,
    ) -> Withdrawal:
        """Approve or reject. The processing note replaces the previous one when given."""
        current = self.get_withdrawal(withdrawal_id)
        if current.status != WithdrawalStatus.PENDING.value:
            raise ValidationFailed(f"Withdrawal {withdrawal_id} is already {current.status}.")
        updated = current.model_copy(
            update={
                "status": WithdrawalStatus(decision).value,
                "notes": current.notes if notes is None else notes,
            }
        )
        self.withdrawals = [updated if w.id == withdrawal_id else w for w in self.withdrawals]
        logger.info("withdrawal_%s id=%s amount=%.2f", decision, withdrawal_id, updated.amount)
        return updated

    # -- dashboard --------------------------------------------------------

    def dashboard_stats(self, period: str = "monthly", year: str = "2024") -> dict:
        """Series + totals for the revenue dashboard.

        The seeded monthly series is the same for every year in STAT_YEARS;
        `year` is validated and only labels the scope.
        """
        if period not in ("monthly", "yearly"):
            raise ValidationFailed(f"Unknown period {period!r}; expected monthly or yearly.")
        if period == "monthly" and year not in STAT_YEARS:
            raise ValidationFailed(f"No statistics for year {year!r}.")

        series = self.monthly if period == "monthly" else self.yearly
        total_revenue = sum(s.revenue for s in series)
        total_bookings = sum(s.bookings for s in series)
        total_trips = sum(s.trips for s in series)
        average = round(total_revenue / total_bookings, 2) if total_bookings > 0 else 0

        return {
            "period": period,
            "year": year if period == "monthly" else None,
            "scope": f"For year {year}" if period == "monthly" else "All time",
            "series": [s.model_dump() for s in series],
            "totals": {
                "revenue": total_revenue,
                "bookings": total_bookings,
                "trips": total_trips,
                "averageRevenuePerBooking": average,
            },
        }

    # -- profile ----------------------------------------------------------

    def update_profile(self, update: ProfileUpdate) -> Profile:
        self.profile = self.profile.model_copy(update=update.model_dump(exclude_none=True))
        return self.profile

    def change_password(self, change: PasswordChange) -> datetime:
        """Validate a password change. No credential store behind it yet."""
        if change.newPassword != change.confirmPassword:
            raise ValidationFailed("New passwords do not match.")
        if change.newPassword == change.currentPassword:
            raise ValidationFailed("The new password must differ from the current one.")
        return datetime.now(timezone.utc)
