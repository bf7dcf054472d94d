"""Typed async client for the booking REST backend."""

from services.dashboard.client.auth import AuthService
from services.dashboard.client.http import BackendClient, create_http_client
from services.dashboard.client.transit_points import TransitPointService
from services.dashboard.client.trip_details import TripDetailService
from services.dashboard.client.trip_transits import TripTransitService
from services.dashboard.client.trips import TripService

__all__ = [
    "AuthService",
    "BackendClient",
    "create_http_client",
    "TransitPointService",
    "TripDetailService",
    "TripTransitService",
    "TripService",
]
