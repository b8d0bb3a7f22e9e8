"""Mock Reaport API — drop-in replacement for ReaportClient.

Generates realistic flight offers on the fly so development runs and tests
never touch the live ticketing or registration hosts. Every call is recorded.
When MOCK_DELAYS=true, each call sleeps briefly to simulate network latency.
"""

import random
import string
import threading
import time
from datetime import datetime, timedelta, timezone

import config
from models import AvailableSeats, FlightOffer, PurchaseResponse
from reaport_client import StatusError


def _maybe_delay(lo=0.1, hi=0.8):
    """Sleep for a random interval when MOCK_DELAYS is enabled."""
    if config.MOCK_DELAYS:
        time.sleep(random.uniform(lo, hi))


DIRECTIONS = [
    "Moscow", "Saint Petersburg", "Kazan", "Sochi", "Novosibirsk",
    "Yekaterinburg", "Kaliningrad", "Vladivostok", "Samara", "Irkutsk",
]

# Registration opens this long before departure on the real hosts
_REGISTRATION_WINDOW = timedelta(hours=3)


def _random_flight_id():
    return "RP" + "".join(random.choices(string.digits, k=4))


def mock_flight_offers(count=None, now=None):
    """Generate flight offers departing over the next few hours."""
    now = now or datetime.now(timezone.utc)
    count = count if count is not None else random.randint(2, 5)
    offers = []
    for _ in range(count):
        departure = now + timedelta(minutes=random.randint(70, 360))
        departure = departure.replace(second=0, microsecond=0)
        offers.append(FlightOffer(
            flight_id=_random_flight_id(),
            registration_start_time=departure - _REGISTRATION_WINDOW,
            direction=random.choice(DIRECTIONS),
            departure_time=departure,
            available_seats=AvailableSeats(
                economy=random.randint(0, 120),
                business=random.randint(0, 24),
            ),
        ))
    offers.sort(key=lambda o: o.departure_time)
    return offers


class MockReaportClient:
    """In-memory stand-in for ReaportClient.

    flights: offers returned by discovery (generated when omitted).
    fail_purchases / fail_checkins: passenger or flight ids whose call
    answers with fail_status instead of 200.
    """

    def __init__(self, flights=None, message="Ticket purchased",
                 fail_purchases=(), fail_checkins=(), fail_status=400):
        self.flights = list(flights) if flights is not None else mock_flight_offers()
        self.message = message
        self.fail_purchases = set(fail_purchases)
        self.fail_checkins = set(fail_checkins)
        self.fail_status = fail_status
        self.purchases = []
        self.checkins = []
        self._lock = threading.Lock()

    def buy(self, request):
        _maybe_delay()
        with self._lock:
            self.purchases.append(request)
        if request.flight_id in self.fail_purchases or request.passenger_id in self.fail_purchases:
            raise StatusError(self.fail_status, "mock purchase rejected", "mock://tickets/buy")
        return PurchaseResponse(message=self.message, available_flights=self.flights)

    def buy_ticket(self, request):
        self.buy(request)

    def check_in(self, request):
        _maybe_delay()
        with self._lock:
            self.checkins.append(request)
        if request.passenger_id in self.fail_checkins:
            raise StatusError(self.fail_status, "mock check-in rejected", "mock://register/passenger")

    def purchases_for(self, flight_id):
        return [r for r in self.purchases if r.flight_id == flight_id]
