#!/usr/bin/env python3
"""Reaport autopilot - buys tickets for every flight on sale and checks the
passengers in as soon as each flight's registration window opens."""

import logging
import sys
import threading
import time
from datetime import datetime, timedelta, timezone

import config
from models import CheckinRequest, PurchaseRequest, new_passenger_id
from reaport_client import ReaportClient, ReaportError

logger = logging.getLogger(__name__)

CHECKIN_LEAD = timedelta(seconds=config.CHECKIN_LEAD_SECONDS)

# Event.wait overflows on timeouts past the platform time_t range
WAIT_CHUNK_SECONDS = 3600


def utcnow():
    return datetime.now(timezone.utc)


# ── Purchases ──────────────────────────────────────────────────────────

def discover_flights(client):
    """Buy one ticket without a flight to get the list of flights on sale."""
    request = PurchaseRequest(
        passenger_id=new_passenger_id(),
        flight_id="",
        seat_class=config.SEAT_CLASS,
        meal_type=config.DISCOVERY_MEAL,
        baggage=config.BAGGAGE,
    )
    return client.buy(request)


def purchase_count(offer):
    """One ticket per TICKETS_PER_SEATS free economy seats, rounded down.

    A non-positive TICKETS_PER_SEATS buys nothing.
    """
    if config.TICKETS_PER_SEATS <= 0:
        return 0
    return offer.available_seats.economy // config.TICKETS_PER_SEATS


def buy_tickets(client, offer):
    """Buy economy tickets on one flight sequentially.

    Returns the passenger ids in purchase order. The first failed purchase
    raises and the ids bought so far are lost with it.
    """
    passengers = []
    for _ in range(purchase_count(offer)):
        passenger_id = new_passenger_id()
        logger.info(f"Passenger {passenger_id} buys a ticket for flight {offer.flight_id}")
        client.buy_ticket(PurchaseRequest(
            passenger_id=passenger_id,
            flight_id=offer.flight_id,
            seat_class=config.SEAT_CLASS,
            meal_type=config.BULK_MEAL,
            baggage=config.BAGGAGE,
        ))
        passengers.append(passenger_id)
    return passengers


# ── Registration ───────────────────────────────────────────────────────

def registration_delay(departure_time, now=None):
    """Seconds from now until check-in opens; negative when already open."""
    now = now or utcnow()
    # Subtract in seconds so departures near datetime.min/max cannot overflow
    return (departure_time - now).total_seconds() - CHECKIN_LEAD.total_seconds()


def wait_until_open(delay, stop_event):
    """Block for delay seconds against the monotonic clock.

    Returns False when stop_event is set before the deadline.
    """
    deadline = time.monotonic() + delay
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return not stop_event.is_set()
        if stop_event.wait(min(remaining, WAIT_CHUNK_SECONDS)):
            return False


class RegistrationResult:
    """Outcome of one flight's registration task."""

    def __init__(self, flight_id, passengers):
        self.flight_id = flight_id
        self.passengers = list(passengers)
        self.checked_in = []
        self.error = None
        self.cancelled = False

    @property
    def ok(self):
        return self.error is None and not self.cancelled

    def __repr__(self):
        return (f"RegistrationResult({self.flight_id!r}, "
                f"{len(self.checked_in)}/{len(self.passengers)} checked in, "
                f"error={self.error!r}, cancelled={self.cancelled})")


def register_passengers(client, flight_id, departure_time, passengers, stop_event,
                        wait=wait_until_open, now=utcnow):
    """Wait for the check-in window of one flight, then check everyone in.

    A failed check-in stops this flight only; the error is kept on the
    result instead of being raised.
    """
    result = RegistrationResult(flight_id, passengers)
    delay = registration_delay(departure_time, now())
    logger.info(f"Register wait {flight_id}: {delay / 60:.2f} min")
    if not wait(delay, stop_event):
        logger.warning(f"Registration for {flight_id} cancelled before it opened")
        result.cancelled = True
        return result

    logger.info(f"Register begin {flight_id}")
    for passenger_id in result.passengers:
        if stop_event.is_set():
            logger.warning(f"Registration for {flight_id} cancelled, "
                           f"{len(result.checked_in)}/{len(result.passengers)} checked in")
            result.cancelled = True
            break
        logger.info(f"Checking in passenger {passenger_id} on flight {flight_id}")
        try:
            client.check_in(CheckinRequest(
                passenger_id=passenger_id,
                baggage_weight=config.CHECKIN_BAGGAGE_WEIGHT,
                meal_type=config.CHECKIN_MEAL,
            ))
        except ReaportError as e:
            logger.error(f"Check-in of {passenger_id} on {flight_id} failed ({e.category}): {e}")
            result.error = e
            break
        result.checked_in.append(passenger_id)
        logger.info(f"Passenger {passenger_id} checked in")
    return result


class RegistrationTask(threading.Thread):
    """Thread running register_passengers for one flight.

    The result is always set once the thread ends, so joining every task
    is enough to know how each flight went.
    """

    def __init__(self, client, offer, passengers, stop_event, wait=wait_until_open, now=utcnow):
        super().__init__(name=f"register-{offer.flight_id}", daemon=True)
        self.client = client
        self.offer = offer
        self.passengers = passengers
        self.stop_event = stop_event
        self.wait = wait
        self.now = now
        self.result = RegistrationResult(offer.flight_id, passengers)

    def run(self):
        try:
            self.result = register_passengers(
                self.client, self.offer.flight_id, self.offer.departure_time,
                self.passengers, self.stop_event, wait=self.wait, now=self.now,
            )
        except Exception as e:
            logger.exception(f"Registration task for {self.offer.flight_id} crashed")
            self.result.error = e


# ── Flow ───────────────────────────────────────────────────────────────

def run(client, stop_event=None, wait=wait_until_open, now=utcnow):
    """Discover flights, buy tickets and register passengers.

    Returns (exit_code, results) where results holds one RegistrationResult
    per flight that got a registration task.
    """
    stop_event = stop_event or threading.Event()
    tasks = []
    exit_code = 0
    try:
        try:
            response = discover_flights(client)
        except ReaportError as e:
            logger.error(f"Flight discovery failed ({e.category}): {e}")
            return 1, []

        print("Server response:")
        print(response.model_dump_json(by_alias=True, indent=2))

        for offer in response.available_flights:
            try:
                passengers = buy_tickets(client, offer)
            except ReaportError as e:
                logger.error(f"Purchase on flight {offer.flight_id} failed ({e.category}): {e}")
                stop_event.set()
                exit_code = 1
                break
            task = RegistrationTask(client, offer, passengers, stop_event, wait=wait, now=now)
            tasks.append(task)
            task.start()
        for task in tasks:
            task.join()
    except KeyboardInterrupt:
        logger.warning("Interrupted, cancelling pending registrations")
        stop_event.set()
        for task in tasks:
            task.join()
        return 130, [t.result for t in tasks]

    results = [t.result for t in tasks]
    for result in results:
        if result.ok:
            logger.info(f"Flight {result.flight_id}: {len(result.checked_in)} passenger(s) checked in")
        else:
            exit_code = 1
            logger.warning(f"Flight {result.flight_id}: {len(result.checked_in)}/"
                           f"{len(result.passengers)} checked in"
                           f"{' (cancelled)' if result.cancelled else ''}")
    return exit_code, results


def build_client():
    if config.MOCK_API:
        from mock_reaport_api import MockReaportClient
        logger.info("Using mock Reaport API")
        return MockReaportClient()
    return ReaportClient(config.TICKETS_BASE_URL, config.REGISTER_BASE_URL,
                         timeout=config.REQUEST_TIMEOUT)


def main():
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(threadName)s: %(message)s",
                        force=True)
    config.validate()
    exit_code, _ = run(build_client())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
