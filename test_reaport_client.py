import json
import unittest
from unittest import mock

import requests

from models import CheckinRequest, PurchaseRequest
from reaport_client import (
    DecodeError, ReaportClient, RequestBuildError, StatusError, TransportError,
)

PURCHASE_BODY = {
    "message": "Ticket purchased",
    "availableFlights": [{
        "flightId": "RP1042",
        "registrationStartTime": "2026-10-19T09:00:00Z",
        "direction": "Kazan",
        "departureTime": "2026-10-19T12:00:00Z",
        "availableSeats": {"economy": 47, "business": 6},
    }],
}


def fake_response(status_code=200, body=None):
    resp = mock.Mock()
    resp.status_code = status_code
    raw = body if isinstance(body, (str, bytes)) else json.dumps(body or {})
    resp.content = raw.encode("utf-8") if isinstance(raw, str) else raw
    resp.text = resp.content.decode("utf-8")
    return resp


def purchase(flight_id=""):
    return PurchaseRequest(passenger_id="p-1", flight_id=flight_id,
                           seat_class="economy", meal_type="Vegan", baggage="да")


class TestReaportClient(unittest.TestCase):

    def setUp(self):
        self.client = ReaportClient("https://tickets.example/", "https://register.example", timeout=5)
        patcher = mock.patch("reaport_client.requests.post")
        self.post = patcher.start()
        self.addCleanup(patcher.stop)

    def test_buy_posts_json_and_decodes_flights(self):
        self.post.return_value = fake_response(200, PURCHASE_BODY)

        response = self.client.buy(purchase())

        args, kwargs = self.post.call_args
        self.assertEqual(args[0], "https://tickets.example/buy")
        self.assertEqual(kwargs["headers"], {"Content-Type": "application/json"})
        self.assertEqual(kwargs["timeout"], 5)
        sent = json.loads(kwargs["data"])
        self.assertEqual(sent, {
            "passengerId": "p-1", "flightId": "", "seatClass": "economy",
            "mealType": "Vegan", "baggage": "да",
        })

        self.assertEqual(response.message, "Ticket purchased")
        self.assertEqual(len(response.available_flights), 1)
        flight = response.available_flights[0]
        self.assertEqual(flight.flight_id, "RP1042")
        self.assertEqual(flight.available_seats.economy, 47)
        self.assertEqual(flight.departure_time.hour, 12)

    def test_non_200_raises_status_error(self):
        self.post.return_value = fake_response(409, {"error": "sold out"})
        with self.assertNoLogs("reaport_client", level="ERROR"):
            with self.assertRaises(StatusError) as cm:
                self.client.buy(purchase())
        self.assertEqual(cm.exception.status_code, 409)
        self.assertIn("sold out", cm.exception.body)
        self.assertIn("409", str(cm.exception))
        self.assertIn("sold out", str(cm.exception))
        self.assertEqual(cm.exception.category, "status")

    def test_null_flight_list_is_empty(self):
        self.post.return_value = fake_response(200, '{"message": "ok", "availableFlights": null}')
        response = self.client.buy(purchase())
        self.assertEqual(response.message, "ok")
        self.assertEqual(response.available_flights, [])

    def test_timeout_raises_transport_error(self):
        self.post.side_effect = requests.exceptions.Timeout("read timed out")
        with self.assertRaises(TransportError):
            self.client.buy(purchase())

    def test_connection_error_raises_transport_error(self):
        self.post.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(TransportError):
            self.client.check_in(CheckinRequest(passenger_id="p-1", baggage_weight=0.1,
                                                meal_type="Vegetarian"))

    def test_bad_url_raises_request_build_error(self):
        self.post.side_effect = requests.exceptions.MissingSchema("no scheme")
        with self.assertRaises(RequestBuildError):
            self.client.buy(purchase())

    def test_malformed_body_raises_decode_error(self):
        self.post.return_value = fake_response(200, "<html>oops</html>")
        with self.assertRaises(DecodeError):
            self.client.buy(purchase())

    def test_schema_mismatch_raises_decode_error(self):
        self.post.return_value = fake_response(200, {"availableFlights": [{"flightId": "X"}]})
        with self.assertRaises(DecodeError):
            self.client.buy(purchase())

    def test_buy_ticket_ignores_body(self):
        self.post.return_value = fake_response(200, "not json")
        self.client.buy_ticket(purchase("RP1042"))
        sent = json.loads(self.post.call_args.kwargs["data"])
        self.assertEqual(sent["flightId"], "RP1042")

    def test_check_in_posts_to_registration_host(self):
        self.post.return_value = fake_response(200, "")
        self.client.check_in(CheckinRequest(passenger_id="p-9", baggage_weight=0.1,
                                            meal_type="Vegetarian"))
        args, kwargs = self.post.call_args
        self.assertEqual(args[0], "https://register.example/passenger")
        self.assertEqual(json.loads(kwargs["data"]), {
            "passengerId": "p-9", "baggageWeight": 0.1, "mealType": "Vegetarian",
        })


if __name__ == '__main__':
    unittest.main()
