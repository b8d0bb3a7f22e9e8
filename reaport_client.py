"""Reaport ticketing and registration API client."""

import logging
import requests
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from models import PurchaseResponse

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class ReaportError(Exception):
    """Base class for every failed Reaport call."""

    category = "error"

    def __init__(self, message, url=None):
        super().__init__(message)
        self.url = url


class SerializationError(ReaportError):
    category = "serialization"


class RequestBuildError(ReaportError):
    category = "request"


class TransportError(ReaportError):
    category = "transport"


class StatusError(ReaportError):
    category = "status"

    def __init__(self, status_code, body="", url=None):
        super().__init__(f"unexpected status {status_code} on POST {url}: {body}", url=url)
        self.status_code = status_code
        self.body = body


class DecodeError(ReaportError):
    category = "decode"


class ReaportClient:
    """Posts purchases and check-ins to the Reaport hosts.

    Holds only configuration, so one instance is shared by every
    registration thread.
    """

    def __init__(self, tickets_url, register_url, timeout=5):
        self.tickets_url = tickets_url.rstrip("/")
        self.register_url = register_url.rstrip("/")
        self.timeout = timeout

    def _post(self, url, payload):
        """POST a wire model as JSON and require HTTP 200."""
        try:
            body = payload.model_dump_json(by_alias=True)
        except PydanticSerializationError as e:
            raise SerializationError(f"cannot serialize {type(payload).__name__}: {e}", url) from e

        logger.debug(f"POST {url} {body}")
        # requests applies the timeout to the connect and to each read,
        # not to the call as a whole
        try:
            resp = requests.post(url, data=body.encode("utf-8"),
                                 headers=JSON_HEADERS, timeout=self.timeout)
        except (requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema,
                requests.exceptions.InvalidURL) as e:
            raise RequestBuildError(f"cannot build request for {url}: {e}", url) from e
        except requests.exceptions.Timeout as e:
            raise TransportError(f"timed out after {self.timeout}s: {e}", url) from e
        except requests.RequestException as e:
            raise TransportError(f"request failed: {e}", url) from e

        if resp.status_code != 200:
            raise StatusError(resp.status_code, resp.text[:500], url)
        return resp

    def buy(self, request):
        """Buy a ticket.

        POST /buy
        Returns the PurchaseResponse with the flights currently on sale.
        """
        url = f"{self.tickets_url}/buy"
        resp = self._post(url, request)
        try:
            return PurchaseResponse.model_validate_json(resp.content)
        except ValidationError as e:
            raise DecodeError(f"bad purchase response: {e}", url) from e

    def buy_ticket(self, request):
        """Buy a ticket on a known flight; only the status is checked."""
        self._post(f"{self.tickets_url}/buy", request)

    def check_in(self, request):
        """Register a passenger for their flight.

        POST /passenger
        The response body is not consumed.
        """
        self._post(f"{self.register_url}/passenger", request)
