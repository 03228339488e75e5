import threading

import requests

from swarm_bliss.errors import DecodeError, NetworkError


class FakeResponse:
    def __init__(self, payload=None, status_code=200, body_error=None):
        self.payload = payload
        self.status_code = status_code
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.body_error is not None:
            raise self.body_error
        return self.payload


class FakeSession:
    """Stand-in for ``requests.Session`` replaying queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, dict | None, float | None]] = []
        self.verify = True
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


class FakeClient:
    """Telemetry client answering from per-URL scripts.

    Each route maps a URL to a list of payloads or exceptions consumed in
    order; once a script is exhausted the route raises ``NetworkError``,
    like the live client API after the match is over.
    """

    def __init__(self, routes=None):
        self.routes = {url: list(script) for url, script in (routes or {}).items()}
        self.calls: list[tuple[str, dict | None]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def _next(self, url, params):
        with self._lock:
            self.calls.append((url, params))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            script = self.routes.get(url)
            if not script:
                raise NetworkError(url, "connection refused")
            item = script.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        finally:
            with self._lock:
                self.active -= 1

    def fetch(self, url, model, params=None):
        payload = self._next(url, params)
        try:
            return model.model_validate(payload)
        except Exception as e:
            raise DecodeError(url, str(e)) from e

    def fetch_scalar(self, url, value_type, params=None):
        payload = self._next(url, params)
        if not isinstance(payload, value_type):
            raise DecodeError(url, f"expected {value_type.__name__}")
        return payload

    def close(self):
        pass


class RecordingDevice:
    """Haptic device that records commands and flags overlapping pulses."""

    def __init__(self, name="Test device", fail_on=None):
        self.name = name
        self.fail_on = fail_on
        self.commands: list[tuple[str, float | None]] = []
        self.active = False
        self.overlaps = 0
        self._lock = threading.Lock()

    def vibrate(self, intensity):
        with self._lock:
            if self.active:
                self.overlaps += 1
            self.commands.append(("vibrate", intensity))
            if self.fail_on is not None and intensity == self.fail_on:
                raise RuntimeError("device disconnected")
            self.active = True

    def stop(self):
        with self._lock:
            self.active = False
            self.commands.append(("stop", None))

    @property
    def intensities(self):
        return [value for command, value in self.commands if command == "vibrate"]
