from dataclasses import dataclass, field
from typing import Any

from swarm_bliss.errors import NetworkError
from swarm_bliss.telemetry.client import TelemetryClient
from swarm_bliss.threaders.worker import RequestWorker


@dataclass(frozen=True)
class FetchRequest:
    """Telemetry request served by the worker.

    Exactly one of ``model`` (a pydantic model) or ``scalar`` (a plain type
    such as ``str``) describes the expected payload.
    """

    url: str
    model: type | None = None
    scalar: type | None = None
    params: dict[str, str] = field(default_factory=dict)


class TelemetryWorker(RequestWorker):
    """Owns the telemetry client and serves fetches for every poller.

    Parameters
    ----------
    client : TelemetryClient
        Client whose HTTP session must not be shared between threads.

    Attributes
    ----------
    client : TelemetryClient
        Owned client.
    """

    def __init__(self, client: TelemetryClient):
        super().__init__(name="TelemetryWorker")
        self.client = client

    def rejected(self, job: FetchRequest) -> Exception:
        return NetworkError(job.url, "telemetry worker stopped")

    def handle(self, job: FetchRequest) -> Any:
        params = job.params or None
        if job.model is not None:
            return self.client.fetch(job.url, job.model, params)
        return self.client.fetch_scalar(job.url, job.scalar, params)

    def fetch(self, request: FetchRequest) -> Any:
        """Queue a request and block until its payload or error is ready.

        Raises
        ------
        NetworkError
            On transport failure or when the worker is stopped.
        DecodeError
            If the payload does not validate.
        """
        return self.submit(request).result()
