from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError
import requests
import urllib3

from swarm_bliss.config import TelemetryConfig
from swarm_bliss.errors import DecodeError, NetworkError

ModelT = TypeVar("ModelT", bound=BaseModel)
ScalarT = TypeVar("ScalarT")


class TelemetryClient:
    """Read-only client for the live client data API.

    Parameters
    ----------
    config : TelemetryConfig
        Base URL, TLS and timeout options.
    session : requests.Session | None, optional
        HTTP session to reuse, a new one is created when omitted.

    Attributes
    ----------
    config : TelemetryConfig
        Client configuration.
    session : requests.Session
        Underlying HTTP session. Not safe for concurrent use, see
        ``TelemetryWorker``.

    Notes
    -----
    The client never retries. Failed requests surface as ``NetworkError``
    and payloads that do not validate surface as ``DecodeError``.
    """

    def __init__(self, config: TelemetryConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session if session is not None else requests.Session()
        self.session.verify = config.verify_tls

        if not config.verify_tls:
            # The game serves a self-signed certificate on localhost
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(url, str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(url, f"response is not JSON: {e}") from e

    def fetch(
        self, url: str, model: type[ModelT], params: dict[str, str] | None = None
    ) -> ModelT:
        """GET an endpoint and validate the JSON body into ``model``.

        Parameters
        ----------
        url : str
            Absolute endpoint URL.
        model : type[BaseModel]
            Pydantic model describing the payload.
        params : dict[str, str] | None, optional
            Query string parameters.

        Returns
        -------
        BaseModel
            Validated payload.

        Raises
        ------
        NetworkError
            On connection failure or a non-2xx status.
        DecodeError
            If the body is not JSON or does not match ``model``.
        """
        payload = self._get_json(url, params)
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(url, f"unexpected {model.__name__} payload: {e}") from e

    def fetch_scalar(
        self, url: str, value_type: type[ScalarT], params: dict[str, str] | None = None
    ) -> ScalarT:
        """GET an endpoint whose body is a bare JSON value (e.g. a string)."""
        payload = self._get_json(url, params)
        try:
            return TypeAdapter(value_type).validate_python(payload, strict=True)
        except ValidationError as e:
            raise DecodeError(url, f"expected a {value_type.__name__}: {e}") from e

    def close(self) -> None:
        logger.debug("Closing telemetry session")
        self.session.close()
