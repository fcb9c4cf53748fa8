import logging
from abc import ABC, abstractmethod
from typing import Optional
import httpx

from canteen.core.config import settings
from canteen.core.exceptions import DeviceError, NoMatchError

logger = logging.getLogger(__name__)


class ScanCapability(ABC):
    """Identifies exactly one employee from a biometric scan."""

    @abstractmethod
    async def identify(self) -> str:
        """
        Return the identified employee id.
        Raises NoMatchError or DeviceError when nobody can be identified.
        """


class DeclaredIdentityScanner(ScanCapability):
    """
    Kiosk flow: the employee picks their name, then the reader confirms the
    fingerprint. ``verified`` carries the reader's verdict.
    """

    def __init__(self, employee_id: Optional[str], verified: bool = True):
        self.employee_id = employee_id
        self.verified = verified

    async def identify(self) -> str:
        if not self.employee_id:
            raise NoMatchError("No employee selected for the scan")
        if not self.verified:
            logger.info(f"Fingerprint verification failed for {self.employee_id}")
            raise NoMatchError()
        return self.employee_id


class RemoteScanner(ScanCapability):
    """
    Reads the identification result from the fingerprint reader bridge.

    The bridge answers ``POST {SCANNER_URL}/identify`` with
    ``{"matched": bool, "employee_id": str}``.
    """

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.SCANNER_URL or "").rstrip("/")
        self.transport = transport

    async def identify(self) -> str:
        if not self.base_url:
            raise DeviceError("Biometric scanner is not configured")

        timeout = httpx.Timeout(settings.SCANNER_TIMEOUT_SECONDS, connect=5.0)
        async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
            try:
                r = await client.post(f"{self.base_url}/identify")
                r.raise_for_status()
                data = r.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Scanner bridge request failed: {e}")
                raise DeviceError()

        if not isinstance(data, dict):
            logger.error(f"Scanner bridge returned an unexpected payload: {data!r}")
            raise DeviceError()
        if not data.get("matched") or not data.get("employee_id"):
            raise NoMatchError()
        return str(data["employee_id"])
