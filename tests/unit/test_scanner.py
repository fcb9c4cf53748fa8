import httpx
import pytest

from canteen.core.exceptions import DeviceError, NoMatchError
from canteen.services.biometric.scanner import DeclaredIdentityScanner, RemoteScanner


def bridge(handler) -> RemoteScanner:
    return RemoteScanner(base_url="http://scanner.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestScanners:
    async def test_declared_identity(self):
        assert await DeclaredIdentityScanner("E-007").identify() == "E-007"

    async def test_declared_identity_without_selection(self):
        with pytest.raises(NoMatchError):
            await DeclaredIdentityScanner(None).identify()

    async def test_remote_match(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/identify"
            return httpx.Response(200, json={"matched": True, "employee_id": "E-002"})

        assert await bridge(handler).identify() == "E-002"

    async def test_remote_no_match(self):
        with pytest.raises(NoMatchError):
            await bridge(lambda r: httpx.Response(200, json={"matched": False})).identify()

    async def test_remote_device_failure(self):
        with pytest.raises(DeviceError):
            await bridge(lambda r: httpx.Response(500, text="sensor fault")).identify()

    @pytest.mark.parametrize("payload", [["E-001"], "E-001", 42])
    async def test_remote_unexpected_payload(self, payload):
        with pytest.raises(DeviceError):
            await bridge(lambda r: httpx.Response(200, json=payload)).identify()

    async def test_unconfigured_scanner(self, monkeypatch):
        from canteen.core.config import settings
        monkeypatch.setattr(settings, "SCANNER_URL", None)

        with pytest.raises(DeviceError):
            await RemoteScanner().identify()
