import pathlib
import dotenv
import httpx
import pytest

from learnvid import vision

dotenv.load_dotenv(pathlib.Path(__file__).parent.parent / ".env")


class FakeVendor:
    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._reply = dict(status_code=200, json={})

    def reply(self, status_code: int = 200, **kwargs):
        self._reply = dict(status_code=status_code, **kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(**self._reply)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def api_key():
    return "test-key"


@pytest.fixture
def vendor():
    return FakeVendor()


@pytest.fixture
def http_client(vendor):
    client = httpx.Client(transport=httpx.MockTransport(vendor.handler))
    yield client
    client.close()


@pytest.fixture
def service(api_key, http_client):
    return vision.VisionService(api_key=api_key, client=http_client)
