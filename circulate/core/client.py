import httpx
import logging
from typing import Optional
from circulate.configs import CIRCULATE_HTTP_HEADERS

logger = logging.getLogger(__name__)


class CirculateClient:
    """Thin HTTP client for a running Circulate API.

    Pass `http` to reuse an existing `httpx.Client` (FastAPI's TestClient
    is one); otherwise a client bound to `base_url` is created.
    """

    BASE_URL = "http://localhost:8080"
    HTTP_HEADERS = CIRCULATE_HTTP_HEADERS
    HTTP_TIMEOUT = 10

    def __init__(self, base_url: str = None, token: Optional[str] = None, http: httpx.Client = None):
        self.http = http or httpx.Client(
            base_url=base_url or self.BASE_URL,
            headers=self.HTTP_HEADERS,
            timeout=self.HTTP_TIMEOUT,
        )
        self.token = token

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        if response.is_error:
            logger.error(f"{method} {path} failed ({response.status_code}): {response.text}")
        response.raise_for_status()
        return response

    def signin(self, username: str, password: str) -> str:
        data = self._request("POST", "/signin", json={"username": username, "password": password}).json()
        self.token = data["token"]
        return self.token

    def books(self, offset: int = None, limit: int = None) -> list:
        params = {k: v for k, v in (("offset", offset), ("limit", limit)) if v is not None}
        return self._request("GET", "/library", params=params).json()

    def add_book(self, name: str, author: str, genre: str, type: str) -> dict:
        payload = {"name": name, "author": author, "genre": genre, "type": type}
        return self._request("POST", "/library", json=payload).json()

    def borrow(self, username: str, book_id: int) -> dict:
        return self._request("POST", "/borrow-book", json={"username": username, "bookId": book_id}).json()

    def return_book(self, username: str, book_id: int) -> dict:
        return self._request("POST", "/return-book", json={"username": username, "bookId": book_id}).json()
