"""Pytest fixtures for integration tests.

This module provides fixtures for:
- Starting/stopping the FastAPI test server
- Creating transfer sessions backed by real libcurl handles
"""

from __future__ import annotations

import threading
import time
from typing import Generator

import httpx
import pytest
import uvicorn

from curlreply import TransferOptions, TransferSession

from server import app

TEST_SERVER_HOST = "127.0.0.1"
TEST_SERVER_PORT = 18766


class ServerThread(threading.Thread):
    """Thread that runs uvicorn server."""

    def __init__(self) -> None:
        super().__init__(daemon=True)
        self.server: uvicorn.Server | None = None

    def run(self) -> None:
        config = uvicorn.Config(
            app,
            host=TEST_SERVER_HOST,
            port=TEST_SERVER_PORT,
            log_level="error",
        )
        self.server = uvicorn.Server(config)
        self.server.run()

    def stop(self) -> None:
        if self.server:
            self.server.should_exit = True


@pytest.fixture(scope="session")
def server() -> Generator[str, None, None]:
    """Start the test server and return the base URL."""
    server_thread = ServerThread()
    server_thread.start()

    base_url = f"http://{TEST_SERVER_HOST}:{TEST_SERVER_PORT}"
    max_retries = 50
    for _ in range(max_retries):
        try:
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except httpx.ConnectError:
            time.sleep(0.1)
    else:
        raise RuntimeError("Test server failed to start")

    yield base_url

    server_thread.stop()


@pytest.fixture
def curl_session() -> Generator[TransferSession, None, None]:
    """Create a session over a real libcurl handle."""
    with TransferSession(options=TransferOptions(timeout=10.0, proxy="")) as session:
        yield session
