from __future__ import annotations

import logging

import pytest


def pytest_configure(config: pytest.Config) -> None:
    logging.basicConfig(level=logging.INFO)


@pytest.fixture(autouse=True)
def _no_subscription_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    # a developer's AZURE_SUBSCRIPTION_ID would short-circuit subscription discovery
    monkeypatch.delenv("AZURE_SUBSCRIPTION_ID", raising=False)
