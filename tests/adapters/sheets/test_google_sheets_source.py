from __future__ import annotations

import asyncio

import pytest

from clientpl.adapters.sheets.google_sheets import GoogleSheetsLedgerSource


class _FakeRequest:
    def __init__(self, service: "_FakeSheetsService", response: dict) -> None:
        self._service = service
        self._response = response

    def execute(self) -> dict:
        self._service.execute_calls += 1
        if self._service.failures_left > 0:
            self._service.failures_left -= 1
            raise ConnectionError("socket closed")
        return self._response


class _FakeValues:
    def __init__(self, service: "_FakeSheetsService") -> None:
        self._service = service

    def get(self, *, spreadsheetId: str, range: str) -> _FakeRequest:
        self._service.requests.append((spreadsheetId, range))
        return _FakeRequest(self._service, self._service.response)


class _FakeSpreadsheets:
    def __init__(self, service: "_FakeSheetsService") -> None:
        self._service = service

    def values(self) -> _FakeValues:
        return _FakeValues(self._service)


class _FakeSheetsService:
    def __init__(self, response: dict, *, failures: int = 0) -> None:
        self.response = response
        self.failures_left = failures
        self.execute_calls = 0
        self.requests: list[tuple[str, str]] = []

    def spreadsheets(self) -> _FakeSpreadsheets:
        return _FakeSpreadsheets(self)


def test_get_range_returns_rows() -> None:
    service = _FakeSheetsService({"range": "Sheet1!A1:O2", "values": [["a", "G1"], ["b", "G2", "15/01/2024"]]})
    source = GoogleSheetsLedgerSource(service)

    rows = asyncio.run(source.get_range("sheet-1", "Sheet1"))

    assert rows == [["a", "G1"], ["b", "G2", "15/01/2024"]]
    assert service.requests == [("sheet-1", "Sheet1")]


def test_empty_sheet_returns_no_rows() -> None:
    source = GoogleSheetsLedgerSource(_FakeSheetsService({"range": "Sheet1!A1:A1"}))

    assert asyncio.run(source.get_range("sheet-1", "Sheet1")) == []


def test_get_range_retries_then_raises() -> None:
    service = _FakeSheetsService({"values": []}, failures=10)
    source = GoogleSheetsLedgerSource(service, retry_attempts=2, retry_wait=0)

    with pytest.raises(ConnectionError):
        asyncio.run(source.get_range("sheet-1", "Sheet1"))

    assert service.execute_calls == 2


def test_retry_deadline_stops_before_attempts_run_out() -> None:
    service = _FakeSheetsService({"values": []}, failures=10)
    source = GoogleSheetsLedgerSource(service, retry_attempts=5, retry_wait=0, retry_deadline=0)

    with pytest.raises(ConnectionError):
        asyncio.run(source.get_range("sheet-1", "Sheet1"))

    assert service.execute_calls == 1
