"""Shared request payloads for the test suite."""

MISSING_ID = "00000000-0000-4000-8000-000000000000"


def store_data(name="Main Street", **overrides):
    data = {
        "name": name,
        "address": "1 Main Street",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
    }
    data.update(overrides)
    return data
