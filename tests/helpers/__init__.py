from .mocks import FakeSui, FakeTransport, make_address, make_digest

__all__ = [
    "FakeSui",
    "FakeTransport",
    "make_address",
    "make_digest",
]
