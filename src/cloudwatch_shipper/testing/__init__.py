"""
Testing utilities for cloudwatch-shipper.

Mocks are always available. Pytest fixtures live in
``cloudwatch_shipper.testing.fixtures`` and require pytest.

Example:
    from cloudwatch_shipper import CloudWatchShipper
    from cloudwatch_shipper.testing import MockHost, MockLogsClient

    async def test_ships():
        client = MockLogsClient()
        shipper = CloudWatchShipper(client_factory=client, interval=0)
        await shipper.init(MockHost())
        shipper.create_handler({"mod": "api"})("info", ["hello"])
        await shipper.stop()
        assert client.shipped_events
"""

from .mocks import MockHost, MockLogsClient, PutCall, client_error

__all__ = [
    "MockHost",
    "MockLogsClient",
    "PutCall",
    "client_error",
]
