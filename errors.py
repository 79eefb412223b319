"""
errors.py — Exception types shared by the relay and its collaborators.

  RelayError
   ├── ConfigurationError   missing / unparseable settings (raised at startup)
   ├── UpstreamError        chat or session API failed (recovered per request)
   ├── ProtocolError        inbound frame the relay refuses to process
   └── TransportError       client socket can't be read or written
"""


class RelayError(Exception):
    """Base class for everything this service raises on purpose."""


class ConfigurationError(RelayError):
    pass


class UpstreamError(RelayError):
    pass


class ProtocolError(RelayError):
    pass


class TransportError(RelayError):
    pass
