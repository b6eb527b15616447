"""
eufy motion session agent.

This package contains the long-lived client that:
- connects to a eufy-security-ws server over WebSocket
- negotiates the API schema and subscribes to the event stream
- keeps the connection alive with periodic pings
- tracks the motion state of one watched device
- reconnects forever until explicitly stopped
"""
