"""Realtime infrastructure: the in-process change feed and the Socket.IO server.

Table writes announce themselves on :mod:`demo_day.realtime.feed`; the
Socket.IO publisher listens there and pushes refreshed table contents to
subscribed clients.
"""
