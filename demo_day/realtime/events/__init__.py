"""Table publishers: reload a watched table and push it to its channel.

Nothing here owns the Socket.IO server or its handlers; see
:mod:`demo_day.realtime.socketio`.
"""
