"""Broadcast gateway backed by Flask-SocketIO rooms.

One room per game code. Emits made while the engine holds a session lock
are queued in call order, which keeps per-game event ordering.
"""


def room_for(game_code: str) -> str:
    return f"game:{game_code}"


class SocketIOGateway:

    def __init__(self, socketio, namespace: str = '/'):
        self._socketio = socketio
        self.namespace = namespace

    def subscribe(self, connection_id: str, game_code: str) -> None:
        self._socketio.server.enter_room(connection_id, room_for(game_code), namespace=self.namespace)

    def publish(self, game_code: str, event: str, payload) -> None:
        self._socketio.emit(event, payload, to=room_for(game_code), namespace=self.namespace)

    def send(self, connection_id: str, event: str, payload) -> None:
        self._socketio.emit(event, payload, to=connection_id, namespace=self.namespace)

    def close_room(self, game_code: str) -> None:
        self._socketio.close_room(room_for(game_code), namespace=self.namespace)
