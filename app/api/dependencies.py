from fastapi import Request
from app.events.broadcaster import Broadcaster


def get_broadcaster(request: Request) -> Broadcaster:
    """The application's broadcaster, created once in app.main."""
    return request.app.state.broadcaster
