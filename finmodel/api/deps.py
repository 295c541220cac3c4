from finmodel.db.adapter import DbAdapter, get_db
from finmodel.events import EventBroadcaster, broadcaster


def get_database() -> DbAdapter:
    return get_db()


def get_broadcaster() -> EventBroadcaster:
    return broadcaster
