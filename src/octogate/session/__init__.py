from octogate.session.store import InMemorySessionStore, SessionRecord, SessionStoreProtocol

__all__ = ["InMemorySessionStore", "SessionRecord", "SessionStoreProtocol"]
