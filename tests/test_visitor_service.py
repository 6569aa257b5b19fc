import asyncio
from datetime import datetime, timedelta

from app.services.visitor_service import VisitorService


def test_new_visitor_gets_checked_session(backend):
    async def scenario():
        service = VisitorService(client_factory=backend.client)
        visitor = await service.get_or_create(None)
        session = visitor.session
        await service.close()
        return visitor, session

    visitor, session = asyncio.run(scenario())
    assert visitor.visitor_id
    assert not session.is_loading
    assert session.user is None
    assert backend.paths() == ["/auth/me"]


def test_known_visitor_is_reused(backend):
    async def scenario():
        service = VisitorService(client_factory=backend.client)
        first = await service.get_or_create(None)
        second = await service.get_or_create(first.visitor_id)
        count = len(service)
        await service.close()
        return first, second, count

    first, second, count = asyncio.run(scenario())
    assert first is second
    assert count == 1


def test_unknown_id_gets_a_fresh_visitor(backend):
    async def scenario():
        service = VisitorService(client_factory=backend.client)
        visitor = await service.get_or_create("forged-id")
        await service.close()
        return visitor

    assert asyncio.run(scenario()).visitor_id != "forged-id"


def test_expired_visitor_is_replaced(backend):
    async def scenario():
        service = VisitorService(client_factory=backend.client, timeout_minutes=30)
        old = await service.get_or_create(None)
        old.last_interaction = datetime.utcnow() - timedelta(minutes=31)
        new = await service.get_or_create(old.visitor_id)
        ids = (old.visitor_id, new.visitor_id, service.get(old.visitor_id), len(service))
        await service.close()
        return ids, old

    (old_id, new_id, lookup, count), old = asyncio.run(scenario())
    assert old_id != new_id
    assert lookup is None
    assert count == 1
    assert old.signup.closed


def test_purge_expired(backend):
    async def scenario():
        service = VisitorService(client_factory=backend.client)
        idle = await service.create()
        await service.create()
        idle.last_interaction = datetime.utcnow() - timedelta(hours=2)
        dropped = await service.purge_expired()
        count = len(service)
        await service.close()
        return dropped, count

    assert asyncio.run(scenario()) == (1, 1)


def test_visitors_do_not_share_sessions(backend):
    backend.add_user("kwame@example.com")

    async def scenario():
        service = VisitorService(client_factory=backend.client)
        a = await service.create()
        b = await service.create()
        await a.auth.login("kwame@example.com", "secret123")
        result = (a.session.is_authenticated, b.session.is_authenticated)
        await service.close()
        return result

    assert asyncio.run(scenario()) == (True, False)
