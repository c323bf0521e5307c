import pytest
from ircsync import events
from ircsync.dispatch import EventDispatcher


@pytest.mark.asyncio
async def test_dispatch_by_type():
    dispatcher = EventDispatcher()
    pongs = []
    joins = []
    dispatcher.register(events.PongEvent, pongs.append)
    dispatcher.register(events.JoinEvent, joins.append)

    await dispatcher.post(events.PongEvent(None, 'abc'))
    assert len(pongs) == 1
    assert not joins


@pytest.mark.asyncio
async def test_dispatch_subclasses():
    dispatcher = EventDispatcher()
    seen = []
    dispatcher.register(events.Event, seen.append)
    dispatcher.register(events.ChannelEvent, seen.append)

    await dispatcher.post(events.BotJoinEvent(None, '#lobby'))
    await dispatcher.post(events.PongEvent(None, 'abc'))
    assert [type(event) for event in seen] == [events.BotJoinEvent, events.BotJoinEvent, events.PongEvent]


@pytest.mark.asyncio
async def test_dispatch_text_events_are_distinct():
    dispatcher = EventDispatcher()
    messages = []
    dispatcher.register(events.MessageEvent, messages.append)

    await dispatcher.post(events.NoticeEvent(None, 'WiZ', '#lobby', 'hi'))
    await dispatcher.post(events.ActionEvent(None, 'WiZ', '#lobby', 'waves'))
    await dispatcher.post(events.CTCPEvent(None, 'WiZ', '#lobby', 'VERSION'))
    assert not messages


@pytest.mark.asyncio
async def test_dispatch_order_and_coroutines():
    dispatcher = EventDispatcher()
    order = []

    async def first(event):
        order.append('first')

    def second(event):
        order.append('second')

    dispatcher.register(events.PongEvent, first)
    dispatcher.register(events.PongEvent, second)
    await dispatcher.post(events.PongEvent(None, 'abc'))
    assert order == ['first', 'second']


@pytest.mark.asyncio
async def test_dispatch_register_during_post():
    dispatcher = EventDispatcher()
    late = []

    def register_more(event):
        dispatcher.register(events.PongEvent, late.append)

    dispatcher.register(events.PongEvent, register_more)
    await dispatcher.post(events.PongEvent(None, 'one'))
    assert not late

    await dispatcher.post(events.PongEvent(None, 'two'))
    assert [event.message for event in late] == ['two']


def test_dispatch_unregister():
    dispatcher = EventDispatcher()
    handler = dispatcher.register(events.PongEvent, print)
    assert handler is print
    assert dispatcher.handlers(events.PongEvent) == [print]

    dispatcher.unregister(events.PongEvent, print)
    assert dispatcher.handlers(events.PongEvent) == []
