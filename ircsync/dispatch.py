## dispatch.py
# Type-keyed event bus.
import inspect

__all__ = [ 'EventDispatcher' ]


class EventDispatcher:
    """
    Delivers events to handlers registered for their type.

    A handler registered for a class receives every event that is an instance of it, so registering for
    `events.Event` sees everything. Handlers run one after the other in registration order, in the task that
    posted the event; coroutine handlers are awaited before the next handler runs.
    """

    def __init__(self):
        self._handlers = []

    def register(self, kind, handler):
        self._handlers.append((kind, handler))
        return handler

    def unregister(self, kind, handler):
        self._handlers.remove((kind, handler))

    def handlers(self, kind):
        return [handler for registered, handler in self._handlers if registered is kind]

    async def post(self, event):
        # Copy so handlers can (un)register without disturbing this delivery.
        for kind, handler in list(self._handlers):
            if not isinstance(event, kind):
                continue

            result = handler(event)
            if inspect.isawaitable(result):
                await result
