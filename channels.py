import logging
import threading
from typing import Any, Generic, Optional, Tuple, TypeVar, Union


T = TypeVar('T')


class Closed(Exception):
    def __init__(self, name: str):
        super().__init__(f'Closed({name})')


class _Slot(Generic[T]):
    '''
    A single-item slot guarded by a condition that may be shared with other
    slots, so a reader can wait on several of them at once (see select).
    '''

    def __init__(self, name: str, condition: threading.Condition):
        self.name = name
        self.condition = condition
        self._item: Optional[T] = None
        self._full = False

    @property
    def ready(self) -> bool:
        return self._full

    def _put(self, item: T):
        self._item = item
        self._full = True
        self.condition.notify_all()

    def _take(self) -> T:
        item = self._item
        self._item = None
        self._full = False
        self.condition.notify_all()
        return item

    def __repr__(self) -> str:
        state = 'full' if self._full else 'empty'
        return f'{type(self).__name__}({self.name!r}, {state})'


class ValueChannel(_Slot[T]):
    '''
    Hand-off channel with capacity one: send blocks while the previous value
    has not been received yet.
    '''

    def __init__(self, name: str, condition: threading.Condition):
        super().__init__(name, condition)
        self._closed = False
        self.sent = 0
        self.received = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, value: T):
        with self.condition:
            self.condition.wait_for(lambda: self._closed or not self._full)
            if self._closed:
                raise Closed(self.name)
            self._put(value)
            self.sent += 1

    def receive(self) -> T:
        with self.condition:
            self.condition.wait_for(lambda: self._closed or self._full)
            if not self._full:
                raise Closed(self.name)
            return self._take_value()

    def _take_value(self) -> T:
        self.received += 1
        return self._take()

    def close(self):
        with self.condition:
            if not self._closed:
                logging.debug(f'Closing channel {self.name} '
                              f'(sent {self.sent}, received {self.received}).')
                self._closed = True
                self._item = None
                self._full = False
                self.condition.notify_all()


class OutcomeChannel(_Slot[T]):
    '''
    Single-shot signal: exactly one send and at most one receive.
    '''

    def __init__(self, name: str, condition: threading.Condition):
        super().__init__(name, condition)
        self._sent = False
        self._received = False

    def send(self, outcome: T):
        with self.condition:
            if self._sent:
                raise RuntimeError(f'Outcome already sent on {self.name}')
            self._sent = True
            self._put(outcome)

    def receive(self) -> T:
        with self.condition:
            if self._received:
                raise RuntimeError(f'Outcome already received on {self.name}')
            self.condition.wait_for(lambda: self._full)
            return self._take_outcome()

    def _take_outcome(self) -> T:
        if self._received:
            raise RuntimeError(f'Outcome already received on {self.name}')
        self._received = True
        return self._take()


def open_channels(name: str) -> Tuple[ValueChannel, OutcomeChannel]:
    condition = threading.Condition()
    return (ValueChannel(f'{name}.values', condition),
            OutcomeChannel(f'{name}.outcome', condition))


def select(values: ValueChannel, outcome: OutcomeChannel,
           timeout: Optional[float] = None
           ) -> Tuple[Optional[Union[ValueChannel, OutcomeChannel]], Any]:
    '''
    Block until either channel has something to deliver and take it.

    A pending value always wins over the outcome, so the outcome can never
    overtake a value the producer handed off before signalling. Returns
    (channel, item), or (None, None) if timeout seconds pass first.
    '''
    if values.condition is not outcome.condition:
        raise ValueError('select needs channels opened together by open_channels')

    with values.condition:
        if not values.condition.wait_for(lambda: values.ready or outcome.ready, timeout):
            return (None, None)
        if values.ready:
            return (values, values._take_value())
        return (outcome, outcome._take_outcome())
