#!/usr/bin/env python3

import enum
import itertools
import logging
import threading
from typing import Generator, Iterator, List, NamedTuple, Optional, Tuple

from channels import Closed, OutcomeChannel, ValueChannel, open_channels, select
from factorization import InvalidArgument
from rendering import Renderer


DEFAULT_GROUP_WIDTH = 15

# The search is seeded with these, so fewer than three primes cannot be asked for.
SEED_PRIMES = (2, 3, 5)

_stream_ids = itertools.count(1)


class StreamOutcome(NamedTuple):
    success: bool
    reason: Optional[str] = None

    @classmethod
    def failure(cls, reason: str) -> 'StreamOutcome':
        return cls(success=False, reason=reason)


StreamOutcome.SUCCESS = StreamOutcome(success=True)


def first_n_primes(count: int) -> Iterator[int]:
    '''
    Return an iterator over the first count primes, in increasing order.

    Odd candidates from 7 on are trial divided by the primes found so far,
    up to the square root of the candidate; multiples of 5 are skipped
    outright. Raises InvalidArgument immediately when count < 3.
    '''
    if count < len(SEED_PRIMES):
        raise InvalidArgument(count)
    return _generate_primes(count)


def _generate_primes(count: int) -> Generator[int, None, None]:
    primes: List[int] = list(SEED_PRIMES)
    yield from SEED_PRIMES

    candidate = 7
    while len(primes) < count:
        if candidate % 5 != 0 and _is_prime(candidate, primes):
            primes.append(candidate)
            yield candidate
        candidate += 2


def _is_prime(candidate: int, primes: List[int]) -> bool:
    for p in primes:
        if p * p > candidate:
            return True
        if candidate % p == 0:
            return False
    return True


class StreamingPrimeProducer:
    def __init__(self, count: int, name: Optional[str] = None):
        self.count = count
        self.name = name or f'primes-{next(_stream_ids)}'
        self.thread: Optional[threading.Thread] = None

    def start(self) -> Tuple[ValueChannel, OutcomeChannel]:
        values, outcome = open_channels(self.name)
        self.thread = threading.Thread(
            target=self.run, args=(values, outcome), name=self.name, daemon=True)
        self.thread.start()
        return (values, outcome)

    def run(self, values: ValueChannel, outcome: OutcomeChannel):
        logging.debug(f'>> producer {self.name} (count={self.count})')
        try:
            for prime in first_n_primes(self.count):
                values.send(prime)
        except InvalidArgument as ex:
            logging.info(f'Rejected prime stream request: {ex}')
            result = StreamOutcome.failure(str(ex))
        except Closed:
            logging.info(f'Prime stream {self.name} abandoned after {values.sent} values.')
            result = StreamOutcome.failure('stream closed by consumer')
        except Exception as ex:
            logging.exception(f'Caught exception while producing {self.name}')
            result = StreamOutcome.failure(str(ex))
        else:
            result = StreamOutcome.SUCCESS
        outcome.send(result)
        logging.debug(f'<< producer {self.name}')


def start(count: int) -> Tuple[ValueChannel, OutcomeChannel]:
    return StreamingPrimeProducer(count).start()


class ConsumerState(enum.Enum):
    AWAITING_FIRST_VALUE = 'awaiting-first-value'
    STREAMING = 'streaming'
    FINALIZING = 'finalizing'
    DONE = 'done'


class PrimeStreamConsumer:
    '''
    Drains one producer's channels into rendered chunks.

    A header is written when the first value arrives, values are grouped
    group_width to a line, and the terminal outcome is rendered exactly once,
    after which neither channel is read again.
    '''

    def __init__(self, renderer: Renderer, group_width: int = DEFAULT_GROUP_WIDTH):
        if group_width < 1:
            raise ValueError(f'group_width must be positive, got {group_width}')
        self.renderer = renderer
        self.group_width = group_width
        self.state = ConsumerState.AWAITING_FIRST_VALUE
        self.received = 0
        self.outcome: Optional[StreamOutcome] = None

    def consume(self, count: int, values: ValueChannel,
                outcome: OutcomeChannel) -> Generator[str, None, None]:
        if self.state is not ConsumerState.AWAITING_FIRST_VALUE:
            raise RuntimeError('PrimeStreamConsumer instances are single-use')

        try:
            while self.state is not ConsumerState.DONE:
                channel, item = select(values, outcome)
                if channel is values:
                    yield self._on_value(count, item)
                else:
                    self.state = ConsumerState.FINALIZING
                    self.outcome = item
                    chunk = self._finalize(count, item)
                    self.state = ConsumerState.DONE
                    yield chunk
        finally:
            # Releases a producer blocked on send when we stop early.
            values.close()

    def _on_value(self, count: int, value: int) -> str:
        chunk = ''
        if self.state is ConsumerState.AWAITING_FIRST_VALUE:
            chunk += self.renderer.header(count)
            self.state = ConsumerState.STREAMING
        chunk += self.renderer.value(value)
        self.received += 1
        if self.received % self.group_width == 0:
            chunk += self.renderer.line_break()
        return chunk

    def _finalize(self, count: int, outcome: StreamOutcome) -> str:
        if outcome.success:
            logging.debug(f'Prime stream finished after {self.received} values.')
            return self.renderer.footer()
        logging.debug(f'Prime stream failed after {self.received} values: {outcome.reason}')
        partial = self.received > 0
        return self.renderer.error(count, outcome.reason, partial)


def stream_primes(count: int, renderer: Renderer,
                  group_width: int = DEFAULT_GROUP_WIDTH) -> Generator[str, None, None]:
    # Nothing is started until the first read.
    consumer = PrimeStreamConsumer(renderer, group_width=group_width)
    values, outcome = start(count)
    yield from consumer.consume(count, values, outcome)
