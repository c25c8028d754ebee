#!/usr/bin/env python3

from math import prod
from typing import List, NamedTuple, Tuple


class InvalidArgument(ValueError):
    def __init__(self, value: int):
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f'Invalid argument number {self.value}'


class Factor(NamedTuple):
    base: int
    exponent: int


Factorization = List[Factor]


def compute_product(factorization: Factorization) -> int:
    return prod(pow(b, e) for (b, e) in factorization)


def _divide_out(n: int, d: int) -> Tuple[int, int]:
    exponent = 0
    while n % d == 0:
        n //= d
        exponent += 1
    return n, exponent


def factorize(n: int) -> Factorization:
    '''
    Return the prime factorization of n as Factor pairs sorted by base.

    Trial division by 2 and then by every odd d while d * d <= n; whatever
    remains above 1 afterwards is the single prime factor larger than the
    square root of the input.
    '''
    if n < 2:
        raise InvalidArgument(n)

    factorization: Factorization = []

    n, exponent = _divide_out(n, 2)
    if exponent > 0:
        factorization.append(Factor(2, exponent))

    d = 3
    while d * d <= n:
        n, exponent = _divide_out(n, d)
        if exponent > 0:
            factorization.append(Factor(d, exponent))
        d += 2

    if n > 1:
        factorization.append(Factor(n, 1))

    return factorization


def format_factorization(n: int, factorization: Factorization) -> str:
    return f'Prime Factors of {n} = ' + ' * '.join(f'{b}^{e}' for (b, e) in factorization)


def format_compact(factorization: Factorization) -> str:
    return ' '.join(f'{b}^{e}' for (b, e) in sorted(factorization))
