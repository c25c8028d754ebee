#!/usr/bin/env python3

from typing import Any, Dict, Iterator

import requests


def request_factorization(url: str, number: int) -> Dict[str, Any]:
    response = requests.post(f'{url}/factorize', json={'number': number})
    return response.json()


def stream_primes(url: str, count: int) -> Iterator[str]:
    with requests.post(f'{url}/primes', json={'count': count}, stream=True) as response:
        response.raise_for_status()
        for line in response.iter_lines(decode_unicode=True):
            if line:
                yield line


def main():
    from argparse import ArgumentParser
    parser = ArgumentParser(
        description='Factorize a number and/or stream the first N primes from the server',
    )
    parser.add_argument('url', help='Server base URL, e.g. http://localhost:4001')
    parser.add_argument('--factorize', type=int, metavar='N',
                        help='Number to factorize')
    parser.add_argument('--primes', type=int, metavar='N',
                        help='How many primes to stream')
    args = parser.parse_args()
    url = args.url.rstrip('/')

    if args.factorize is None and args.primes is None:
        parser.error('nothing to do: pass --factorize and/or --primes')

    if args.factorize is not None:
        result = request_factorization(url, args.factorize)
        if 'error' in result:
            print(f'{args.factorize} = ? ({result["error"]}: {result["details"]})')
        else:
            print(f'{args.factorize} =', result['factorization_str'])

    if args.primes is not None:
        for line in stream_primes(url, args.primes):
            print(line, flush=True)


if __name__ == '__main__':
    main()
