#!/usr/bin/env python3

import logging
import os
import re
from typing import Any, Dict

from flask import Flask, Response, jsonify, request, stream_with_context
from waitress import serve

from factorization import InvalidArgument, factorize, format_compact, format_factorization
from prime_stream import DEFAULT_GROUP_WIDTH, stream_primes
from rendering import HtmlRenderer, TextRenderer, primes_error_message


DEFAULT_PORT = 4001

# Inputs are limited to what fits an unsigned 64-bit integer.
MAX_NUMBER = 2 ** 64 - 1


class InvalidNumber(ValueError):
    pass


# Plain decimal integers only, no underscores or other Python literal syntax.
NUMBER_RE = re.compile(r'[+-]?[0-9]+')


def parse_number(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidNumber(f'invalid syntax: {value!r}')
    text = str(value).strip()
    if not NUMBER_RE.fullmatch(text):
        raise InvalidNumber(f'invalid syntax: {value!r}')
    number = int(text)
    if number > MAX_NUMBER:
        raise InvalidNumber(f'value out of range: {value!r}')
    return number


class Worker:
    def __init__(self):
        logging.info('Initializing...')
        logging.info('Done.')

    def do_task(self, number: int) -> Dict[str, Any]:
        logging.info(f'Finding prime factorization of {number}...')
        factorization = factorize(number)
        logging.info('Done.')

        return {
            'number': number,
            'factorization': factorization,
            'factorization_str': format_compact(factorization),
            'message': format_factorization(number, factorization),
        }


def create_app(group_width: int = DEFAULT_GROUP_WIDTH):
    app = Flask(__name__, static_folder='public', static_url_path='/static')
    app.config['GROUP_WIDTH'] = group_width
    worker = Worker()
    html = HtmlRenderer()
    text = TextRenderer()

    @app.route('/', methods=['GET'])
    def index():
        return app.send_static_file('index.html')

    @app.route('/primefactors', methods=['POST'])
    def prime_factors():
        number_s = request.form.get('number', '')
        logging.info(f'Got number from input form: {number_s!r}')
        try:
            number = parse_number(number_s)
        except InvalidNumber as ex:
            return html.results('Error', 'Invalid number', str(ex))

        if number <= 0:
            return html.results('Error', f'Cannot calculate prime factors of {number}',
                                'It must be greater than zero.')
        try:
            output_data = worker.do_task(number)
        except InvalidArgument as ex:
            return html.results('Error', f'Cannot calculate prime factors of {number}', str(ex))
        return html.results('Success', output_data['message'])

    @app.route('/primenumbers', methods=['POST'])
    def prime_numbers():
        limit_s = request.form.get('limit', '')
        logging.info(f'Got limit from input form: {limit_s!r}')
        try:
            count = parse_number(limit_s)
        except InvalidNumber as ex:
            return html.results('Error', 'Invalid number', str(ex))

        if count <= 0:
            return html.results('Error', primes_error_message(count),
                                'Limit must be greater than zero.')

        chunks = stream_primes(count, html, group_width=app.config['GROUP_WIDTH'])
        return Response(stream_with_context(chunks), mimetype='text/html')

    @app.route('/factorize', methods=['POST'])
    def factorize_json():
        input_data = request.get_json(silent=True) or {}
        raw = input_data.get('number')
        try:
            number = parse_number(raw)
            output_data = worker.do_task(number)
        except InvalidNumber as ex:
            return jsonify({'number': raw, 'error': 'Invalid number', 'details': str(ex)}), 400
        except InvalidArgument as ex:
            return jsonify({
                'number': number,
                'error': f'Cannot calculate prime factors of {number}',
                'details': str(ex),
            }), 400
        return jsonify(output_data)

    @app.route('/primes', methods=['POST'])
    def primes_text():
        input_data = request.get_json(silent=True) or {}
        raw = input_data.get('count')
        try:
            count = parse_number(raw)
        except InvalidNumber as ex:
            return jsonify({'count': raw, 'error': 'Invalid number', 'details': str(ex)}), 400

        logging.info(f'Streaming first {count} prime numbers...')
        chunks = stream_primes(count, text, group_width=app.config['GROUP_WIDTH'])
        return Response(chunks, mimetype='text/plain')

    return app


def main():
    from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter
    parser = ArgumentParser(
        description='Launch HTTP server computing prime factorizations and streaming prime numbers.',
        formatter_class=ArgumentDefaultsHelpFormatter)
    parser.add_argument('--host', type=str, default='0.0.0.0',
                        help='Hostname/IP to listen on.')
    parser.add_argument('--port', type=int, default=None,
                        help=f'TCP port to listen on (default: $VCAP_APP_PORT or {DEFAULT_PORT}).')
    parser.add_argument('--threads', type=int, default=4,
                        help='Number of threads to use for HTTP server.')
    parser.add_argument('--group-width', type=int, default=DEFAULT_GROUP_WIDTH,
                        help='Number of primes per line in streamed output.')
    parser.add_argument('--log-level',
                        choices=('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'),
                        default='INFO',
                        help='Minimum severity level of log messages to show')
    args = parser.parse_args()

    logging.basicConfig(
        format='[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        level=args.log_level)

    if args.group_width < 1:
        parser.error('--group-width must be positive')

    port = args.port
    if port is None:
        port_s = os.environ.get('VCAP_APP_PORT')
        if port_s:
            port = int(port_s)
        else:
            logging.warning(f'VCAP_APP_PORT not set. Defaulting to {DEFAULT_PORT}')
            port = DEFAULT_PORT

    app = create_app(group_width=args.group_width)
    logging.info(f'Starting server on port {port}')
    serve(app, host=args.host, port=port, threads=args.threads)


if __name__ == '__main__':
    main()
