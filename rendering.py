from typing import Optional

from flask import render_template


class Renderer:
    '''
    Turns the events of a prime stream (and one-shot results) into text
    chunks written to the response.
    '''

    def header(self, count: int) -> str:
        raise NotImplementedError

    def value(self, value: int) -> str:
        raise NotImplementedError

    def line_break(self) -> str:
        raise NotImplementedError

    def footer(self) -> str:
        raise NotImplementedError

    def error(self, count: int, reason: Optional[str], partial: bool) -> str:
        raise NotImplementedError

    def results(self, title: str, message: str, details: Optional[str] = None) -> str:
        raise NotImplementedError


def primes_message(count: int) -> str:
    return f'First {count} prime numbers:'


def primes_error_message(count: int) -> str:
    return f'Cannot calculate first {count} prime numbers'


class HtmlRenderer(Renderer):
    # Needs an application context; streamed responses keep it alive with
    # flask.stream_with_context.

    def header(self, count: int) -> str:
        return render_template('primes_header.html', title='Success',
                               message=primes_message(count))

    def value(self, value: int) -> str:
        return f'{value}  '

    def line_break(self) -> str:
        return '<br>\n'

    def footer(self) -> str:
        return render_template('primes_footer.html')

    def error(self, count: int, reason: Optional[str], partial: bool) -> str:
        if partial:
            # The page is already open; close the value block and report inline.
            return render_template('primes_footer.html',
                                   error=primes_error_message(count), details=reason)
        return self.results('Error', primes_error_message(count), reason)

    def results(self, title: str, message: str, details: Optional[str] = None) -> str:
        return render_template('results.html', title=title, message=message, details=details)


class TextRenderer(Renderer):
    def header(self, count: int) -> str:
        return f'# {primes_message(count)[:-1]}\n'

    def value(self, value: int) -> str:
        return f'{value} '

    def line_break(self) -> str:
        return '\n'

    def footer(self) -> str:
        return '\n# OK\n'

    def error(self, count: int, reason: Optional[str], partial: bool) -> str:
        prefix = '\n' if partial else ''
        return f'{prefix}# Error: {primes_error_message(count)}: {reason}\n'

    def results(self, title: str, message: str, details: Optional[str] = None) -> str:
        lines = [f'# {title}: {message}']
        if details:
            lines.append(f'# {details}')
        return '\n'.join(lines) + '\n'
