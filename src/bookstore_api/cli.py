"""
Console entry point exposing the suite's invoke tasks as `bookstore-tests`.
"""

from invoke import Program

from bookstore_api import __version__, namespace

program = Program(namespace=namespace, version=__version__, name='bookstore-tests',
                  binary='bookstore-tests')
