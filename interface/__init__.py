"""
Interface package: communication protocols for chessbot.

Modules:
    uci — Universal Chess Interface (UCI) protocol handler.
          Reads commands from stdin, writes responses to stdout.
          Run with: python -m interface.uci
"""
