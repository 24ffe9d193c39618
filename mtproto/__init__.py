"""MTProto building blocks: TL primitives, transport framing, plain messages, sessions and handshake maths."""

__version__ = "0.1.0"