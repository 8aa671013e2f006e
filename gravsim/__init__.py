"""Real-time N-body gravity simulator with a pygame view and a command console."""

__version__ = "0.1.0"