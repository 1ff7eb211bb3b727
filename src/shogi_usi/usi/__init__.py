"""Minimal USI (Universal Shogi Interface) client."""

from shogi_usi.usi.channel import Agent, Channel
from shogi_usi.usi.driver import UsiDriver
from shogi_usi.usi.messages import BestMove, Id, IdType, Info, ReadyOk, UsiMessage, UsiOk

__all__ = [
    "Agent",
    "BestMove",
    "Channel",
    "Id",
    "IdType",
    "Info",
    "ReadyOk",
    "UsiDriver",
    "UsiMessage",
    "UsiOk",
]
