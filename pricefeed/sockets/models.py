"""
WebSocket API models for the price feed
"""
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class WSMessageType(str, Enum):
    LOGIN = "login"
    SUBSCRIBE = "subscribe"
    PRICES = "prices"


class BaseWSMessage(BaseModel):
    type: WSMessageType = Field(..., description="Message type")


class LoginMessage(BaseWSMessage):
    type: WSMessageType = WSMessageType.LOGIN
    email: str = Field(..., min_length=1, description="Display label, not verified")


class SubscribeMessage(BaseWSMessage):
    type: WSMessageType = WSMessageType.SUBSCRIBE
    # Entries are filtered against the supported tickers, so anything goes here
    stocks: List[Any] = Field(default_factory=list, description="Tickers to subscribe to")


class PricesMessage(BaseWSMessage):
    type: WSMessageType = WSMessageType.PRICES
    prices: Dict[str, float] = Field(..., description="Ticker to current price")
