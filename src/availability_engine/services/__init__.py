"""Clients for the inventory system's option and agent endpoints."""

from .agent_info import AgentInfoClient
from .date_ranges import DateRangeRepository, parse_date_ranges
from .hostconnect import HostConnectClient, Transport
from .option_info import OptionInfo, OptionInfoClient
from .replies import as_list
from .stay_quotes import StayQuoteFetcher, parse_stay_quotes

__all__ = [
    "AgentInfoClient",
    "DateRangeRepository",
    "HostConnectClient",
    "OptionInfo",
    "OptionInfoClient",
    "StayQuoteFetcher",
    "Transport",
    "as_list",
    "parse_date_ranges",
    "parse_stay_quotes",
]
