"""
Base class for payment gateways
"""
from typing import Dict, List

class BaseGateway:
    """
    A payment gateway that can be enabled for the network

    Subclasses set ``key``, ``display_name`` and ``currencies``.
    """

    key: str = ''
    display_name: str = ''
    currencies: List[str] = []

    @classmethod
    def get_name(cls) -> Dict[str, str]:
        """Gateway key -> display name"""
        return {cls.key: cls.display_name}

    @classmethod
    def get_supported_currencies(cls) -> List[str]:
        return list(cls.currencies)
