"""
Registry of the payment gateways enabled for the network
"""
import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from werkzeug.utils import import_string

from prosites.core.base import BaseService
from prosites.core.constants import CURRENCIES, TRIAL_GATEWAY_KEY, TRIAL_GATEWAY_LABEL
from prosites.services.site_directory import SiteDirectory

@dataclass(frozen=True)
class GatewayInfo:
    name: str
    implementation: Any

class GatewayRegistry(BaseService):
    """
    Resolves enabled gateways from ``GATEWAYS_ENABLED`` and answers
    naming, membership and currency questions about them.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 sites: Optional[SiteDirectory] = None,
                 currencies: Optional[Dict[str, Dict[str, Any]]] = None):
        super().__init__(config)
        self.sites = sites
        self.currencies = copy.deepcopy(CURRENCIES if currencies is None else currencies)

    def initialize(self) -> bool:
        self.load_gateway_currencies()
        return bool(self.get_gateways())

    def _enabled(self) -> Iterable[Any]:
        enabled = self.config.get('GATEWAYS_ENABLED') or []
        if isinstance(enabled, str):
            enabled = [enabled]
        return enabled

    def get_gateways(self) -> Dict[str, GatewayInfo]:
        """
        Enabled gateways keyed by gateway key

        Entries that cannot be imported or have no ``get_name`` are skipped.
        """
        gateways = {}

        for identifier in self._enabled():
            implementation = import_string(identifier, silent=True) if isinstance(identifier, str) else identifier
            get_name = getattr(implementation, 'get_name', None)

            if not callable(get_name):
                self.logger.debug(f"Skipping gateway without a name: {identifier}")
                continue

            for key, name in get_name().items():
                gateways[key] = GatewayInfo(name=name, implementation=implementation)

        return gateways

    def get_nice_name(self, gateway_key: str) -> str:
        """Display name of a gateway; keys are matched case-insensitively"""
        key = (gateway_key or '').lower()
        gateways = self.get_gateways()

        if key in gateways:
            return gateways[key].name
        if key == TRIAL_GATEWAY_KEY:
            return TRIAL_GATEWAY_LABEL
        return gateway_key

    def is_only_active(self, gateway_key: str) -> bool:
        gateways = self.get_gateways()
        return len(gateways) == 1 and gateway_key in gateways

    def is_last_gateway_used(self, blog_id: int, gateway_key: str) -> bool:
        if self.sites is None:
            return False
        last_gateway = self.sites.last_gateway(blog_id)
        return bool(last_gateway) and last_gateway == gateway_key

    def load_gateway_currencies(self):
        """Record which enabled gateways support each known currency"""
        for key, gateway in self.get_gateways().items():
            loader = getattr(gateway.implementation, 'get_supported_currencies', None)
            if not callable(loader):
                continue

            for code in loader():
                currency = self.currencies.get(code)
                if currency is None:
                    self.logger.debug(f"Gateway {key} lists unknown currency {code}")
                    continue
                if key not in currency['supported_by']:
                    currency['supported_by'].append(key)

    def supports_currency(self, currency_code: str, gateway_key: str) -> bool:
        currency = self.currencies.get(currency_code)
        if currency is None:
            return False
        return gateway_key in currency.get('supported_by', [])

    def currencies_for(self, gateway_key: str) -> List[str]:
        """Currency codes a gateway supports, as loaded by ``load_gateway_currencies``"""
        return [code for code in self.currencies if self.supports_currency(code, gateway_key)]
