"""
Подсказки моделей из каталога магазина (Shopware 6 Admin API)

Только чтение: POST /search/product - это запрос поиска, данные не меняются.
"""

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import aiohttp

from shoe_repair.core.config import Config
from shoe_repair.domain.pricing import format_price


logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
SEARCH_LIMIT = 10
MAX_SUGGESTIONS = 5
TOKEN_EXPIRY_BUFFER = 60  # секунд
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=10)


class CatalogError(Exception):
    """Ошибка обращения к каталогу"""


@dataclass(frozen=True)
class ProductSuggestion:
    """Подсказка товара для формы заказа"""

    id: str
    name: str
    price: str
    url: str
    image_url: str | None = None
    manufacturer: str | None = None


def normalize_manufacturer(name: str) -> str:
    """'La Sportiva' -> 'lasportiva'"""
    return re.sub(r"[^a-z0-9]", "", name.lower())


def _manufacturer_matches(requested: str, shop_name: str) -> bool:
    wanted = normalize_manufacturer(requested)
    actual = normalize_manufacturer(shop_name)
    return wanted in actual or actual in wanted


def _find_included(included: list[dict], entity_type: str, entity_id: str | None) -> dict | None:
    if not entity_id:
        return None
    for entity in included:
        if entity.get("type") == entity_type and entity.get("id") == entity_id:
            return entity
    return None


def _relation_id(item: dict, relation: str) -> str | None:
    data = (item.get("relationships") or {}).get(relation, {}).get("data")
    return data.get("id") if isinstance(data, dict) else None


def parse_search_response(
    data: dict[str, Any],
    manufacturer: str | None,
    shop_base_url: str,
) -> list[ProductSuggestion]:
    """
    Разбор ответа /search/product (JSON:API)

    Args:
        data: Ответ API
        manufacturer: Производитель из формы (фильтр, может быть пустым)
        shop_base_url: Адрес магазина для ссылок на товар

    Returns:
        Не более MAX_SUGGESTIONS подсказок
    """
    items = data.get("data")
    if not isinstance(items, list):
        return []
    included = data.get("included") or []

    suggestions: list[ProductSuggestion] = []
    for item in items:
        attrs = item.get("attributes") or item

        manufacturer_name = None
        mfg = _find_included(included, "product_manufacturer", _relation_id(item, "manufacturer"))
        if mfg:
            manufacturer_name = (mfg.get("attributes") or {}).get("name")

        if manufacturer and manufacturer_name:
            if not _manufacturer_matches(manufacturer, manufacturer_name):
                continue

        price = format_price(Decimal("0"))
        prices = attrs.get("price")
        if isinstance(prices, list) and prices:
            gross = prices[0].get("gross") or prices[0].get("net") or 0
            price = format_price(gross)

        image_url = None
        cover = _find_included(included, "product_media", _relation_id(item, "cover"))
        if cover:
            media = _find_included(included, "media", _relation_id(cover, "media"))
            if media:
                image_url = (media.get("attributes") or {}).get("url")

        suggestions.append(
            ProductSuggestion(
                id=item["id"],
                name=attrs.get("name") or "Unbekanntes Produkt",
                price=price,
                url=f"{shop_base_url}/detail/{item['id']}",
                image_url=image_url,
                manufacturer=manufacturer_name,
            )
        )

        if len(suggestions) >= MAX_SUGGESTIONS:
            break

    return suggestions


class CatalogSearchClient:
    """
    Клиент поиска по каталогу

    OAuth-токен (client credentials) кэшируется до истечения минус 60 секунд.
    """

    def __init__(
        self,
        api_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        shop_base_url: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_url = (api_url or Config.SHOPWARE_API_URL).rstrip("/")
        self.access_key_id = access_key_id or Config.SHOPWARE_ACCESS_KEY_ID
        self.secret_access_key = secret_access_key or Config.SHOPWARE_SECRET_ACCESS_KEY
        self.shop_base_url = (shop_base_url or Config.SHOP_BASE_URL).rstrip("/")
        self._clock = clock
        self._token: str | None = None
        self._token_expiry: float = 0.0

    @property
    def configured(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    async def search_products(self, manufacturer: str | None, query: str | None) -> list[ProductSuggestion]:
        """
        Поиск товаров по производителю и названию модели

        Любая ошибка (нет ключей, сеть, ответ API) даёт пустой список.

        Args:
            manufacturer: Производитель (например, "La Sportiva")
            query: Часть названия модели (например, "Solution")

        Returns:
            Не более 5 подсказок
        """
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []
        if not self.configured:
            logger.debug("Shopware API не настроен - подсказки отключены")
            return []

        try:
            token = await self._get_access_token()
            data = await self._search(token, query.strip())
            return parse_search_response(data, manufacturer, self.shop_base_url)
        except Exception as e:
            logger.error(f"Ошибка поиска в каталоге Shopware: {e}")
            return []

    async def _get_access_token(self) -> str:
        now = self._clock()
        if self._token and now < self._token_expiry - TOKEN_EXPIRY_BUFFER:
            return self._token

        payload = {
            "grant_type": "client_credentials",
            "client_id": self.access_key_id,
            "client_secret": self.secret_access_key,
        }
        data = await self._post_json("/oauth/token", payload)
        if "access_token" not in data:
            raise CatalogError("Shopware: в ответе нет access_token")

        self._token = data["access_token"]
        self._token_expiry = now + float(data.get("expires_in", 600))
        return self._token

    async def _search(self, token: str, query: str) -> dict[str, Any]:
        payload = {
            "limit": SEARCH_LIMIT,
            "filter": [{"type": "contains", "field": "name", "value": query}],
            "associations": {
                "manufacturer": {},
                "cover": {"associations": {"media": {}}},
            },
            "includes": {
                "product": ["id", "name", "productNumber", "price", "cover", "manufacturer"],
                "product_manufacturer": ["name"],
                "product_media": ["media"],
                "media": ["url"],
            },
        }
        return await self._post_json("/search/product", payload, token=token)

    async def _post_json(
        self, path: str, payload: dict[str, Any], token: str | None = None
    ) -> dict[str, Any]:
        headers = {"Content-Type": "application/json", "Accept": "application/vnd.api+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        async with aiohttp.ClientSession(timeout=REQUEST_TIMEOUT) as session:
            async with session.post(f"{self.api_url}{path}", json=payload, headers=headers) as response:
                if response.status >= 400:
                    raise CatalogError(f"Shopware {path}: HTTP {response.status}")
                return await response.json(content_type=None)
