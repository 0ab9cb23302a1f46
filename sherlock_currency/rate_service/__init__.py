"""Rate Service package.

Получение актуальных курсов у внешнего провайдера (Frankfurter)
и краткосрочное хранение их в кеше rates.json.

Публичные точки входа:
- api_clients.FrankfurterClient.fetch_rate() — один запрос курса
- storage.RateCache — кеш курсов с ограниченным сроком свежести
"""

from __future__ import annotations

__all__ = [
    "config",
    "api_clients",
    "storage",
]
