"""
Сборка resolved option set для одной попытки.

build_options - чистая функция: одинаковые входы дают одинаковый результат,
поэтому цикл повторов вызывает её заново на каждой попытке.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

from .config import RequestExtras, RequestSpec

logger = logging.getLogger(__name__)

_EMPTY_EXTRAS = RequestExtras()


def _stringify(value: Any) -> Any:
    """
    Привести значение data к содержимому multipart поля.

    Скаляры приводятся к строке, bytes передаются как есть,
    всё остальное (dict, list, None) кодируется в JSON.
    bool отправляется как "1" (True) или пустая строка (False).
    """
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (str, int, float)):
        return str(value)
    if isinstance(value, bytes):
        return value
    return json.dumps(value)


def build_options(
    method: str,
    spec: RequestSpec,
    persistent: Mapping[str, Any],
    extras: Optional[RequestExtras] = None
) -> Dict[str, Any]:
    """
    Объединить постоянные опции клиента и per-call состояние.

    Порядок:
        1. Копия постоянных опций
        2. timeout
        3. proxy
        4. headers (объединение, per-call выигрывает)
        5. multipart
        6. body
        7. query
        8. data: multipart > body > json > form (только POST) > отброшено

    Args:
        method: HTTP метод
        spec: Per-call состояние
        persistent: Постоянные опции клиента
        extras: query / data / as_json конкретного глагола

    Returns:
        Новый словарь опций для транспорта

    Example:
        >>> build_options("POST", RequestSpec(), {}, RequestExtras(data={"a": 1}))
        {'timeout': 3.0, 'form_params': {'a': 1}}
    """
    extras = extras or _EMPTY_EXTRAS
    opts: Dict[str, Any] = dict(persistent)

    if spec.timeout is not None:
        opts['timeout'] = spec.timeout

    if spec.proxy is not None:
        opts['proxy'] = spec.proxy

    if spec.headers:
        headers = dict(opts.get('headers') or {})
        headers.update(spec.headers)
        opts['headers'] = headers

    if spec.multipart:
        opts['multipart'] = [part.as_dict() for part in spec.multipart]

    if spec.body is not None:
        opts['body'] = spec.body

    if extras.query:
        opts['query'] = dict(extras.query)

    if extras.data:
        data = extras.data

        if spec.multipart:
            # Обычные поля становятся дополнительными multipart частями
            for name, value in data.items():
                opts['multipart'].append({'name': name, 'contents': _stringify(value)})
        elif opts.get('body') is not None:
            # Сырое тело не перезаписываем
            pass
        elif extras.as_json:
            opts['json'] = data
        elif method.upper() == 'POST':
            opts['form_params'] = data
        else:
            logger.warning(
                "Dropping request data for %s: no encoding applies without as_json", method.upper()
            )

    return opts
