# production/services/capacity.py

import logging

from django.conf import settings
from django.db import transaction

from common.exceptions import InvalidQuantityError
from common.quantities import to_quantity
from production.models import BatchCapacitySetting

logger = logging.getLogger(__name__)


def default_capacity() -> float:
    return float(getattr(settings, "DEFAULT_BATCH_CAPACITY", 5000.0))


def get_batch_capacity(product_type: str) -> float:
    """
    Configured capacity for a product type; missing or non-positive -> default.
    """
    setting = BatchCapacitySetting.objects.filter(product_type=product_type).first()
    if setting is None or setting.capacity is None or setting.capacity <= 0:
        return default_capacity()
    return float(setting.capacity)


@transaction.atomic
def set_batch_capacity(*, product_type: str, capacity) -> BatchCapacitySetting:
    try:
        value = to_quantity(capacity, field_name="capacity")
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc
    if value <= 0:
        raise InvalidQuantityError("capacity must be greater than zero")

    setting, _ = BatchCapacitySetting.objects.update_or_create(
        product_type=product_type.strip(),
        defaults={"capacity": value},
    )

    logger.info(
        "Batch capacity updated",
        extra={"product_type": setting.product_type, "capacity": value},
    )
    return setting
