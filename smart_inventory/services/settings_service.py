import logging

from sqlalchemy.orm import Session

from smart_inventory.database import commit
from smart_inventory.models.app_setting import AppSetting
from smart_inventory.services.currency import Currency, find_currency, require_currency

logger = logging.getLogger(__name__)

CURRENCY_KEY = "currency"


def get_setting(db: Session, key: str) -> str | None:
    setting = db.get(AppSetting, key)
    return setting.value if setting else None


def set_setting(db: Session, key: str, value: str) -> AppSetting:
    setting = db.get(AppSetting, key)
    if setting is None:
        setting = AppSetting(key=key, value=value)
        db.add(setting)
    else:
        setting.value = value
    commit(db)
    return setting


def load_currency(db: Session, default: str) -> Currency:
    """Saved currency choice, or the configured default when none was saved."""
    return find_currency(get_setting(db, CURRENCY_KEY) or default)


def save_currency(db: Session, code: str) -> Currency:
    currency = require_currency(code)
    set_setting(db, CURRENCY_KEY, currency.code)
    logger.info("Display currency set to %s", currency.code)
    return currency
