"""Static subscription catalogue and plan-tier checks."""

from decimal import Decimal
from typing import Optional

from app import models
from app.models.subscription import PlanType, SubscriptionStatus

PLANS = [
    {
        "id": PlanType.FREE,
        "name": "Free",
        "name_lv": "Bezmaksas",
        "name_ru": "Бесплатный",
        "price": Decimal("0.00"),
        "features": [
            "Basic service listings",
            "Standard search visibility",
            "Basic customer support",
        ],
        "features_lv": [
            "Pamatpakalpojumu saraksts",
            "Standarta meklēšanas redzamība",
            "Pamata klientu atbalsts",
        ],
        "features_ru": [
            "Базовые объявления услуг",
            "Стандартная видимость в поиске",
            "Базовая поддержка клиентов",
        ],
    },
    {
        "id": PlanType.BASIC,
        "name": "Basic",
        "name_lv": "Pamata",
        "name_ru": "Базовый",
        "price": Decimal("9.99"),
        "features": [
            "Priority search visibility",
            "Enhanced profile features",
            "Basic analytics",
            "Priority customer support",
        ],
        "features_lv": [
            "Prioritāte meklēšanā",
            "Uzlabotas profila funkcijas",
            "Pamata analīze",
            "Prioritāte klientu atbalstā",
        ],
        "features_ru": [
            "Приоритетная видимость в поиске",
            "Расширенные функции профиля",
            "Базовая аналитика",
            "Приоритетная поддержка клиентов",
        ],
    },
    {
        "id": PlanType.PREMIUM,
        "name": "Premium",
        "name_lv": "Premium",
        "name_ru": "Премиум",
        "price": Decimal("19.99"),
        "features": [
            "Top search results",
            "Verified badge",
            "Advanced analytics",
            "Priority customer support",
            "Featured in category pages",
            "Enhanced profile customization",
        ],
        "features_lv": [
            "Top meklēšanas rezultāti",
            "Verificēta zīme",
            "Uzlabota analīze",
            "Prioritāte klientu atbalstā",
            "Iekļauts kategoriju lapās",
            "Uzlabota profila pielāgošana",
        ],
        "features_ru": [
            "Топ результаты поиска",
            "Значок верификации",
            "Расширенная аналитика",
            "Приоритетная поддержка клиентов",
            "Рекомендуемые в категориях",
            "Расширенная настройка профиля",
        ],
    },
    {
        "id": PlanType.ENTERPRISE,
        "name": "Enterprise",
        "name_lv": "Uzņēmums",
        "name_ru": "Предприятие",
        "price": Decimal("49.99"),
        "features": [
            "All Premium features",
            "Dedicated account manager",
            "Custom integrations",
            "White-label options",
            "API access",
            "Priority onboarding",
        ],
        "features_lv": [
            "Visas Premium funkcijas",
            "Dedzēts konta vadītājs",
            "Pielāgotas integrācijas",
            "White-label iespējas",
            "API piekļuve",
            "Prioritāte onboarding",
        ],
        "features_ru": [
            "Все функции Premium",
            "Персональный менеджер",
            "Индивидуальные интеграции",
            "White-label опции",
            "API доступ",
            "Приоритетная адаптация",
        ],
    },
]

BASIC_TIER = frozenset({PlanType.BASIC, PlanType.PREMIUM, PlanType.ENTERPRISE})
PREMIUM_TIER = frozenset({PlanType.PREMIUM, PlanType.ENTERPRISE})


def _active_plan(subscription: Optional[models.Subscription]) -> Optional[PlanType]:
    if subscription is None or subscription.status != SubscriptionStatus.ACTIVE:
        return None
    return subscription.plan_type


def has_basic(subscription: Optional[models.Subscription]) -> bool:
    return _active_plan(subscription) in BASIC_TIER


def has_premium(subscription: Optional[models.Subscription]) -> bool:
    return _active_plan(subscription) in PREMIUM_TIER
