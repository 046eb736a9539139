"""
Константы приложения - статусы заказов, варианты опций, справочники
"""


class OrderStatus:
    """Статусы заказов на ремонт"""

    DRAFT = "DRAFT"  # Черновик (сохранён из формы)
    SUBMITTED = "SUBMITTED"  # Отправлен клиентом
    RECEIVED = "RECEIVED"  # Обувь получена в мастерской
    INSPECTED = "INSPECTED"  # Осмотрена
    REPAIRING = "REPAIRING"  # В ремонте
    READY = "READY"  # Готова
    SHIPPED = "SHIPPED"  # Отправлена клиенту
    COMPLETED = "COMPLETED"  # Завершён
    CANCELLED = "CANCELLED"  # Отменён
    ON_HOLD = "ON_HOLD"  # Ожидание (вопрос к клиенту)

    @classmethod
    def all_statuses(cls) -> list[str]:
        """Список всех статусов"""
        return [
            cls.DRAFT,
            cls.SUBMITTED,
            cls.RECEIVED,
            cls.INSPECTED,
            cls.REPAIRING,
            cls.READY,
            cls.SHIPPED,
            cls.COMPLETED,
            cls.CANCELLED,
            cls.ON_HOLD,
        ]

    @classmethod
    def get_status_emoji(cls, status: str) -> str:
        """Получение эмодзи для статуса"""
        emojis = {
            cls.DRAFT: "📝",
            cls.SUBMITTED: "🆕",
            cls.RECEIVED: "📦",
            cls.INSPECTED: "🔍",
            cls.REPAIRING: "🔧",
            cls.READY: "✅",
            cls.SHIPPED: "🚚",
            cls.COMPLETED: "🏁",
            cls.CANCELLED: "❌",
            cls.ON_HOLD: "⏳",
        }
        return emojis.get(status, "")

    @classmethod
    def get_status_name(cls, status: str) -> str:
        """Получение названия статуса для клиента (на немецком)"""
        names = {
            cls.DRAFT: "Entwurf",
            cls.SUBMITTED: "Eingereicht",
            cls.RECEIVED: "Eingetroffen",
            cls.INSPECTED: "Begutachtet",
            cls.REPAIRING: "In Reparatur",
            cls.READY: "Fertig",
            cls.SHIPPED: "Versendet",
            cls.COMPLETED: "Abgeschlossen",
            cls.CANCELLED: "Storniert",
            cls.ON_HOLD: "Wartend (Rückfrage)",
        }
        return names.get(status, status)


class EdgeRubber:
    """Решение по замене рандгумми (боковой резины)"""

    YES = "YES"
    NO = "NO"
    DISCRETION = "DISCRETION"  # На усмотрение мастера

    @classmethod
    def all_options(cls) -> list[str]:
        """Список всех вариантов"""
        return [cls.YES, cls.NO, cls.DISCRETION]

    @classmethod
    def get_label(cls, option: str | None) -> str:
        labels = {
            cls.YES: "Ja",
            cls.NO: "Nein",
            cls.DISCRETION: "Nach Ermessen",
        }
        if option is None:
            return "Wird von uns festgelegt"
        return labels.get(option, option)


class SoleType:
    """Типы подошвенной резины"""

    VIBRAM_XS_GRIP = "vibram_xs_grip"
    VIBRAM_XS_GRIP_2 = "vibram_xs_grip_2"
    VIBRAM_XS_EDGE = "vibram_xs_edge"
    STEALTH_C4 = "stealth_c4"
    STEALTH_HF = "stealth_hf"
    BOREAL = "boreal"
    ORIGINAL_LA_SPORTIVA = "original_la_sportiva"
    ORIGINAL_SCARPA = "original_scarpa"

    @classmethod
    def all_types(cls) -> list[str]:
        """Список всех типов подошв"""
        return [
            cls.VIBRAM_XS_GRIP,
            cls.VIBRAM_XS_GRIP_2,
            cls.VIBRAM_XS_EDGE,
            cls.STEALTH_C4,
            cls.STEALTH_HF,
            cls.BOREAL,
            cls.ORIGINAL_LA_SPORTIVA,
            cls.ORIGINAL_SCARPA,
        ]


class Salutation:
    """Обращения"""

    HERR = "Herr"
    FRAU = "Frau"
    DIVERS = "Divers"

    @classmethod
    def all_salutations(cls) -> list[str]:
        return [cls.HERR, cls.FRAU, cls.DIVERS]


# Производители скальных туфель
MANUFACTURERS: tuple[str, ...] = (
    "La Sportiva",
    "Scarpa",
    "Five Ten",
    "Boreal",
    "Ocun",
    "Red Chili",
    "Tenaya",
    "Evolv",
    "Mad Rock",
    "Butora",
    "Unparallel",
    "So iLL",
    "Andere",
)

# Размеры 24, 24.5, ... 50
SHOE_SIZES: tuple[str, ...] = tuple(
    str(24 + i // 2) if i % 2 == 0 else f"{24 + i // 2}.5" for i in range(53)
)

# Количество: 0.5 = одна туфля, 1 = пара
MAX_QUANTITY = 10
QUANTITY_STEP = "0.5"
QUANTITY_OPTIONS: tuple[tuple[str, str], ...] = (
    ("0.5", "0,5 (Einzelschuh)"),
    ("1", "1 (Paar)"),
    ("1.5", "1,5"),
    ("2", "2 (Paare)"),
    ("2.5", "2,5"),
    ("3", "3 (Paare)"),
    ("3.5", "3,5"),
    ("4", "4 (Paare)"),
    ("4.5", "4,5"),
    ("5", "5 (Paare)"),
)

# Страны доставки
SUPPORTED_COUNTRIES: dict[str, str] = {
    "DE": "Deutschland",
    "AT": "Österreich",
    "CH": "Schweiz",
    "NL": "Niederlande",
    "BE": "Belgien",
    "LU": "Luxemburg",
    "FR": "Frankreich",
    "IT": "Italien",
    "DK": "Dänemark",
    "PL": "Polen",
    "CZ": "Tschechien",
}

# Актор для событий, созданных формой приёма заказов
INTAKE_ACTOR = "kunde@online-formular"

DEFAULT_TRACKING_CARRIER = "DHL"
